"""brewdeck — local HTTP facade over the Homebrew command line."""

__version__ = "0.1.0"
