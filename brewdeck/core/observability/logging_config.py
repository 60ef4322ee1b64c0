"""
Logging configuration — one setup call for the CLI and the web server.

``brewdeck.main`` calls ``configure_from_cli`` once per process; modules
just do ``logger = logging.getLogger(__name__)``.

Console level precedence:
    --debug  >  --verbose  >  --quiet  >  BREWDECK_LOG_LEVEL  >  WARNING

A second, independent file sink is enabled by BREWDECK_LOG_FILE
(level from BREWDECK_LOG_FILE_LEVEL, else the console level).  Brew
output from upgrades is logged at INFO, so a file sink at INFO keeps a
record of every upgrade even when the console stays quiet.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "BREWDECK_LOG_LEVEL"
ENV_FILE = "BREWDECK_LOG_FILE"
ENV_FILE_LEVEL = "BREWDECK_LOG_FILE_LEVEL"

# (max level, format, datefmt), checked top to bottom
_CONSOLE_TIERS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(message)s", None),
)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# werkzeug prints one INFO line per HTTP request
_NOISY_LOGGERS = ("werkzeug", "urllib3")


def parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown or empty names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def _console_formatter(numeric_level: int) -> logging.Formatter:
    for ceiling, fmt, datefmt in _CONSOLE_TIERS:
        if numeric_level <= ceiling:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter("%(message)s")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Replace the root logger's handlers with a stderr sink (and optional file).

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path of an additional log file.
        log_file_level: Level for ``log_file``; defaults to ``level``.
        quiet_third_party: Hold werkzeug/urllib3 at WARNING unless the
            console is at DEBUG.
    """
    console_level = parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(file_handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def configure_from_cli(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Apply CLI flags plus BREWDECK_LOG_* variables. Returns the console level."""
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet)
    setup_logging(
        level=level,
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
        quiet_third_party=not debug,
    )
    return level
