"""Adapters — process bindings for the external package manager.

Public re-exports for convenient access.
"""

from brewdeck.adapters.base import CommandRunner, OutputSink, console_sink
from brewdeck.adapters.mock import MockCommandRunner, MockResponse
from brewdeck.adapters.shell.command import ShellCommandRunner

__all__ = [
    "CommandRunner",
    "MockCommandRunner",
    "MockResponse",
    "OutputSink",
    "ShellCommandRunner",
    "console_sink",
]
