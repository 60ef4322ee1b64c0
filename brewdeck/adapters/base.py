"""
Runner base — the contract between the core and external processes.

Core services only talk to the package manager through a
``CommandRunner``.  The shell runner spawns real processes; the mock
runner answers from canned data.  Swapping one for the other never
touches a call site.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import Callable

from brewdeck.core.models.command import CommandResult, ExternalCommand

# sink(stream_name, chunk), where stream_name is "stdout" or "stderr"
OutputSink = Callable[[str, str], None]


def console_sink(stream_name: str, chunk: str) -> None:
    """Forward a chunk to the host process's own stdout/stderr."""
    target = sys.stderr if stream_name == "stderr" else sys.stdout
    target.write(chunk)
    target.flush()


class CommandRunner(ABC):
    """Abstract base class for command runners.

    To add a new runner:
        1. Subclass CommandRunner
        2. Implement name, is_available, run
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self, executable: str) -> bool:
        """Whether ``executable`` can be launched. Fast, never raises."""

    @abstractmethod
    def run(
        self,
        command: ExternalCommand,
        *,
        sink: OutputSink | None = None,
    ) -> CommandResult:
        """Execute ``command`` to completion.

        Returns:
            CommandResult with trimmed stdout/stderr on exit status 0.

        Raises:
            ExternalCommandFailed: non-zero exit (diagnostics attached).
            OutputLimitExceeded: output grew past the buffer cap.
            ExternalCommandUnavailable: the process could not be started.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
