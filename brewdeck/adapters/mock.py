"""
Mock runner — universal test double for the package manager.

Used in mock mode (``brewdeck web --mock``) and throughout the tests to
answer commands without touching Homebrew.  Responses are registered per
argument prefix; the longest registered prefix of a command's args wins.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Union

from brewdeck.adapters.base import CommandRunner, OutputSink
from brewdeck.core.errors import ExternalCommandFailed, ExternalCommandUnavailable
from brewdeck.core.models.command import CommandResult, ExternalCommand


@dataclass(frozen=True)
class MockResponse:
    """Canned outcome for a command."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    delay: float = 0.0           # seconds to "run" before answering


ResponseFactory = Callable[[ExternalCommand], MockResponse]


class MockCommandRunner(CommandRunner):
    """Universal mock runner for testing.

    By default, every command succeeds with ``default_output``. Can be
    configured with custom responses per argument prefix.
    """

    def __init__(
        self,
        available: bool = True,
        default_output: str = "[mock] executed",
    ):
        self._available = available
        self._default_output = default_output
        self._responses: dict[tuple[str, ...], Union[MockResponse, ResponseFactory]] = {}
        self._call_log: list[ExternalCommand] = []
        self._guard = threading.Lock()
        self._in_flight = 0
        self._max_in_flight = 0

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[ExternalCommand]:
        """All commands this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times run has been called."""
        return len(self._call_log)

    @property
    def max_in_flight(self) -> int:
        """Highest number of commands that were running at the same time."""
        return self._max_in_flight

    def is_available(self, executable: str) -> bool:
        return self._available

    def set_available(self, available: bool) -> None:
        self._available = available

    def set_response(
        self,
        args: tuple[str, ...] | list[str] | str,
        response: MockResponse | ResponseFactory | None = None,
        **kwargs,
    ) -> None:
        """Register a response for commands whose args start with ``args``.

        ``args`` may be a tuple/list or a space-separated string. Pass a
        ``MockResponse``, a factory ``fn(command) -> MockResponse``, or
        ``MockResponse`` fields as keyword arguments.
        """
        key = tuple(args.split()) if isinstance(args, str) else tuple(args)
        self._responses[key] = response if response is not None else MockResponse(**kwargs)

    def set_failure(
        self,
        args: tuple[str, ...] | list[str] | str,
        stderr: str = "Error: mock failure",
        exit_code: int = 1,
        stdout: str = "",
    ) -> None:
        """Configure commands matching ``args`` to exit non-zero."""
        self.set_response(args, stdout=stdout, stderr=stderr, exit_code=exit_code)

    def run(
        self,
        command: ExternalCommand,
        *,
        sink: OutputSink | None = None,
    ) -> CommandResult:
        with self._guard:
            self._call_log.append(command)

        if not self._available:
            raise ExternalCommandUnavailable(
                command.display, f"[Errno 2] No such file or directory: '{command.executable}'",
            )

        response = self._lookup(command)

        with self._guard:
            self._in_flight += 1
            self._max_in_flight = max(self._max_in_flight, self._in_flight)
        try:
            if response.delay:
                time.sleep(response.delay)
        finally:
            with self._guard:
                self._in_flight -= 1

        if sink is not None:
            if response.stdout:
                sink("stdout", response.stdout)
            if response.stderr:
                sink("stderr", response.stderr)

        if response.exit_code != 0:
            raise ExternalCommandFailed(
                command.display,
                response.exit_code,
                stdout=response.stdout.strip(),
                stderr=response.stderr.strip(),
            )

        return CommandResult(
            command=command.display,
            stdout=response.stdout.strip(),
            stderr=response.stderr.strip(),
            exit_code=0,
            duration_ms=int(response.delay * 1000),
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
        self._max_in_flight = 0

    def _lookup(self, command: ExternalCommand) -> MockResponse:
        args = tuple(command.args)
        best: tuple[str, ...] | None = None
        for key in self._responses:
            if args[: len(key)] == key and (best is None or len(key) > len(best)):
                best = key

        if best is None:
            return MockResponse(stdout=self._default_output)

        entry = self._responses[best]
        return entry if isinstance(entry, MockResponse) else entry(command)
