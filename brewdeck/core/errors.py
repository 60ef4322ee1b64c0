"""
Error taxonomy — every failure the core can report to a caller.

Core services raise these; the web and CLI layers translate them into
structured payloads / exit codes.  Each error knows its HTTP status and
a stable ``kind`` string so clients can branch on it without parsing
messages.

    BrewDeckError
    ├── ValidationError              400  bad name/query, no process launched
    ├── MutationInProgress           409  lock held, retry later
    ├── ExternalCommandFailed        500  brew ran and exited non-zero
    │   └── OutputLimitExceeded      500  brew produced more than the buffer cap
    ├── MalformedExternalOutput      502  brew succeeded but output is unusable
    └── ExternalCommandUnavailable   503  brew could not be started at all
"""

from __future__ import annotations

from typing import Any


class BrewDeckError(Exception):
    """Base class for all reportable failures."""

    kind: str = "error"
    http_status: int = 500

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details

    def to_dict(self) -> dict[str, Any]:
        """Structured failure payload for the presentation layer."""
        return {
            "error": self.message,
            "kind": self.kind,
            "details": self.details,
        }


class ValidationError(BrewDeckError):
    """A caller-supplied name, kind or query failed the allow-list."""

    kind = "validation_error"
    http_status = 400


class MutationInProgress(BrewDeckError):
    """Another install/uninstall/upgrade currently holds the mutation lock."""

    kind = "mutation_in_progress"
    http_status = 409

    def __init__(self, message: str = "A brew command is already running. Please wait.") -> None:
        super().__init__(message)


class ExternalCommandFailed(BrewDeckError):
    """The external tool ran and exited with a non-zero status."""

    kind = "external_command_failed"
    http_status = 500

    def __init__(
        self,
        command: str,
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        message: str | None = None,
    ) -> None:
        super().__init__(
            message or f"Command exited with code {exit_code}",
            command=command,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
        )
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class OutputLimitExceeded(ExternalCommandFailed):
    """Captured output grew past the configured buffer cap; the child was killed."""

    kind = "output_limit_exceeded"

    def __init__(
        self,
        command: str,
        limit: int,
        stdout: str = "",
        stderr: str = "",
        exit_code: int = -9,
    ) -> None:
        super().__init__(
            command,
            exit_code,
            stdout=stdout,
            stderr=stderr,
            message=f"Command output exceeded {limit} bytes and was terminated",
        )
        self.limit = limit
        self.details["limit"] = limit


class ExternalCommandUnavailable(BrewDeckError):
    """The external tool could not be started (missing binary, permissions)."""

    kind = "external_command_unavailable"
    http_status = 503

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(
            f"Failed to start command: {reason}",
            command=command,
            reason=reason,
        )
        self.command = command
        self.reason = reason


class MalformedExternalOutput(BrewDeckError):
    """The external tool succeeded but its output is not the expected structure."""

    kind = "malformed_external_output"
    http_status = 502

    def __init__(self, message: str, *, command: str = "", excerpt: str = "") -> None:
        super().__init__(message, command=command, excerpt=excerpt[:200])
        self.command = command
