"""
ExternalCommand and CommandResult — the runner's I/O contract.

A command goes in, a result comes out (or an exception from
``brewdeck.core.errors``).  Both are immutable; a result belongs to
whoever issued the command.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ExternalCommand(BaseModel):
    """An executable plus an ordered argument list.

    Build these through ``brewdeck.core.services.brew_commands`` so any
    user-supplied argument has passed the allow-list first.
    """

    model_config = ConfigDict(frozen=True)

    executable: str
    args: tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        """Full argument vector for ``subprocess``."""
        return [self.executable, *self.args]

    @property
    def display(self) -> str:
        """Human-readable form for logs and error payloads."""
        return " ".join(self.argv)

    def __str__(self) -> str:
        return self.display


class CommandResult(BaseModel):
    """Captured output of a command that exited with status 0."""

    model_config = ConfigDict(frozen=True)

    command: str
    stdout: str = ""             # trimmed
    stderr: str = ""             # trimmed, informational only
    exit_code: int = 0
    duration_ms: int = 0
    finished_at: str = Field(default_factory=_now_iso)
