"""
Mutation lock — at most one install/uninstall/upgrade in flight.

A process-wide gate with no owner identity, no queue and no timeout.
A caller that finds it held is rejected immediately with
``MutationInProgress``; it never blocks or retries.

Reads (list/search/info/outdated) are never gated.

Usage:

    lock = MutationLock()
    with lock.hold("brew upgrade"):
        runner.run(command)
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from brewdeck.core.errors import MutationInProgress

logger = logging.getLogger(__name__)


class MutationLock:
    """Non-blocking exclusive flag."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._holder = ""

    @property
    def held(self) -> bool:
        """Whether a mutation is currently running."""
        return self._lock.locked()

    @property
    def holder(self) -> str:
        """Label of the running mutation (informational), or ``""``."""
        return self._holder if self.held else ""

    def try_acquire(self, label: str = "") -> bool:
        """Take the lock if free. Returns False immediately if held."""
        if not self._lock.acquire(blocking=False):
            return False
        self._holder = label
        return True

    def release(self) -> None:
        """Mark the lock free. Safe to call when already free."""
        self._holder = ""
        try:
            self._lock.release()
        except RuntimeError:
            pass  # already released

    @contextmanager
    def hold(self, label: str = "") -> Iterator[None]:
        """Acquire for the duration of the block, release on every exit path.

        Raises:
            MutationInProgress: if another mutation holds the lock.
        """
        if not self.try_acquire(label):
            logger.warning("Rejected %r: mutation already running (%s)", label, self._holder)
            raise MutationInProgress()
        try:
            yield
        finally:
            self.release()

    def __repr__(self) -> str:
        return f"<MutationLock held={self.held}>"
