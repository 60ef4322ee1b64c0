"""
PackageService — one object owning the runner, commands and lock.

The web app and the CLI each build one of these and call its methods;
the mutation lock is injected here rather than held in a module global.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from brewdeck.adapters.base import CommandRunner, OutputSink, console_sink
from brewdeck.adapters.shell.command import ShellCommandRunner
from brewdeck.core.config.loader import Settings
from brewdeck.core.errors import BrewDeckError
from brewdeck.core.models.package import (
    MutationResult,
    OutdatedView,
    PackageDetail,
    PackageKind,
    PackageView,
    SearchResult,
)
from brewdeck.core.reliability.mutation_lock import MutationLock
from brewdeck.core.services import package_actions, package_ops
from brewdeck.core.services.brew_commands import BrewCommands
from brewdeck.core.services.classifier import CATEGORY_TABLE, Category

logger = logging.getLogger(__name__)


class PackageService:
    """Channel-independent facade over brew.

    Args:
        runner: How commands are executed (shell or mock).
        brew_path: brew executable.
        lock: Mutation gate; a fresh ``MutationLock`` by default.
        categories: Classifier table.
        upgrade_sink: Where upgrade output is streamed. ``console_sink``
            by default; None disables streaming.
    """

    def __init__(
        self,
        runner: CommandRunner,
        *,
        brew_path: str = "brew",
        lock: MutationLock | None = None,
        categories: Sequence[Category] = CATEGORY_TABLE,
        upgrade_sink: OutputSink | None = console_sink,
    ) -> None:
        self.runner = runner
        self.commands = BrewCommands(brew_path)
        self.lock = lock or MutationLock()
        self.categories = tuple(categories)
        self.upgrade_sink = upgrade_sink

    # ── Observe ──────────────────────────────────────────────────

    def package_view(self) -> PackageView:
        return package_ops.package_view(self.runner, self.commands, table=self.categories)

    def outdated_view(self) -> OutdatedView:
        return package_ops.outdated_view(self.runner, self.commands)

    def search(self, query: str) -> SearchResult:
        return package_ops.search_packages(self.runner, self.commands, query)

    def info(self, kind: PackageKind, name: str) -> PackageDetail:
        return package_ops.package_info(self.runner, self.commands, kind, name)

    def status(self) -> dict[str, Any]:
        """brew availability, version and lock state."""
        brew_path = self.commands.brew_path
        available = self.runner.is_available(brew_path)
        version = ""
        if available:
            try:
                out = self.runner.run(self.commands.version()).stdout
                version = out.splitlines()[0] if out else ""
            except BrewDeckError as e:
                logger.warning("brew --version failed: %s", e)
                available = False
        return {
            "brew_available": available,
            "brew_path": brew_path,
            "brew_version": version,
            "runner": self.runner.name,
            "mutation_in_progress": self.lock.held,
            "running": self.lock.holder,
        }

    # ── Act ──────────────────────────────────────────────────────

    def install(self, kind: PackageKind, name: str) -> MutationResult:
        return package_actions.install_package(self.runner, self.commands, self.lock, kind, name)

    def uninstall(self, kind: PackageKind, name: str) -> MutationResult:
        return package_actions.uninstall_package(self.runner, self.commands, self.lock, kind, name)

    def upgrade(self, kind: PackageKind, name: str) -> MutationResult:
        return package_actions.upgrade_package(
            self.runner, self.commands, self.lock, kind, name, sink=self.upgrade_sink,
        )

    def upgrade_all(self) -> MutationResult:
        return package_actions.upgrade_all(
            self.runner, self.commands, self.lock, sink=self.upgrade_sink,
        )

    def __repr__(self) -> str:
        return f"<PackageService runner={self.runner.name!r} brew={self.commands.brew_path!r}>"


def build_service(
    settings: Settings,
    *,
    runner: CommandRunner | None = None,
    mock_mode: bool = False,
) -> PackageService:
    """Wire a PackageService from settings.

    ``runner`` wins over ``mock_mode``; otherwise mock mode uses the demo
    runner and normal mode spawns real processes.
    """
    if runner is None:
        if mock_mode:
            from brewdeck.core.data import build_demo_runner

            runner = build_demo_runner()
        else:
            runner = ShellCommandRunner(max_output_bytes=settings.max_output_bytes)

    return PackageService(
        runner,
        brew_path=settings.brew_path,
        categories=settings.category_table(),
        upgrade_sink=console_sink if settings.stream_upgrades else None,
    )
