"""
Package actions — install, uninstall and upgrade.

Every action runs under the mutation lock: acquire, run brew, release
(always).  A second action while one is running is rejected with
``MutationInProgress`` rather than queued.  Upgrades can take minutes,
so their output is streamed to an operator sink as it arrives.

After any action, callers should re-fetch ``package_view``.
"""

from __future__ import annotations

import logging

from brewdeck.adapters.base import CommandRunner, OutputSink
from brewdeck.core.errors import ExternalCommandFailed
from brewdeck.core.models.command import ExternalCommand
from brewdeck.core.models.package import MutationResult, PackageKind
from brewdeck.core.reliability.mutation_lock import MutationLock
from brewdeck.core.services.brew_commands import BrewCommands

logger = logging.getLogger(__name__)


def _run_mutation(
    runner: CommandRunner,
    lock: MutationLock,
    command: ExternalCommand,
    *,
    message: str,
    sink: OutputSink | None = None,
    streaming: bool = False,
) -> MutationResult:
    """Run ``command`` while holding ``lock``.

    ``streaming`` marks long-running commands: ``sink`` receives live
    output and the final output is logged.
    """
    with lock.hold(command.display):
        logger.info("Running: %s", command.display)
        try:
            result = runner.run(command, sink=sink if streaming else None)
        except ExternalCommandFailed as e:
            logger.error("Failed (exit %d): %s", e.exit_code, command.display)
            if streaming:
                if e.stdout:
                    logger.error("stdout:\n%s", e.stdout)
                if e.stderr:
                    logger.error("stderr:\n%s", e.stderr)
            raise

    if streaming:
        logger.info("Finished: %s", command.display)
        if result.stdout:
            logger.info("stdout:\n%s", result.stdout)
        if result.stderr:
            logger.info("stderr:\n%s", result.stderr)

    return MutationResult(
        success=True,
        message=message,
        output=result.stdout,
        command=command.display,
        duration_ms=result.duration_ms,
    )


def install_package(
    runner: CommandRunner,
    commands: BrewCommands,
    lock: MutationLock,
    kind: PackageKind,
    name: str,
) -> MutationResult:
    """``brew install [--cask] <name>``."""
    cmd = commands.install(kind, name)
    return _run_mutation(runner, lock, cmd, message=f"Successfully installed {name}.")


def uninstall_package(
    runner: CommandRunner,
    commands: BrewCommands,
    lock: MutationLock,
    kind: PackageKind,
    name: str,
) -> MutationResult:
    """``brew uninstall [--cask] <name>``."""
    cmd = commands.uninstall(kind, name)
    return _run_mutation(runner, lock, cmd, message=f"Successfully uninstalled {name}.")


def upgrade_package(
    runner: CommandRunner,
    commands: BrewCommands,
    lock: MutationLock,
    kind: PackageKind,
    name: str,
    *,
    sink: OutputSink | None = None,
) -> MutationResult:
    """``brew upgrade [--cask] <name>``, streamed to ``sink``."""
    cmd = commands.upgrade(kind, name)
    return _run_mutation(
        runner, lock, cmd,
        message=f"Successfully updated {name}.",
        sink=sink,
        streaming=True,
    )


def upgrade_all(
    runner: CommandRunner,
    commands: BrewCommands,
    lock: MutationLock,
    *,
    sink: OutputSink | None = None,
) -> MutationResult:
    """``brew upgrade`` for everything outdated, streamed to ``sink``."""
    return _run_mutation(
        runner, lock, commands.upgrade_all(),
        message="Successfully updated all outdated packages.",
        sink=sink,
        streaming=True,
    )
