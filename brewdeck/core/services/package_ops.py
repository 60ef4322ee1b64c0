"""
Package views — read-only operations over the installed set.

Channel-independent: the web routes and CLI commands are thin wrappers
over these functions.  Nothing is cached; every call shells out to brew
and rebuilds its view from scratch.  Reads never take the mutation
lock, so a read racing a mutation may see pre-mutation state.

Operations:
    package_view    — installed formulae/casks with category + flags
    outdated_view   — outdated formulae/casks with versions
    search_packages — bare names matching a query, per kind
    package_info    — free-text ``brew info`` for one package
"""

from __future__ import annotations

import logging
from typing import Sequence

from brewdeck.adapters.base import CommandRunner
from brewdeck.core.errors import ExternalCommandFailed
from brewdeck.core.models.package import (
    NO_DESCRIPTION,
    OutdatedView,
    Package,
    PackageDetail,
    PackageKind,
    PackageView,
    SearchResult,
)
from brewdeck.core.services.brew_commands import BrewCommands, validate_query
from brewdeck.core.services.brew_parse import (
    RawRecord,
    is_no_match,
    parse_installed,
    parse_outdated,
    parse_search_output,
    record_description,
    record_name,
)
from brewdeck.core.services.classifier import CATEGORY_TABLE, Category, classify
from brewdeck.core.services.dependencies import derive_dependents

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Installed packages
# ═══════════════════════════════════════════════════════════════════


def _normalize(
    records: list[RawRecord],
    kind: PackageKind,
    *,
    dependents: set[str],
    outdated: set[str],
    table: Sequence[Category],
    source: str,
) -> list[Package]:
    packages = []
    for record in records:
        name = record_name(record, kind, source=source)
        desc = record_description(record)
        packages.append(Package(
            name=name,
            kind=kind,
            description=desc or NO_DESCRIPTION,
            category=classify(desc or "", table),
            is_dependent=name in dependents,
            is_outdated=name in outdated,
        ))
    return packages


def package_view(
    runner: CommandRunner,
    commands: BrewCommands,
    *,
    table: Sequence[Category] = CATEGORY_TABLE,
) -> PackageView:
    """Installed packages, classified and flagged.

    Raises:
        ExternalCommandFailed / ExternalCommandUnavailable: brew failed.
        MalformedExternalOutput: brew output was not the expected JSON.
    """
    info_cmd = commands.installed_info()
    info = runner.run(info_cmd)
    formulae, casks = parse_installed(info.stdout, source=info_cmd.display)

    outdated_cmd = commands.outdated()
    outdated = parse_outdated(runner.run(outdated_cmd).stdout, source=outdated_cmd.display)

    dependents = derive_dependents(formulae, casks, source=info_cmd.display)

    view = PackageView(
        formulae=_normalize(
            formulae, PackageKind.FORMULA,
            dependents=dependents, outdated=outdated.names_of(PackageKind.FORMULA),
            table=table, source=info_cmd.display,
        ),
        casks=_normalize(
            casks, PackageKind.CASK,
            dependents=dependents, outdated=outdated.names_of(PackageKind.CASK),
            table=table, source=info_cmd.display,
        ),
    )
    logger.info(
        "Package view: %d formulae, %d casks (%d dependent, %d outdated)",
        len(view.formulae), len(view.casks), len(dependents), outdated.count,
    )
    return view


# ═══════════════════════════════════════════════════════════════════
#  Outdated
# ═══════════════════════════════════════════════════════════════════


def outdated_view(runner: CommandRunner, commands: BrewCommands) -> OutdatedView:
    """Outdated packages, each tagged with its kind."""
    cmd = commands.outdated()
    view = parse_outdated(runner.run(cmd).stdout, source=cmd.display)
    logger.info("Outdated: %d formulae, %d casks", len(view.formulae), len(view.casks))
    return view


# ═══════════════════════════════════════════════════════════════════
#  Search & info
# ═══════════════════════════════════════════════════════════════════


def _search_kind(
    runner: CommandRunner,
    commands: BrewCommands,
    kind: PackageKind,
    query: str,
) -> list[str]:
    cmd = commands.search(kind, query)
    try:
        result = runner.run(cmd)
    except ExternalCommandFailed as e:
        if is_no_match(e.stderr):
            return []
        raise
    return parse_search_output(result.stdout)


def search_packages(
    runner: CommandRunner,
    commands: BrewCommands,
    query: str,
) -> SearchResult:
    """Names matching ``query``, one list per kind.

    Lighter than ``package_view``: no metadata, just names.

    Raises:
        ValidationError: blank or unsafe query (no process launched).
    """
    query = validate_query(query)
    return SearchResult(
        formulae=_search_kind(runner, commands, PackageKind.FORMULA, query),
        casks=_search_kind(runner, commands, PackageKind.CASK, query),
    )


def package_info(
    runner: CommandRunner,
    commands: BrewCommands,
    kind: PackageKind,
    name: str,
) -> PackageDetail:
    """Human-readable ``brew info`` block for one package."""
    result = runner.run(commands.info(kind, name))
    return PackageDetail(name=name, kind=kind, info=result.stdout)
