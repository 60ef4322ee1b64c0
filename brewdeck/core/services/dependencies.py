"""
Dependency deriver — which installed packages are required by others.

A package is *dependent* if at least one other installed package lists
it as a direct dependency; otherwise it is a *core* (leaf) package.
This is one hop only: a dependency of a dependency is flagged only if
some installed package names it directly.
"""

from __future__ import annotations

from typing import Iterable

from brewdeck.core.models.package import PackageKind
from brewdeck.core.services.brew_parse import (
    RawRecord,
    cask_dependencies,
    formula_dependencies,
    record_name,
)


def installed_names(
    formulae: Iterable[RawRecord],
    casks: Iterable[RawRecord],
    *,
    source: str = "",
) -> set[str]:
    """Formula names plus cask tokens."""
    names = {record_name(r, PackageKind.FORMULA, source=source) for r in formulae}
    names.update(record_name(r, PackageKind.CASK, source=source) for r in casks)
    return names


def derive_dependents(
    formulae: list[RawRecord],
    casks: list[RawRecord],
    *,
    source: str = "",
) -> set[str]:
    """Names of installed packages that another installed package depends on.

    Never contains a name outside the installed set; independent of
    record order.
    """
    installed = installed_names(formulae, casks, source=source)
    dependents: set[str] = set()

    for record in formulae:
        for dep in formula_dependencies(record, source=source):
            if dep in installed:
                dependents.add(dep)

    for record in casks:
        for dep in cask_dependencies(record, source=source):
            if dep in installed:
                dependents.add(dep)

    return dependents
