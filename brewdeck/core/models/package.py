"""
Package models — the normalized views handed to the presentation layer.

Field names are snake_case in Python; ``to_dict()`` produces the
camelCase shape the browser client expects (``desc``, ``isDependent``,
``isOutdated``, ...).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from brewdeck.core.errors import ValidationError

NO_DESCRIPTION = "No description available."


class PackageKind(StrEnum):
    """Formula (command-line unit) or cask (typically a GUI app)."""

    FORMULA = "formula"
    CASK = "cask"

    @property
    def plural(self) -> str:
        """Collection name used in URLs and JSON views."""
        return "formulae" if self is PackageKind.FORMULA else "casks"

    @property
    def flag(self) -> str:
        """brew CLI flag selecting this kind."""
        return f"--{self.value}"

    @classmethod
    def parse(cls, value: str) -> PackageKind:
        """Accept ``formula``/``formulae``/``cask``/``casks``.

        Raises:
            ValidationError: for anything else.
        """
        normalized = (value or "").strip().lower()
        for kind in cls:
            if normalized in (kind.value, kind.plural):
                return kind
        raise ValidationError("Invalid package type.", type=value)


class Package(BaseModel):
    """One installed package, enriched with category and flags."""

    name: str
    kind: PackageKind
    description: str = NO_DESCRIPTION
    category: str = "Other"
    is_dependent: bool = False
    is_outdated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "desc": self.description,
            "category": self.category,
            "isDependent": self.is_dependent,
            "isOutdated": self.is_outdated,
        }


class PackageView(BaseModel):
    """Installed packages, one collection per kind, in brew's order."""

    formulae: list[Package] = Field(default_factory=list)
    casks: list[Package] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "formulae": [p.to_dict() for p in self.formulae],
            "casks": [p.to_dict() for p in self.casks],
        }


class OutdatedPackage(BaseModel):
    """An installed package with a newer version available."""

    name: str
    kind: PackageKind
    installed_versions: list[str] = Field(default_factory=list)
    latest_version: str = ""
    pinned: bool = False

    @property
    def current_version(self) -> str:
        """Installed version(s) as a single display string."""
        return ", ".join(self.installed_versions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "currentVersion": self.current_version,
            "latestVersion": self.latest_version,
            "installedVersions": list(self.installed_versions),
            "pinned": self.pinned,
            "type": self.kind.value,
        }


class OutdatedView(BaseModel):
    """Outdated packages, one collection per kind."""

    formulae: list[OutdatedPackage] = Field(default_factory=list)
    casks: list[OutdatedPackage] = Field(default_factory=list)

    @property
    def names(self) -> set[str]:
        return {p.name for p in self.formulae} | {p.name for p in self.casks}

    def names_of(self, kind: PackageKind) -> set[str]:
        """Outdated names of one kind; a formula and a cask may share a name."""
        packages = self.casks if kind is PackageKind.CASK else self.formulae
        return {p.name for p in packages}

    @property
    def count(self) -> int:
        return len(self.formulae) + len(self.casks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "formulae": [p.to_dict() for p in self.formulae],
            "casks": [p.to_dict() for p in self.casks],
        }


class SearchResult(BaseModel):
    """Bare names matching a search query, per kind."""

    formulae: list[str] = Field(default_factory=list)
    casks: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"formulae": list(self.formulae), "casks": list(self.casks)}


class PackageDetail(BaseModel):
    """Free-text ``brew info`` block for one package."""

    name: str
    kind: PackageKind
    info: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.kind.value, "info": self.info}


class MutationResult(BaseModel):
    """Acknowledgement of a successful install/uninstall/upgrade."""

    success: bool = True
    message: str = ""
    output: str = ""
    command: str = ""
    duration_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "output": self.output,
        }
