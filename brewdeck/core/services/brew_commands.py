"""
brew command construction — the only place user text becomes argv.

Every name or query that came from a request is checked against an
allow-list *here*, while the ``ExternalCommand`` is being built, so no
code path can hand unchecked text to the runner.  Commands are argv
lists, never shell strings.
"""

from __future__ import annotations

import re

from brewdeck.core.errors import ValidationError
from brewdeck.core.models.command import ExternalCommand
from brewdeck.core.models.package import PackageKind

# a leading "-" would be read by brew as an option
NAME_PATTERN = re.compile(r"^(?!-)[a-zA-Z0-9@._-]+$")
QUERY_PATTERN = re.compile(r"^[a-zA-Z0-9@._\s-]+$")


def validate_name(name: str | None) -> str:
    """Return ``name`` if it is a safe package name.

    Raises:
        ValidationError: empty, starts with ``-``, or contains anything
            but ``[a-zA-Z0-9@._-]``.
    """
    if not name or not NAME_PATTERN.fullmatch(name):
        raise ValidationError("Invalid package name.", name=name or "")
    return name


def validate_query(query: str | None) -> str:
    """Return the stripped query if it is a safe search string.

    Raises:
        ValidationError: blank, or contains anything but
            ``[a-zA-Z0-9@._-]`` and whitespace, or a term starts with ``-``.
    """
    if query is None or not query.strip():
        raise ValidationError("Search query is required.")
    if not QUERY_PATTERN.fullmatch(query) or any(t.startswith("-") for t in query.split()):
        raise ValidationError("Invalid search query.", query=query)
    return query.strip()


class BrewCommands:
    """Builds validated brew ``ExternalCommand`` objects.

    Args:
        brew_path: Executable to invoke (``brew`` or an absolute path).
    """

    def __init__(self, brew_path: str = "brew") -> None:
        self.brew_path = brew_path

    def _cmd(self, *args: str) -> ExternalCommand:
        return ExternalCommand(executable=self.brew_path, args=args)

    def _kind_args(self, kind: PackageKind, *args: str) -> tuple[str, ...]:
        # formula is brew's default for install/uninstall/upgrade
        return ("--cask", *args) if kind is PackageKind.CASK else args

    # ── Read-only ────────────────────────────────────────────────

    def installed_info(self) -> ExternalCommand:
        return self._cmd("info", "--json=v2", "--installed")

    def outdated(self) -> ExternalCommand:
        return self._cmd("outdated", "--json=v2")

    def info(self, kind: PackageKind, name: str) -> ExternalCommand:
        return self._cmd("info", kind.flag, validate_name(name))

    def search(self, kind: PackageKind, query: str) -> ExternalCommand:
        flag = "--formulae" if kind is PackageKind.FORMULA else "--casks"
        # brew search takes each word as its own term
        return self._cmd("search", flag, *validate_query(query).split())

    def version(self) -> ExternalCommand:
        return self._cmd("--version")

    # ── Mutating ─────────────────────────────────────────────────

    def install(self, kind: PackageKind, name: str) -> ExternalCommand:
        return self._cmd("install", *self._kind_args(kind, validate_name(name)))

    def uninstall(self, kind: PackageKind, name: str) -> ExternalCommand:
        return self._cmd("uninstall", *self._kind_args(kind, validate_name(name)))

    def upgrade(self, kind: PackageKind, name: str) -> ExternalCommand:
        return self._cmd("upgrade", *self._kind_args(kind, validate_name(name)))

    def upgrade_all(self) -> ExternalCommand:
        return self._cmd("upgrade")
