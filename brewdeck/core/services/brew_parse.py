"""
brew output parsing — explicit contracts for every field we read.

Homebrew's JSON differs between formulae and casks (``name`` vs
``token``, ``dependencies`` vs ``depends_on``), and some fields come in
more than one shape depending on the brew version.  Every access here is
fallible: anything missing or of the wrong type raises
``MalformedExternalOutput`` naming the offending field, so a broken
payload surfaces as an error instead of an empty list.

Shapes consumed:

    brew info --json=v2 --installed
        {"formulae": [{"name", "desc", "dependencies": [...]}, ...],
         "casks":    [{"token", "desc", "depends_on": {"formula": [...],
                                                       "cask": [...]}}, ...]}

    brew outdated --json=v2
        {"formulae": [{"name", "installed_versions": [...],
                       "current_version", "pinned"}, ...],
         "casks":    [{"name", "installed_versions": [...] | "x",
                       "current_version"}, ...]}
"""

from __future__ import annotations

import json
from typing import Any

from brewdeck.core.errors import MalformedExternalOutput
from brewdeck.core.models.package import OutdatedPackage, OutdatedView, PackageKind

RawRecord = dict[str, Any]

# brew search exits 1 with one of these on stderr when nothing matches
_NO_MATCH_MARKERS = (
    "no formulae or casks found",
    "no formulae found",
    "no casks found",
)


# ── Generic helpers ─────────────────────────────────────────────────


def parse_json_object(text: str, *, source: str = "") -> dict[str, Any]:
    """Decode ``text`` and require a JSON object at the top level."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedExternalOutput(
            f"Could not parse JSON output: {e.msg} (line {e.lineno}, column {e.colno})",
            command=source,
            excerpt=text,
        ) from e

    if not isinstance(data, dict):
        raise MalformedExternalOutput(
            f"Expected a JSON object, got {type(data).__name__}",
            command=source,
            excerpt=text,
        )
    return data


def record_list(data: dict[str, Any], key: str, *, source: str = "") -> list[RawRecord]:
    """``data[key]`` as a list of objects. A missing key is an empty list."""
    value = data.get(key, [])
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedExternalOutput(
            f"Field '{key}' should be a list, got {type(value).__name__}",
            command=source,
        )
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise MalformedExternalOutput(
                f"Entry {index} of '{key}' should be an object, got {type(item).__name__}",
                command=source,
            )
    return value


def _required_str(record: RawRecord, field: str, *, where: str, source: str) -> str:
    value = record.get(field)
    if not isinstance(value, str) or not value:
        raise MalformedExternalOutput(
            f"{where} is missing a '{field}' string",
            command=source,
            excerpt=json.dumps(record)[:200],
        )
    return value


def _name_list(value: Any, *, where: str, source: str) -> list[str]:
    """Normalize a name-or-names field to a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    raise MalformedExternalOutput(
        f"{where} should be a list of names, got {type(value).__name__}",
        command=source,
    )


# ── Installed records ───────────────────────────────────────────────


def record_name(record: RawRecord, kind: PackageKind, *, source: str = "") -> str:
    """Command-line name: ``name`` for formulae, ``token`` for casks."""
    field = "name" if kind is PackageKind.FORMULA else "token"
    return _required_str(record, field, where=f"Installed {kind.value}", source=source)


def record_description(record: RawRecord) -> str | None:
    """``desc`` if it's a non-empty string, else None."""
    desc = record.get("desc")
    if isinstance(desc, str) and desc.strip():
        return desc.strip()
    return None


def formula_dependencies(record: RawRecord, *, source: str = "") -> list[str]:
    """Direct dependency names of an installed formula."""
    name = record.get("name", "?")
    return _name_list(
        record.get("dependencies"),
        where=f"Formula '{name}' dependencies",
        source=source,
    )


def cask_dependencies(record: RawRecord, *, source: str = "") -> list[str]:
    """Formula and cask names from a cask's ``depends_on`` object."""
    token = record.get("token", "?")
    depends_on = record.get("depends_on")
    if depends_on is None:
        return []
    if not isinstance(depends_on, dict):
        raise MalformedExternalOutput(
            f"Cask '{token}' depends_on should be an object, got {type(depends_on).__name__}",
            command=source,
        )
    names: list[str] = []
    for key in ("formula", "cask"):
        names.extend(
            _name_list(
                depends_on.get(key),
                where=f"Cask '{token}' depends_on.{key}",
                source=source,
            )
        )
    return names


def parse_installed(text: str, *, source: str = "") -> tuple[list[RawRecord], list[RawRecord]]:
    """Split ``brew info --json=v2 --installed`` into (formulae, casks)."""
    data = parse_json_object(text, source=source)
    return (
        record_list(data, "formulae", source=source),
        record_list(data, "casks", source=source),
    )


# ── Outdated ────────────────────────────────────────────────────────


def _outdated_entry(record: RawRecord, kind: PackageKind, *, source: str) -> OutdatedPackage:
    name = _required_str(record, "name", where=f"Outdated {kind.value}", source=source)
    installed = _name_list(
        record.get("installed_versions"),
        where=f"Outdated {kind.value} '{name}' installed_versions",
        source=source,
    )
    latest = record.get("current_version")
    if latest is not None and not isinstance(latest, str):
        latest = str(latest)
    return OutdatedPackage(
        name=name,
        kind=kind,
        installed_versions=installed,
        latest_version=latest or "",
        pinned=bool(record.get("pinned", False)),
    )


def parse_outdated(text: str, *, source: str = "") -> OutdatedView:
    """Parse ``brew outdated --json=v2`` into an OutdatedView."""
    data = parse_json_object(text, source=source)
    return OutdatedView(
        formulae=[
            _outdated_entry(r, PackageKind.FORMULA, source=source)
            for r in record_list(data, "formulae", source=source)
        ],
        casks=[
            _outdated_entry(r, PackageKind.CASK, source=source)
            for r in record_list(data, "casks", source=source)
        ],
    )


# ── Search ──────────────────────────────────────────────────────────


def parse_search_output(text: str) -> list[str]:
    """Whitespace-separated names, ignoring ``==> Formulae`` style headers."""
    names: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("==>"):
            continue
        names.extend(line.split())
    return names


def is_no_match(stderr: str) -> bool:
    """Whether a failed ``brew search`` only means "nothing found"."""
    lowered = stderr.lower()
    return any(marker in lowered for marker in _NO_MATCH_MARKERS)
