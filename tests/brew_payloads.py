"""
Builders for brew JSON payloads used across the tests.

Shapes follow ``brew info --json=v2 --installed`` and
``brew outdated --json=v2``.
"""

from __future__ import annotations

import json
from typing import Any


def formula(name: str, desc: str | None = "", deps: list[str] | None = None) -> dict[str, Any]:
    """A minimal formula record."""
    return {"name": name, "full_name": name, "desc": desc, "dependencies": deps or []}


def cask(token: str, desc: str | None = "", depends_on: dict | None = None) -> dict[str, Any]:
    """A minimal cask record (``name`` is the display-name list, as in brew)."""
    return {"token": token, "name": [token.title()], "desc": desc, "depends_on": depends_on or {}}


def outdated_formula(name: str, installed: list[str], latest: str, pinned: bool = False) -> dict[str, Any]:
    return {
        "name": name,
        "installed_versions": installed,
        "current_version": latest,
        "pinned": pinned,
        "pinned_version": None,
    }


def outdated_cask(name: str, installed: list[str] | str, latest: str) -> dict[str, Any]:
    return {"name": name, "installed_versions": installed, "current_version": latest}


def installed_json(formulae: list[dict] | None = None, casks: list[dict] | None = None) -> str:
    return json.dumps({"formulae": formulae or [], "casks": casks or []})


def outdated_json(formulae: list[dict] | None = None, casks: list[dict] | None = None) -> str:
    return json.dumps({"formulae": formulae or [], "casks": casks or []})
