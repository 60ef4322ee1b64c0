"""
Static data for mock mode.

``brewdeck web --mock`` serves a small canned Homebrew installation so
the UI can be exercised on machines without brew.  The payloads live in
``demo/`` as the exact JSON brew would print.

Usage::

    from brewdeck.core.data import build_demo_runner

    runner = build_demo_runner()
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from brewdeck.adapters.mock import MockCommandRunner, MockResponse, ResponseFactory
from brewdeck.core.models.command import ExternalCommand

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent


def _load_text(relative_path: str) -> str:
    """Read a data file relative to the data directory."""
    path = _DATA_DIR / relative_path
    return path.read_text(encoding="utf-8")


def demo_installed_json() -> str:
    """``brew info --json=v2 --installed`` for the demo installation."""
    return _load_text("demo/installed.json")


def demo_outdated_json() -> str:
    """``brew outdated --json=v2`` for the demo installation."""
    return _load_text("demo/outdated.json")


def _demo_search(installed: dict, key: str, field: str) -> ResponseFactory:
    names = [r[field] for r in installed.get(key, [])]

    def _respond(command: ExternalCommand) -> MockResponse:
        terms = [a.lower() for a in command.args[2:]]
        hits = [n for n in names if any(t in n.lower() for t in terms)]
        if not hits:
            return MockResponse(
                stderr=f'Error: No formulae or casks found for "{" ".join(terms)}".', exit_code=1,
            )
        return MockResponse(stdout="\n".join(hits))

    return _respond


def build_demo_runner() -> MockCommandRunner:
    """A MockCommandRunner answering like a small real installation."""
    installed_text = demo_installed_json()
    installed = json.loads(installed_text)

    runner = MockCommandRunner(default_output="==> [mock] done")
    runner.set_response("--version", stdout="Homebrew 4.2.0 (mock)")
    runner.set_response("info --json=v2 --installed", stdout=installed_text)
    runner.set_response("outdated --json=v2", stdout=demo_outdated_json())
    runner.set_response("search --formulae", _demo_search(installed, "formulae", "name"))
    runner.set_response("search --casks", _demo_search(installed, "casks", "token"))
    runner.set_response(
        "info",
        lambda cmd: MockResponse(stdout=f"==> {cmd.args[-1]}\n[mock] no details in demo mode"),
    )
    runner.set_response("upgrade", stdout="==> Upgrading [mock]\n==> Summary: nothing to do", delay=0.5)
    logger.debug("Demo runner ready (%d formulae)", len(installed.get("formulae", [])))
    return runner
