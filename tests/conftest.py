"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import pytest

from brewdeck.adapters.mock import MockCommandRunner
from brewdeck.core.services.package_service import PackageService

from tests.brew_payloads import installed_json, outdated_json


@pytest.fixture
def runner() -> MockCommandRunner:
    """A mock runner with an empty installation."""
    r = MockCommandRunner()
    r.set_response("info --json=v2 --installed", stdout=installed_json())
    r.set_response("outdated --json=v2", stdout=outdated_json())
    return r


@pytest.fixture
def sink_log() -> list[tuple[str, str]]:
    """Chunks the service streamed to its upgrade sink."""
    return []


@pytest.fixture
def service(runner: MockCommandRunner, sink_log: list[tuple[str, str]]) -> PackageService:
    """A PackageService over the mock runner, recording upgrade output."""
    return PackageService(
        runner,
        brew_path="brew",
        upgrade_sink=lambda stream, chunk: sink_log.append((stream, chunk)),
    )
