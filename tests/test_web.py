"""
Tests for the web API — app factory, /api routes, status codes, CORS.
"""

from __future__ import annotations

import threading

import pytest
from flask.testing import FlaskClient

from brewdeck.adapters.mock import MockCommandRunner
from brewdeck.core.config.loader import Settings
from brewdeck.ui.web.server import create_app

from tests.brew_payloads import (
    cask,
    formula,
    installed_json,
    outdated_formula,
    outdated_json,
)


@pytest.fixture()
def settings() -> Settings:
    return Settings(brew_path="brew", stream_upgrades=False)


@pytest.fixture()
def mock_runner() -> MockCommandRunner:
    r = MockCommandRunner()
    r.set_response("--version", stdout="Homebrew 4.3.0\nHomebrew/homebrew-core (git revision abc)")
    r.set_response("info --json=v2 --installed", stdout=installed_json(
        [formula("a", "Alpha utility", deps=["b"]), formula("b", "Beta library"), formula("x", "SQL shell")],
        [cask("docker", "Container platform")],
    ))
    r.set_response("outdated --json=v2", stdout=outdated_json([outdated_formula("x", ["1.0"], "2.0")]))
    return r


@pytest.fixture()
def client(settings: Settings, mock_runner: MockCommandRunner) -> FlaskClient:
    app = create_app(settings, runner=mock_runner)
    app.config["TESTING"] = True
    return app.test_client()


# ── App factory ──────────────────────────────────────────────────────


class TestAppFactory:
    def test_config_wiring(self, settings, mock_runner):
        app = create_app(settings, runner=mock_runner)
        assert app.config["SETTINGS"] is settings
        assert app.config["MOCK_MODE"] is False
        assert app.config["PACKAGE_SERVICE"].runner is mock_runner

    def test_mock_mode_uses_demo_runner(self, settings):
        app = create_app(settings, mock_mode=True)
        assert app.config["MOCK_MODE"] is True
        assert app.config["PACKAGE_SERVICE"].runner.name == "mock"

    def test_cors_wildcard_by_default(self, client):
        resp = client.get("/api/packages")
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_single_origin(self, mock_runner):
        app = create_app(Settings(brew_path="brew", cors_origins="http://localhost:3000"), runner=mock_runner)
        resp = app.test_client().get("/api/status", headers={"Origin": "http://localhost:3000"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

    def test_cors_echoes_matching_origin(self, mock_runner):
        settings = Settings(
            brew_path="brew",
            cors_origins="http://localhost:3000,http://127.0.0.1:3000",
        )
        c = create_app(settings, runner=mock_runner).test_client()
        resp = c.get("/api/status", headers={"Origin": "http://127.0.0.1:3000"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://127.0.0.1:3000"
        resp = c.get("/api/status", headers={"Origin": "http://localhost:3000"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

    def test_cors_unlisted_origin(self, mock_runner):
        settings = Settings(brew_path="brew", cors_origins=["http://localhost:3000"])
        c = create_app(settings, runner=mock_runner).test_client()
        resp = c.get("/api/status", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers

    def test_preflight(self, client):
        resp = client.options(
            "/api/install/formula/git",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        assert resp.status_code == 200
        assert "POST" in resp.headers["Access-Control-Allow-Methods"]
        assert resp.headers["Access-Control-Allow-Headers"].lower() == "content-type"

    def test_unknown_route(self, client):
        assert client.get("/api/nope").status_code == 404


# ── Observe ──────────────────────────────────────────────────────────


class TestReadRoutes:
    def test_status(self, client):
        data = client.get("/api/status").get_json()
        assert data["brew_available"] is True
        assert data["brew_version"] == "Homebrew 4.3.0"
        assert data["mutation_in_progress"] is False
        assert data["runner"] == "mock"

    def test_status_brew_missing(self, settings):
        app = create_app(settings, runner=MockCommandRunner(available=False))
        data = app.test_client().get("/api/status").get_json()
        assert data["brew_available"] is False
        assert data["brew_version"] == ""

    def test_packages(self, client):
        resp = client.get("/api/packages")
        assert resp.status_code == 200
        data = resp.get_json()
        by_name = {p["name"]: p for p in data["formulae"]}
        assert by_name["b"]["isDependent"] is True
        assert by_name["a"]["isDependent"] is False
        assert by_name["x"]["isOutdated"] is True
        assert by_name["x"]["category"] == "Databases"
        assert data["casks"][0]["name"] == "docker"

    def test_outdated(self, client):
        data = client.get("/api/outdated").get_json()
        assert data["formulae"] == [{
            "name": "x",
            "currentVersion": "1.0",
            "latestVersion": "2.0",
            "installedVersions": ["1.0"],
            "pinned": False,
            "type": "formula",
        }]
        assert data["casks"] == []

    def test_search(self, client, mock_runner):
        mock_runner.set_response("search --formulae", stdout="wget")
        mock_runner.set_response("search --casks", stdout="")
        resp = client.get("/api/search?query=wget")
        assert resp.status_code == 200
        assert resp.get_json() == {"formulae": ["wget"], "casks": []}

    def test_search_missing_query(self, client, mock_runner):
        resp = client.get("/api/search")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Search query is required."
        assert mock_runner.call_count == 0

    def test_search_invalid_query(self, client, mock_runner):
        resp = client.get("/api/search", query_string={"query": "wget;reboot"})
        assert resp.status_code == 400
        assert resp.get_json()["kind"] == "validation_error"
        assert mock_runner.call_count == 0

    def test_info(self, client, mock_runner):
        mock_runner.set_response("info --formula git", stdout="==> git: stable 2.45.1")
        resp = client.get("/api/info/formula/git")
        assert resp.get_json() == {"info": "==> git: stable 2.45.1"}

    def test_info_bad_type(self, client):
        resp = client.get("/api/info/bottle/git")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid package type."

    def test_malformed_output_is_502(self, client, mock_runner):
        mock_runner.set_response("info --json=v2 --installed", stdout="not json")
        resp = client.get("/api/packages")
        assert resp.status_code == 502
        assert resp.get_json()["kind"] == "malformed_external_output"

    def test_brew_failure_is_500(self, client, mock_runner):
        mock_runner.set_failure("outdated --json=v2", stderr="Error: update failed")
        resp = client.get("/api/outdated")
        assert resp.status_code == 500
        body = resp.get_json()
        assert body["details"]["stderr"] == "Error: update failed"
        assert body["details"]["exit_code"] == 1

    def test_brew_unavailable_is_503(self, settings):
        app = create_app(settings, runner=MockCommandRunner(available=False))
        resp = app.test_client().get("/api/packages")
        assert resp.status_code == 503
        assert resp.get_json()["error"].startswith("Failed to start command:")


# ── Act ──────────────────────────────────────────────────────────────


class TestMutationRoutes:
    def test_install(self, client, mock_runner):
        resp = client.post("/api/install/cask/docker")
        assert resp.status_code == 200
        assert resp.get_json()["message"] == "Successfully installed docker."
        assert mock_runner.call_log[-1].args == ("install", "--cask", "docker")

    def test_install_plural_type(self, client, mock_runner):
        client.post("/api/install/formulae/git")
        assert mock_runner.call_log[-1].args == ("install", "git")

    def test_install_wrong_method(self, client):
        assert client.get("/api/install/formula/git").status_code == 405

    def test_uninstall(self, client):
        resp = client.delete("/api/uninstall/formula/jq")
        assert resp.get_json() == {
            "success": True,
            "message": "Successfully uninstalled jq.",
            "output": "[mock] executed",
        }

    def test_uninstall_failure(self, client, mock_runner):
        mock_runner.set_failure("uninstall", stderr="Error: no such package")
        resp = client.delete("/api/uninstall/formula/nope")
        assert resp.status_code == 500
        assert resp.get_json()["details"]["stderr"] == "Error: no such package"

    def test_update_one(self, client):
        resp = client.post("/api/update/formula/git")
        assert resp.get_json()["message"] == "Successfully updated git."

    def test_update_all(self, client, mock_runner):
        resp = client.post("/api/update-all")
        assert resp.get_json()["message"] == "Successfully updated all outdated packages."
        assert mock_runner.call_log[-1].args == ("upgrade",)

    def test_unsafe_name_rejected(self, client, mock_runner):
        resp = client.post("/api/install/formula/git;ls")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid package name."
        assert mock_runner.call_count == 0

    def test_option_like_name_rejected(self, client, mock_runner):
        resp = client.delete("/api/uninstall/formula/--force")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid package name."
        assert mock_runner.call_count == 0

    def test_busy_is_409(self, settings, mock_runner):
        app = create_app(settings, runner=mock_runner)
        service = app.config["PACKAGE_SERVICE"]
        service.lock.try_acquire("brew upgrade")
        try:
            resp = app.test_client().post("/api/install/formula/git")
        finally:
            service.lock.release()
        assert resp.status_code == 409
        assert resp.get_json()["error"] == "A brew command is already running. Please wait."

    def test_concurrent_requests(self, settings, mock_runner):
        mock_runner.set_response("install", delay=0.3)
        app = create_app(settings, runner=mock_runner)
        barrier = threading.Barrier(3)
        codes: list[int] = []
        guard = threading.Lock()

        def hit(name: str) -> None:
            c = app.test_client()
            barrier.wait()
            code = c.post(f"/api/install/formula/{name}").status_code
            with guard:
                codes.append(code)

        threads = [threading.Thread(target=hit, args=(n,)) for n in ("a", "b", "c")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(codes) == [200, 409, 409]
        assert mock_runner.max_in_flight == 1


# ── Demo mode ────────────────────────────────────────────────────────


class TestDemoMode:
    @pytest.fixture()
    def demo(self, settings) -> FlaskClient:
        return create_app(settings, mock_mode=True).test_client()

    def test_packages(self, demo):
        data = demo.get("/api/packages").get_json()
        formulae = {p["name"]: p for p in data["formulae"]}
        casks = {p["name"]: p for p in data["casks"]}
        assert formulae["libvpx"]["isDependent"] is True     # ffmpeg + wireshark
        assert formulae["ca-certificates"]["isDependent"] is True
        assert formulae["git"]["isOutdated"] is True
        assert formulae["jq"]["desc"] == "No description available."
        assert casks["docker"]["isOutdated"] is True

    def test_search(self, demo):
        data = demo.get("/api/search?query=git").get_json()
        assert data == {"formulae": ["git"], "casks": []}

    def test_search_multiple_terms(self, demo):
        data = demo.get("/api/search", query_string={"query": "jq docker"}).get_json()
        assert data == {"formulae": ["jq"], "casks": ["docker"]}

    def test_status(self, demo):
        assert demo.get("/api/status").get_json()["brew_version"] == "Homebrew 4.2.0 (mock)"
