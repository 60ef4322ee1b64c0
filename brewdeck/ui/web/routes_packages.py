"""
Package routes — list, search, inspect, install, uninstall, upgrade.

Blueprint: packages_bp
Prefix: /api

Thin HTTP wrappers over ``brewdeck.core.services.package_service``.
Every ``BrewDeckError`` raised underneath becomes a structured failure
payload with the error's HTTP status.

Endpoints:
    GET    /status                    — brew availability + lock state
    GET    /packages                  — installed formulae/casks
    GET    /outdated                  — outdated formulae/casks
    GET    /search?query=             — names matching a query
    GET    /info/<type>/<name>        — brew info text
    POST   /install/<type>/<name>     — install
    DELETE /uninstall/<type>/<name>   — uninstall
    POST   /update-all                — upgrade everything outdated
    POST   /update/<type>/<name>      — upgrade one package
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from brewdeck.core.errors import BrewDeckError
from brewdeck.core.models.package import PackageKind
from brewdeck.core.services.package_service import PackageService

logger = logging.getLogger(__name__)

packages_bp = Blueprint("packages", __name__)


def _service() -> PackageService:
    return current_app.config["PACKAGE_SERVICE"]


@packages_bp.errorhandler(BrewDeckError)
def _handle_error(e: BrewDeckError):  # type: ignore[no-untyped-def]
    if e.http_status < 500:
        logger.warning("%s %s → %s: %s", request.method, request.path, e.kind, e.message)
    else:
        logger.error("%s %s → %s: %s", request.method, request.path, e.kind, e.message)
    return jsonify(e.to_dict()), e.http_status


# ── Observe ─────────────────────────────────────────────────────────


@packages_bp.route("/status")
def brew_status():  # type: ignore[no-untyped-def]
    """brew availability, version and whether a mutation is running."""
    return jsonify(_service().status())


@packages_bp.route("/packages")
def package_list():  # type: ignore[no-untyped-def]
    """Installed packages with category, dependency and outdated flags."""
    return jsonify(_service().package_view().to_dict())


@packages_bp.route("/outdated")
def package_outdated():  # type: ignore[no-untyped-def]
    """Outdated packages with installed and latest versions."""
    return jsonify(_service().outdated_view().to_dict())


@packages_bp.route("/search")
def package_search():  # type: ignore[no-untyped-def]
    """Names matching ?query=, per kind."""
    query = request.args.get("query", "")
    return jsonify(_service().search(query).to_dict())


@packages_bp.route("/info/<kind>/<name>")
def package_info(kind: str, name: str):  # type: ignore[no-untyped-def]
    """Free-text detail for one package."""
    detail = _service().info(PackageKind.parse(kind), name)
    return jsonify({"info": detail.info})


# ── Act ─────────────────────────────────────────────────────────────


@packages_bp.route("/install/<kind>/<name>", methods=["POST"])
def package_install(kind: str, name: str):  # type: ignore[no-untyped-def]
    """Install a formula or cask."""
    return jsonify(_service().install(PackageKind.parse(kind), name).to_dict())


@packages_bp.route("/uninstall/<kind>/<name>", methods=["DELETE"])
def package_uninstall(kind: str, name: str):  # type: ignore[no-untyped-def]
    """Uninstall a formula or cask."""
    return jsonify(_service().uninstall(PackageKind.parse(kind), name).to_dict())


@packages_bp.route("/update-all", methods=["POST"])
def package_update_all():  # type: ignore[no-untyped-def]
    """Upgrade every outdated package."""
    return jsonify(_service().upgrade_all().to_dict())


@packages_bp.route("/update/<kind>/<name>", methods=["POST"])
def package_update(kind: str, name: str):  # type: ignore[no-untyped-def]
    """Upgrade one package."""
    return jsonify(_service().upgrade(PackageKind.parse(kind), name).to_dict())
