"""
Web server — Flask app factory.

Creates and configures the Flask application that fronts brew for the
browser client. All endpoints live under ``/api``; the UI itself is
served separately.
"""

from __future__ import annotations

import logging

from flask import Flask
from flask_cors import CORS

from brewdeck.adapters.base import CommandRunner
from brewdeck.core.config.loader import Settings
from brewdeck.core.services.package_service import build_service

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    runner: CommandRunner | None = None,
    mock_mode: bool = False,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings: Loaded settings (defaults if None).
        runner: Explicit command runner (tests inject a mock here).
        mock_mode: Serve the canned demo installation instead of brew.

    Returns:
        Configured Flask application.
    """
    settings = settings or Settings()
    app = Flask(__name__)

    app.config["SETTINGS"] = settings
    app.config["MOCK_MODE"] = mock_mode
    app.config["PACKAGE_SERVICE"] = build_service(settings, runner=runner, mock_mode=mock_mode)

    from brewdeck.ui.web.routes_packages import packages_bp

    app.register_blueprint(packages_bp, url_prefix="/api")

    # the UI dev server runs on another port
    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    logger.info(
        "Web app created (brew=%s, runner=%s)",
        settings.brew_path,
        app.config["PACKAGE_SERVICE"].runner.name,
    )
    return app


def run_server(
    app: Flask,
    host: str = "127.0.0.1",
    port: int = 3001,
    debug: bool = False,
) -> None:
    """Run the Flask development server (threaded: one thread per request)."""
    logger.info("Starting web server on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug, use_reloader=False, threaded=True)
