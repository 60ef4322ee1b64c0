"""
brewdeck — CLI entrypoint.

Usage:
    brewdeck --help
    brewdeck web
    brewdeck packages list
    brewdeck packages upgrade
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from brewdeck import __version__
from brewdeck.core.config.loader import ConfigError, load_settings
from brewdeck.core.observability.logging_config import configure_from_cli


@click.group()
@click.version_option(version=__version__, prog_name="brewdeck")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to brewdeck.yml (default: auto-detect).",
)
@click.option("--mock", is_flag=True, help="Use the demo installation instead of brew.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    mock: bool,
) -> None:
    """brewdeck — a local web control panel for Homebrew."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["mock"] = mock

    configure_from_cli(debug=debug, verbose=verbose, quiet=quiet)

    if "settings" not in ctx.obj:
        try:
            ctx.obj["settings"] = load_settings(Path(config_path) if config_path else None)
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Bind address (default: from config, 127.0.0.1).")
@click.option("--port", "-p", default=None, type=int, help="Port number (default: from config, 3001).")
@click.pass_context
def web(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Start the API server for the browser client."""
    from brewdeck.ui.web.server import create_app, run_server

    settings = ctx.obj["settings"]
    mock = ctx.obj.get("mock", False)
    host = host or settings.host
    port = port or settings.port

    app = create_app(settings, runner=ctx.obj.get("runner"), mock_mode=mock)

    click.echo()
    click.secho("🍺 brewdeck — Homebrew control panel", bold=True)
    click.echo(f"   API:  http://{host}:{port}/api")
    click.echo(f"   brew: {settings.brew_path}")
    if mock:
        click.secho("   Mode: mock (demo data, no real brew)", fg="yellow")
    if ctx.obj.get("debug"):
        click.secho("   Logging: DEBUG (all output)", fg="yellow")
    click.echo()

    run_server(app, host=host, port=port, debug=ctx.obj.get("debug", False))


# ── Register sub-command groups from brewdeck/ui/cli/ ───────────────

from brewdeck.ui.cli.packages import packages  # noqa: E402

cli.add_command(packages)


if __name__ == "__main__":
    cli()
