"""
CLI commands for Homebrew packages.

Thin wrappers over ``brewdeck.core.services.package_service``.
"""

from __future__ import annotations

import json
import sys

import click

from brewdeck.core.errors import BrewDeckError, ExternalCommandFailed
from brewdeck.core.models.package import PackageKind
from brewdeck.core.services.package_service import PackageService, build_service


def _service(ctx: click.Context) -> PackageService:
    """Build the service once per invocation from the root context."""
    if "service" not in ctx.obj:
        ctx.obj["service"] = build_service(
            ctx.obj["settings"],
            runner=ctx.obj.get("runner"),
            mock_mode=ctx.obj.get("mock", False),
        )
    return ctx.obj["service"]


def _kind(cask: bool) -> PackageKind:
    return PackageKind.CASK if cask else PackageKind.FORMULA


def _fail(e: BrewDeckError) -> None:
    """Report a core error and exit 1."""
    click.secho(f"❌ {e.message}", fg="red")
    if isinstance(e, ExternalCommandFailed) and e.stderr:
        for line in e.stderr.splitlines()[:20]:
            click.echo(f"   │ {line}")
    sys.exit(1)


@click.group()
def packages() -> None:
    """Packages — list, outdated, search, info, install, uninstall, upgrade."""


# ── Observe ─────────────────────────────────────────────────────


@packages.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show whether brew is reachable."""
    result = _service(ctx).status()

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    if result["brew_available"]:
        click.secho(f"✅ {result['brew_version'] or 'brew'}", fg="green")
    else:
        click.secho("❌ brew not available", fg="red")
    click.echo(f"   Path:   {result['brew_path']}")
    click.echo(f"   Runner: {result['runner']}")


@packages.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--core-only", is_flag=True, help="Hide packages other packages depend on.")
@click.pass_context
def list_packages(ctx: click.Context, as_json: bool, core_only: bool) -> None:
    """List installed formulae and casks with categories."""
    try:
        view = _service(ctx).package_view()
    except BrewDeckError as e:
        _fail(e)
        return

    if as_json:
        click.echo(json.dumps(view.to_dict(), indent=2))
        return

    for label, pkgs in (("Formulae", view.formulae), ("Casks", view.casks)):
        shown = [p for p in pkgs if not (core_only and p.is_dependent)]
        click.secho(f"📦 {label} ({len(shown)}):", fg="cyan", bold=True)
        for p in shown:
            flags = ("⬆" if p.is_outdated else " ") + ("↳" if p.is_dependent else " ")
            click.echo(f"   {flags} {p.name:<30} {p.category}")
        click.echo()


@packages.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def outdated(ctx: click.Context, as_json: bool) -> None:
    """Check for outdated packages."""
    try:
        view = _service(ctx).outdated_view()
    except BrewDeckError as e:
        _fail(e)
        return

    if as_json:
        click.echo(json.dumps(view.to_dict(), indent=2))
        return

    if not view.count:
        click.secho("✅ All packages up to date", fg="green")
        return

    click.secho(f"📦 Outdated ({view.count}):", fg="yellow", bold=True)
    for p in [*view.formulae, *view.casks]:
        pin = " 📌" if p.pinned else ""
        click.echo(f"   {p.name:<30} {p.current_version:<12} → {p.latest_version} ({p.kind}){pin}")
    click.echo()


@packages.command()
@click.argument("query")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def search(ctx: click.Context, query: str, as_json: bool) -> None:
    """Search formulae and casks by name."""
    try:
        result = _service(ctx).search(query)
    except BrewDeckError as e:
        _fail(e)
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    for label, names in (("Formulae", result.formulae), ("Casks", result.casks)):
        click.secho(f"🔍 {label} ({len(names)}):", fg="cyan", bold=True)
        for name in names:
            click.echo(f"   {name}")


@packages.command()
@click.argument("name")
@click.option("--cask", is_flag=True, help="Treat NAME as a cask.")
@click.pass_context
def info(ctx: click.Context, name: str, cask: bool) -> None:
    """Show brew info for one package."""
    try:
        detail = _service(ctx).info(_kind(cask), name)
    except BrewDeckError as e:
        _fail(e)
        return
    click.echo(detail.info)


# ── Act ─────────────────────────────────────────────────────────


@packages.command()
@click.argument("name")
@click.option("--cask", is_flag=True, help="Install a cask instead of a formula.")
@click.pass_context
def install(ctx: click.Context, name: str, cask: bool) -> None:
    """Install a package."""
    click.secho(f"📦 Installing {name}...", fg="cyan")
    try:
        result = _service(ctx).install(_kind(cask), name)
    except BrewDeckError as e:
        _fail(e)
        return
    click.secho(f"✅ {result.message}", fg="green", bold=True)


@packages.command()
@click.argument("name")
@click.option("--cask", is_flag=True, help="Uninstall a cask instead of a formula.")
@click.pass_context
def uninstall(ctx: click.Context, name: str, cask: bool) -> None:
    """Uninstall a package."""
    click.secho(f"🗑  Uninstalling {name}...", fg="cyan")
    try:
        result = _service(ctx).uninstall(_kind(cask), name)
    except BrewDeckError as e:
        _fail(e)
        return
    click.secho(f"✅ {result.message}", fg="green", bold=True)


@packages.command()
@click.argument("name", required=False)
@click.option("--cask", is_flag=True, help="Treat NAME as a cask.")
@click.pass_context
def upgrade(ctx: click.Context, name: str | None, cask: bool) -> None:
    """Upgrade one package, or everything outdated."""
    service = _service(ctx)
    click.secho(f"📦 Upgrading {name or 'all outdated packages'}...", fg="cyan")
    try:
        result = service.upgrade(_kind(cask), name) if name else service.upgrade_all()
    except BrewDeckError as e:
        _fail(e)
        return
    click.secho(f"✅ {result.message}", fg="green", bold=True)
