"""
confdeploy — CLI entrypoint.

Usage:
    python -m confdeploy.main --help
    python -m confdeploy.main config check
    python -m confdeploy.main render dashboard.json -p name=Overview
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from confdeploy import __version__
from confdeploy.core.observability.logging_config import configure_from_env


@click.group()
@click.version_option(version=__version__, prog_name="confdeploy")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to confdeploy.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """confdeploy — deploy monitoring configuration in dependency order."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    from confdeploy.core.config.settings import ConfigError, load_settings

    # A broken settings file is reported by the subcommand that needs it.
    try:
        configured = load_settings(ctx.obj["config_path"]).log_level
    except ConfigError:
        configured = None

    configure_from_env(debug=debug, verbose=verbose, quiet=quiet, configured=configured)


# ── config ──────────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Inspect deploy settings."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show the effective settings (file + environment)."""
    from confdeploy.core.config.settings import ConfigError, load_settings

    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(settings.model_dump(mode="json"), indent=2))
        return

    options = settings.options()
    click.secho("\n⚙️  Deploy settings", fg="cyan", bold=True)
    click.echo(f"   dry run:           {options.dry_run}")
    click.echo(f"   continue on error: {options.continue_on_error}")
    click.echo(f"   log level:         {settings.log_level}")
    click.echo(f"   stubs folder:      {settings.stubs_folder or '-'}")
    click.echo()


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate the settings file."""
    from confdeploy.core.config.settings import check_settings

    result = check_settings(ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.secho("✅ Settings are valid", fg="green", bold=True)
    else:
        click.secho("❌ Settings have errors", fg="red", bold=True)

    for error in result.errors:
        click.secho(f"   ✗ {error}", fg="red")
    if not ctx.obj.get("quiet"):
        for warning in result.warnings:
            click.secho(f"   ⚠ {warning}", fg="yellow")

    sys.exit(0 if result.valid else 1)


# ── features ────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def features(ctx: click.Context) -> None:
    """List feature flags and whether they are enabled."""
    from confdeploy.core.config.settings import ConfigError, load_settings
    from confdeploy.core.features import FLAGS

    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    for name in FLAGS:
        flag = settings.feature_flag(name)
        marker = "✓" if flag.enabled() else "✗"
        click.echo(f"   {marker} {name}  ({flag.env_var})")


# ── render ──────────────────────────────────────────────────────────


def _parse_properties(pairs: tuple[str, ...]) -> dict[str, str]:
    properties: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--property")
        properties[key] = value
    return properties


@cli.command()
@click.argument("template", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--property", "-p", "pairs", multiple=True, help="Property as key=value (repeatable).")
@click.option("--raw", is_flag=True, help="Insert values verbatim, without JSON escaping.")
@click.option("--no-validate", is_flag=True, help="Skip the JSON check of the result.")
def render(template: Path, pairs: tuple[str, ...], raw: bool, no_validate: bool) -> None:
    """Render a config TEMPLATE with properties and the environment."""
    from confdeploy.core.errors import UnresolvedPlaceholderError
    from confdeploy.core.template import Template, escape_properties

    properties = _parse_properties(pairs)
    tmpl = Template.from_file(template)

    try:
        result = tmpl.render(properties if raw else escape_properties(properties))
    except UnresolvedPlaceholderError as e:
        click.secho(f"❌ {e.message}", fg="red", err=True)
        sys.exit(1)

    if not no_validate:
        try:
            json.loads(result)
        except json.JSONDecodeError as e:
            click.secho(f"❌ Rendered template is not valid JSON: {e}", fg="red", err=True)
            sys.exit(1)

    click.echo(result)


if __name__ == "__main__":
    cli()
