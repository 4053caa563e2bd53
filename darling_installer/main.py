"""
darling installer — CLI entrypoint.

Usage:
    darling-installer              (same as `install`)
    darling-installer install
    darling-installer check
    python -m darling_installer.main --help
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from darling_installer import __version__
from darling_installer.core.observability.logging_config import (
    FILE_ENV_VAR,
    FILE_LEVEL_ENV_VAR,
    resolve_level,
    setup_logging,
)


def _settings(ctx: click.Context):
    """Load settings once per invocation, exiting 1 on bad config."""
    from darling_installer.core.config.loader import ConfigError, load_settings

    if "settings" not in ctx.obj:
        try:
            ctx.obj["settings"] = load_settings(ctx.obj.get("config_path"))
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)
    return ctx.obj["settings"]


def _runner(ctx: click.Context):
    """Process adapter for this invocation (tests inject a mock via ``obj``)."""
    if ctx.obj.get("runner") is None:
        from darling_installer.adapters.shell.command import ShellCommandAdapter

        ctx.obj["runner"] = ShellCommandAdapter()
    return ctx.obj["runner"]


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="darling-installer")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors (prompts and progress still print).")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to installer.yml (default: $DARLING_INSTALLER_CONFIG or ~/.config).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """darling installer — fetch, build and set up darling and its modules.

    Run without a command to start the interactive installation.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet, environ=os.environ),
        log_file=os.environ.get(FILE_ENV_VAR),
        log_file_level=os.environ.get(FILE_LEVEL_ENV_VAR),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(install)


@cli.command()
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Abort when clone or build exits non-zero (default: from config, off).",
)
@click.pass_context
def install(ctx: click.Context, strict: bool | None) -> None:
    """Interactively install darling and selected modules."""
    from darling_installer.core.errors import InstallerError
    from darling_installer.core.use_cases.install import run_install
    from darling_installer.ui.cli.interaction import ClickInteraction

    settings = _settings(ctx)
    if ctx.get_parameter_source("strict") == click.core.ParameterSource.COMMANDLINE:
        settings = settings.model_copy(update={"strict_exit_codes": strict})

    interaction = ctx.obj.get("interaction") or ClickInteraction()

    try:
        result = run_install(settings, _runner(ctx), interaction)
    except InstallerError as e:
        click.secho(f"❌ {e}", fg="red", bold=True)
        sys.exit(1)

    if result.report and result.report.failed_modules:
        failed = ", ".join(m.module.name for m in result.report.failed_modules)
        click.secho(f"⚠️  Some modules failed to install: {failed}", fg="yellow")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Check that the tools the installer needs are on PATH."""
    from darling_installer.core.services.requirements import check_requirements
    from darling_installer.ui.cli.interaction import ClickInteraction

    settings = _settings(ctx)
    runner = _runner(ctx)

    if as_json:
        results = check_requirements(settings.requirements, runner)
        click.echo(json.dumps({"requirements": results, "ok": all(results.values())}, indent=2))
        sys.exit(0 if all(results.values()) else 1)
        return

    click.secho("Checking requirements...", fg="green", bold=True)
    results = check_requirements(settings.requirements, runner, ClickInteraction())
    missing = [name for name, found in results.items() if not found]
    if missing:
        click.secho(f"❌ Missing: {', '.join(missing)}", fg="red")
        sys.exit(1)
    click.secho("Good news! All requirements are installed.", fg="green", bold=True)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--no-lookup", is_flag=True, help="Skip the registry search.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool, no_lookup: bool) -> None:
    """Detect the distro and look for its darling backend."""
    from darling_installer.core.errors import InstallerError
    from darling_installer.core.services.distro import detect_distro
    from darling_installer.core.services.registry_lookup import lookup_distro_module

    settings = _settings(ctx)

    try:
        distro_id = detect_distro(settings.os_release)
        lookup = None
        if distro_id and not no_lookup:
            lookup = lookup_distro_module(distro_id, _runner(ctx), settings)
    except InstallerError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({
            "distro_id": distro_id,
            "registry": lookup.to_dict() if lookup else None,
        }, indent=2))
        return

    if distro_id is None:
        click.secho(f"⚠️  No ID field in {settings.os_release}", fg="yellow")
        return

    click.echo("Distro: ", nl=False)
    click.secho(f"{distro_id} Linux", fg="cyan", bold=True)
    if lookup is None:
        return
    if lookup.found:
        click.secho(f"   ✓ {lookup.package} is available", fg="green")
    else:
        click.secho(f"   ✗ {lookup.package} not found", fg="red")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def modules(ctx: click.Context, as_json: bool) -> None:
    """List catalog modules and whether they apply here."""
    from darling_installer.core.services.catalog import applicability_report

    settings = _settings(ctx)
    report = applicability_report(settings.modules, _runner(ctx))

    if as_json:
        click.echo(json.dumps({"modules": report}, indent=2))
        return

    click.secho(f"\n📦 Modules: {len(report)}", fg="cyan", bold=True)
    for entry in report:
        if entry["applicable"]:
            click.secho(f"   ✓ {entry['readable_name']} ", fg="green", nl=False)
            click.echo(f"({entry['name']})  → {', '.join(entry['found'])}")
        else:
            click.secho(f"   ✗ {entry['readable_name']} ", fg="red", nl=False)
            click.echo(f"({entry['name']})  needs one of: {', '.join(entry['detection_commands'])}")
    click.echo()


if __name__ == "__main__":
    cli()
