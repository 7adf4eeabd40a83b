"""
pkgtarget — CLI entrypoint.

Usage:
    python -m pkgtarget.main --help
    python -m pkgtarget.main detect
    python -m pkgtarget.main targets resolve variants.yml
    python -m pkgtarget.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from pkgtarget import __version__
from pkgtarget.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    level_from_flags,
    setup_logging,
)
from pkgtarget.ui.cli.common import bootstrap


@click.group()
@click.version_option(version=__version__, prog_name="pkgtarget")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to pkgtarget.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """pkgtarget — pick the right platform variant for this machine."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=level_from_flags(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show the capabilities this machine was detected with."""
    from pkgtarget.core.use_cases.detect import run_detect

    result = run_detect(bootstrap(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    snapshot = result.snapshot
    assert snapshot is not None  # always set by run_detect

    click.secho(f"\n🖥  {snapshot.sysname or snapshot.os_family.value} ({snapshot.machine})", fg="cyan", bold=True)
    click.echo(f"   Family: {snapshot.os_family.value}")
    click.echo(f"   Arch:   {snapshot.arch}")
    click.echo(f"   libc:   {snapshot.libc_flavor.value}")

    layer = snapshot.compat_layer
    if layer is not None:
        click.echo()
        click.secho("   Compatibility layer:", fg="white", bold=True)
        icon = "✅" if layer.functional else ("⚠️" if layer.available else "❌")
        click.echo(f"     {icon} {layer.root}")
        click.echo(f"     Available: {layer.available}  Functional: {layer.functional}")
        click.echo(f"     Distro:    {layer.foreign_distro_id or 'unknown'}")
        if layer.kernel_module:
            click.echo(f"     Module:    {layer.kernel_module}")

    click.echo()
    click.echo(f"   Priority: {' → '.join(result.family_priority)}")
    if result.default_target:
        click.echo(f"   Default target: {result.default_target}")
    else:
        click.secho(f"   ❌ {result.error}", fg="red")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def distro(ctx: click.Context, as_json: bool) -> None:
    """Show the OS distribution."""
    from pkgtarget.core.services.platform.detection.distribution import detect_distribution

    result = detect_distribution(bootstrap(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(f"{result.id} {result.version_id}".rstrip())
    if result.compat_layer is not None and result.compat_layer.functional:
        click.echo(f"   + Linux compatibility ({result.compat_layer.foreign_distro_id or 'unknown'})")


@cli.command()
@click.pass_context
def env(ctx: click.Context) -> None:
    """Print PATH with the install prefix's bin directory applied."""
    from pkgtarget.core.services.platform import path_separator, search_path

    table = bootstrap(ctx)
    settings = ctx.obj["settings"]
    bin_dir = str(Path(settings.install_root_dir).expanduser() / "bin")
    value = search_path(
        os.environ.get("PATH", ""),
        bin_dir,
        mode=settings.PATH,
        sep=path_separator(table.snapshot),
    )
    click.echo(f"PATH={value}")


@cli.group()
def config() -> None:
    """Settings commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate pkgtarget.yml."""
    from pkgtarget.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.secho("✅ Settings are valid", fg="green", bold=True)
        if result.config_path:
            click.echo(f"   File: {result.config_path}")
    else:
        click.secho("❌ Settings errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(1)


# ── Register sub-groups ─────────────────────────────────────────

from pkgtarget.ui.cli.targets import targets  # noqa: E402

cli.add_command(targets)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
