"""
CLI commands for target checks and variant resolution.

Thin wrappers over ``pkgtarget.core.use_cases.targets``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from pkgtarget.ui.cli.common import bootstrap


@click.group()
def targets() -> None:
    """Targets — check identifiers, show priority, resolve variants."""


@targets.command()
@click.argument("target_ids", nargs=-1, required=True)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, target_ids: tuple[str, ...], as_json: bool) -> None:
    """Check whether this machine satisfies TARGET_IDS."""
    from pkgtarget.core.use_cases.targets import check_targets

    result = check_targets(list(target_ids), bootstrap(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for c in result.checks:
            if not c.valid:
                click.secho(f"   ⚠️  {c.target} (malformed)", fg="yellow")
            elif c.satisfied:
                click.secho(f"   ✅ {c.target}", fg="green")
            else:
                click.echo(f"   ❌ {c.target}")

    if not result.any_satisfied:
        sys.exit(1)


@targets.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def priority(ctx: click.Context, as_json: bool) -> None:
    """Show the family priority order used for dispatch."""
    from pkgtarget.core.services.platform import family_priority

    order = family_priority(bootstrap(ctx))

    if as_json:
        click.echo(json.dumps({"family_priority": order}, indent=2))
        return

    for i, family in enumerate(order, 1):
        click.echo(f"   {i}. {family}")


@targets.command()
@click.argument("variants_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--target", "-t", default=None, help="Explicit target (e.g. linux_x64_gnu).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve(ctx: click.Context, variants_file: str, target: str | None, as_json: bool) -> None:
    """Select the variant in VARIANTS_FILE for this machine."""
    from pkgtarget.core.use_cases.targets import run_resolve

    table = bootstrap(ctx)
    target = target or ctx.obj["settings"].target
    result = run_resolve(Path(variants_file), target=target, table=table)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        if result.effective_target:
            click.echo(f"   Target: {result.effective_target}")
        sys.exit(1)

    click.secho(f"✅ Selected variant for {result.effective_target}", fg="green", bold=True)
    click.echo(json.dumps(result.variant, indent=2, default=str))
