"""
Shared CLI helpers.
"""

from __future__ import annotations

import sys

import click

from pkgtarget.core.services.platform.domain.predicate import TargetPredicateTable


def bootstrap(ctx: click.Context) -> TargetPredicateTable:
    """Load settings and initialize resolution state (once per process).

    Exits with status 1 on a settings error.
    """
    from pkgtarget.core.config.loader import ConfigError, load_settings
    from pkgtarget.core.services.platform import setup

    obj = ctx.ensure_object(dict)
    if "table" in obj:
        return obj["table"]

    try:
        settings = load_settings(obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    obj["settings"] = settings
    obj["table"] = setup(settings)
    return obj["table"]
