"""
L5 Orchestration — Process bootstrap.

Detects capabilities once and installs the compatibility override when
the host can run Linux binaries. Call ``setup()`` at startup, before
any resolution call.
"""

from __future__ import annotations

import logging

from pkgtarget.core.context import (
    get_override_policy,
    get_settings,
    install_override_policy,
    set_settings,
)
from pkgtarget.core.models.settings import Settings
from pkgtarget.core.services.platform.detection.capabilities import detect
from pkgtarget.core.services.platform.domain.override import LinuxCompatOverride
from pkgtarget.core.services.platform.domain.predicate import TargetPredicateTable

logger = logging.getLogger(__name__)


def default_table() -> TargetPredicateTable:
    """Predicate table over the process snapshot and installed policy."""
    return TargetPredicateTable(detect(), get_override_policy())


def setup(settings: Settings | None = None) -> TargetPredicateTable:
    """Initialize process-wide resolution state.

    Settings registered after the first ``detect()`` do not re-run
    detection. Calling ``setup()`` again with the same host is a no-op.

    Returns:
        The process-wide predicate table.
    """
    if settings is not None:
        set_settings(settings)

    snapshot = detect()
    compat_enabled = get_settings().compat.enabled

    if snapshot.is_bsd and compat_enabled:
        if snapshot.compat_functional:
            install_override_policy(LinuxCompatOverride.from_snapshot(snapshot))
            logger.info(
                "%s with working Linux compatibility layer: native packages "
                "preferred, linux_%s packages accepted as fallback",
                snapshot.sysname, snapshot.arch,
            )
        elif snapshot.compat_layer is not None and snapshot.compat_layer.available:
            logger.info(
                "Linux compatibility tree at %s is not functional; "
                "only native packages are supported",
                snapshot.compat_layer.root,
            )
        else:
            logger.info("No Linux compatibility layer; only native packages are supported")

    return default_table()
