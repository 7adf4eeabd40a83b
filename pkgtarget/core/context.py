"""
Process context — the single source of truth for process-wide resolution state.

This module IS the infrastructure. Two things live here, each set ONCE
at startup by whichever entry point launches the process:

    - Settings:         main.py → context.set_settings(settings)
    - Override policy:  setup() → context.install_override_policy(policy)

Design notes:
    - Module-level singletons (not a class). Simple, no over-engineering.
    - get_settings() returns defaults when unset.
    - An override policy is installed at most once. Installing an equal
      policy again is a no-op; installing a different one is a usage
      error. Two threads racing to install is not arbitrated: last write
      wins.
    - Reads are lock-free (simple reference assignment).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from pkgtarget.core.models.settings import Settings

if TYPE_CHECKING:
    from pkgtarget.core.services.platform.domain.override import OverridePolicy

logger = logging.getLogger(__name__)

_settings: Optional[Settings] = None
_override_policy: Optional["OverridePolicy"] = None


class OverridePolicyError(RuntimeError):
    """Raised when a conflicting override policy is installed."""


def set_settings(settings: Settings) -> None:
    """Register resolver settings for the current process."""
    global _settings
    _settings = settings


def get_settings() -> Settings:
    """Return the current settings, or defaults if none were registered."""
    return _settings if _settings is not None else Settings()


def install_override_policy(policy: "OverridePolicy") -> None:
    """Install the process-wide override policy.

    Raises:
        OverridePolicyError: If a different policy is already installed.
    """
    global _override_policy
    if _override_policy is not None:
        if _override_policy == policy:
            return
        raise OverridePolicyError(
            f"Override policy already installed ({_override_policy!r}); "
            "it cannot be replaced mid-session."
        )
    _override_policy = policy
    logger.info("Installed override policy: %r", policy)


def get_override_policy() -> Optional["OverridePolicy"]:
    """Return the installed override policy, or None."""
    return _override_policy


def reset() -> None:
    """Clear all process state. Tests only."""
    global _settings, _override_policy
    _settings = None
    _override_policy = None
