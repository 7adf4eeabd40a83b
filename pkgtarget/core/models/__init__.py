"""
Domain models for target resolution.

All models are re-exported here for convenient access:

    from pkgtarget.core.models import CapabilitySnapshot, TargetIdentifier, Variant
"""

from pkgtarget.core.models.capability import (
    CapabilitySnapshot,
    CompatLayer,
    LibcFlavor,
    OsFamily,
)
from pkgtarget.core.models.settings import CompatSettings, GitHubSettings, Settings
from pkgtarget.core.models.target import InvalidTargetError, TargetIdentifier
from pkgtarget.core.models.variant import ResolutionOptions, Variant, declared_targets

__all__ = [
    # capability.py
    "CapabilitySnapshot",
    "CompatLayer",
    "LibcFlavor",
    "OsFamily",
    # settings.py
    "CompatSettings",
    "GitHubSettings",
    "Settings",
    # target.py
    "InvalidTargetError",
    "TargetIdentifier",
    # variant.py
    "ResolutionOptions",
    "Variant",
    "declared_targets",
]
