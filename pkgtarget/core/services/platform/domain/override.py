"""
L1 Domain — Compatibility override policies.

An override policy widens what the host is allowed to satisfy without
touching the capability snapshot. It contributes two extension points:

    extend_predicate(os, arch, env)  → True / False / None (defer)
    extend_priority(family_order)    → reordered family list

The predicate table and dispatch consult the policy they were given;
nothing is patched in place.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from pkgtarget.core.models.capability import CapabilitySnapshot
from pkgtarget.core.models.target import TargetIdentifier
from pkgtarget.core.services.platform.data.constants import COMPAT_FAMILY

logger = logging.getLogger(__name__)


class OverridePolicy(ABC):
    """Base class for override policies."""

    @property
    def compat_family(self) -> str | None:
        """Family this policy adds, or None."""
        return None

    @property
    def active(self) -> bool:
        return False

    @abstractmethod
    def extend_predicate(self, os: str, arch: str | None, env: str | None) -> bool | None:
        """Verdict for a target, or None to defer to the standard predicate."""

    @abstractmethod
    def extend_priority(self, family_order: list[str]) -> list[str]:
        """Return a new family priority list."""

    def fallback_target(self) -> TargetIdentifier | None:
        """Effective target for the compatibility retry pass."""
        return None


@dataclass(frozen=True)
class LinuxCompatOverride(OverridePolicy):
    """Accept Linux targets on a BSD host with a working Linux compat layer.

    Only same-architecture targets are accepted: a foreign binary built
    for another CPU would install fine and then fail to execute.
    """

    host_arch: str
    available: bool = False
    functional: bool = False

    # Linux env components that run under the compat layer
    accepted_envs: frozenset[str] = frozenset({"gnu", "musl"})

    @classmethod
    def from_snapshot(cls, snapshot: CapabilitySnapshot) -> LinuxCompatOverride:
        """Build the policy for ``snapshot``; inactive unless it is a BSD host."""
        layer = snapshot.compat_layer if snapshot.is_bsd else None
        return cls(
            host_arch=snapshot.arch,
            available=bool(layer and layer.available),
            functional=bool(layer and layer.functional),
        )

    @property
    def compat_family(self) -> str:
        return COMPAT_FAMILY.value

    @property
    def active(self) -> bool:
        return self.available and self.functional

    def extend_predicate(self, os: str, arch: str | None, env: str | None) -> bool | None:
        if os != self.compat_family or not self.active:
            return None
        if arch is not None and arch != self.host_arch:
            logger.debug(
                "Rejecting %s target for arch %s on %s host",
                os, arch, self.host_arch,
            )
            return False
        if env is not None and env not in self.accepted_envs:
            return False
        return True

    def extend_priority(self, family_order: list[str]) -> list[str]:
        family = self.compat_family
        if not self.active or not family_order or family_order[0] == family:
            return list(family_order)
        rest = [f for f in family_order[1:] if f != family]
        return [family_order[0], family, *rest]

    def fallback_target(self) -> TargetIdentifier | None:
        if not self.active:
            return None
        return TargetIdentifier(os=self.compat_family, arch=self.host_arch)
