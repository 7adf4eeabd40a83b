"""
Detection use case — report what this machine satisfies.

Ties together bootstrap, the capability snapshot, family priority and
the derived default target.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pkgtarget.core.models.capability import CapabilitySnapshot
from pkgtarget.core.services.platform import (
    PlatformUnsupportedError,
    TargetPredicateTable,
    default_table,
    effective_target,
    family_priority,
)

logger = logging.getLogger(__name__)


@dataclass
class DetectResult:
    """Result of the detect use case."""

    snapshot: CapabilitySnapshot | None = None
    family_priority: list[str] = field(default_factory=list)
    default_target: str | None = None
    override_active: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
        if self.snapshot is not None:
            result["snapshot"] = self.snapshot.to_dict()
        result["family_priority"] = self.family_priority
        result["default_target"] = self.default_target
        result["override_active"] = self.override_active
        return result


def run_detect(table: TargetPredicateTable | None = None) -> DetectResult:
    """Describe the host as the resolver sees it.

    Args:
        table: Predicate table to describe (default: process-wide).
    """
    table = table or default_table()
    result = DetectResult(
        snapshot=table.snapshot,
        family_priority=family_priority(table),
        override_active=bool(table.override and table.override.active),
    )

    try:
        result.default_target = str(effective_target(table=table))
    except PlatformUnsupportedError as e:
        logger.debug("No default target: %s", e)
        result.error = str(e)

    return result
