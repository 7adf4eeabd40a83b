"""
L2 Resolver — Platform-indexed dispatch.

Picks one producer out of a ``{family: callable}`` map by walking the
family priority list:

    native family → compat family (if a policy adds one) → unix

``darwin`` producers may also be keyed ``mac``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TypeVar

from pkgtarget.core.models.capability import OsFamily
from pkgtarget.core.services.platform.data.constants import FAMILY_CASE_ALIASES
from pkgtarget.core.services.platform.domain.errors import PlatformDispatchError
from pkgtarget.core.services.platform.domain.predicate import TargetPredicateTable

logger = logging.getLogger(__name__)

T = TypeVar("T")


def table_or_default(table: TargetPredicateTable | None) -> TargetPredicateTable:
    if table is not None:
        return table
    from pkgtarget.core.services.platform.orchestration.bootstrap import default_table
    return default_table()


def family_priority(table: TargetPredicateTable | None = None) -> list[str]:
    """Ordered family list used by dispatch and default-target derivation."""
    table = table_or_default(table)
    snapshot = table.snapshot

    order = [snapshot.os_family.value]
    if snapshot.posix and snapshot.os_family != OsFamily.GENERIC_UNIX:
        order.append(OsFamily.GENERIC_UNIX.value)

    if table.override is not None:
        order = table.override.extend_priority(order)
    return order


def get_by_platform(
    cases: Mapping[str, Callable[[], T]],
    table: TargetPredicateTable | None = None,
) -> Callable[[], T] | None:
    """Return the highest-priority producer present in ``cases``, or None."""
    for family in family_priority(table):
        for key in FAMILY_CASE_ALIASES.get(family, (family,)):
            if key in cases:
                logger.debug("Selected %s implementation", key)
                return cases[key]
    return None


def when(
    cases: Mapping[str, Callable[[], T]],
    table: TargetPredicateTable | None = None,
) -> T:
    """Invoke and return the producer chosen by ``get_by_platform``.

    Raises:
        PlatformDispatchError: No family in the priority list has a
            producer. The case set is incomplete for this platform.
    """
    table = table_or_default(table)
    producer = get_by_platform(cases, table)
    if producer is None:
        raise PlatformDispatchError(
            "Current platform is not supported. "
            f"Tried {family_priority(table)}, cases cover {sorted(cases)}."
        )
    return producer()
