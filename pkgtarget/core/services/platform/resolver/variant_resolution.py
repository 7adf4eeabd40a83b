"""
L2 Resolver — Variant selection (``coalesce_by_target``).

Given a package's declared variant(s) and optional resolution options,
select exactly one variant or raise ``PlatformUnsupportedError``.

Resolution order:
  1. Effective target: explicit ``options.target`` verbatim, otherwise
     ``{first satisfied family in priority order}_{host arch}``.
  2. Scan variants in declared order; first match wins. Untagged
     variants always match.
  3. No match, no explicit target, and an active override policy:
     rescan once against the policy's fallback target (compat family +
     host arch). Declared architectures must still equal the host's.

A single variant and a one-element list resolve identically.
Resolution does no I/O and depends only on its inputs plus the
snapshot and policy carried by the predicate table.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pkgtarget.core.models.target import InvalidTargetError, TargetIdentifier
from pkgtarget.core.models.variant import ResolutionOptions, declared_targets
from pkgtarget.core.services.platform.data.constants import OS_TOKEN_COVERS
from pkgtarget.core.services.platform.domain.errors import PlatformUnsupportedError
from pkgtarget.core.services.platform.domain.predicate import TargetPredicateTable
from pkgtarget.core.services.platform.resolver.dispatch import (
    family_priority,
    table_or_default,
)

logger = logging.getLogger(__name__)

_NO_MATCH = object()


def _families(os_token: str) -> frozenset[str]:
    return OS_TOKEN_COVERS.get(os_token, frozenset({os_token}))


def _declared_matches(
    raw: str,
    effective: TargetIdentifier,
    table: TargetPredicateTable,
    explicit: bool,
) -> bool:
    """Does one declared target apply under ``effective``?

    Explicit targets are matched structurally only: the user may be
    targeting another machine. Derived targets must also satisfy the
    host predicate table, which is what checks env (gnu/musl) and
    consults the override policy.
    """
    try:
        declared = TargetIdentifier.parse(raw)
    except InvalidTargetError:
        logger.debug("Skipping malformed declared target %r", raw)
        return False

    if not _families(effective.os) <= _families(declared.os):
        return False
    if declared.arch is not None and effective.arch is not None and declared.arch != effective.arch:
        return False
    if explicit:
        return declared.env is None or effective.env is None or declared.env == effective.env
    return table.satisfies(declared)


def variant_matches(
    variant: Any,
    effective: TargetIdentifier,
    table: TargetPredicateTable,
    explicit: bool = False,
) -> bool:
    """Any-of semantics over the variant's declared targets."""
    targets = declared_targets(variant)
    if targets is None:
        return True
    return any(_declared_matches(t, effective, table, explicit) for t in targets)


def _first_match(
    candidates: Sequence[Any],
    effective: TargetIdentifier,
    table: TargetPredicateTable,
    explicit: bool,
) -> Any:
    for variant in candidates:
        if variant_matches(variant, effective, table, explicit):
            return variant
    return _NO_MATCH


def primary_family(table: TargetPredicateTable | None = None) -> str | None:
    """First family in priority order that the host satisfies."""
    table = table_or_default(table)
    for family in family_priority(table):
        if table.satisfies(family):
            return family
    return None


def effective_target(
    options: ResolutionOptions | None = None,
    table: TargetPredicateTable | None = None,
) -> TargetIdentifier:
    """Derive the target resolution scans against.

    Raises:
        PlatformUnsupportedError: The explicit target is malformed, or
            the host satisfies no family at all.
    """
    table = table_or_default(table)
    if options is not None and options.target:
        try:
            return TargetIdentifier.parse(options.target)
        except InvalidTargetError as e:
            raise PlatformUnsupportedError(str(e)) from e

    family = primary_family(table)
    if family is None:
        raise PlatformUnsupportedError()
    return TargetIdentifier(os=family, arch=table.snapshot.arch)


def resolve(
    variants: Any,
    options: ResolutionOptions | None = None,
    *,
    table: TargetPredicateTable | None = None,
) -> Any:
    """Select one variant for this machine.

    Args:
        variants: A single variant or an ordered list of variants. A
            variant is a mapping or object with an optional ``target``
            (string or list of strings).
        options: Resolution options; ``options.target`` overrides the
            derived target.
        table: Predicate table to resolve against (default: the
            process-wide one).

    Returns:
        The selected variant, unchanged.

    Raises:
        PlatformUnsupportedError: Nothing matched.
    """
    table = table_or_default(table)
    options = options or ResolutionOptions()
    explicit = bool(options.target)

    candidates = list(variants) if isinstance(variants, (list, tuple)) else [variants]
    if not candidates:
        raise PlatformUnsupportedError()

    effective = effective_target(options, table)
    selected = _first_match(candidates, effective, table, explicit)
    if selected is not _NO_MATCH:
        return selected

    if not explicit and table.override is not None:
        fallback = table.override.fallback_target()
        if fallback is not None and fallback != effective:
            logger.debug("No %s variant, retrying with %s", effective, fallback)
            selected = _first_match(candidates, fallback, table, explicit=False)
            if selected is not _NO_MATCH:
                return selected

    logger.debug("No variant matched %s among %d candidate(s)", effective, len(candidates))
    raise PlatformUnsupportedError()


coalesce_by_target = resolve


def ensure_valid_platform(
    platforms: Iterable[str],
    table: TargetPredicateTable | None = None,
) -> None:
    """Raise unless the host satisfies at least one of ``platforms``."""
    table = table_or_default(table)
    if not table.any_satisfied(platforms):
        raise PlatformUnsupportedError()
