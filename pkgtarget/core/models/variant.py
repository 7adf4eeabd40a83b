"""
Variant model — one platform-specific distribution of a package.

Registry data reaches the resolver as plain mappings, so the resolver
reads ``target`` from either a mapping key or an attribute. The typed
``Variant`` here is a convenience for callers building variants in code.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

TargetSpec = str | list[str] | tuple[str, ...] | None


@dataclass(frozen=True)
class Variant:
    """A variant with an optional target tag and an opaque payload."""

    target: TargetSpec = None
    payload: Any = None


@dataclass
class ResolutionOptions:
    """Per-call resolution options.

    ``force`` and ``version`` belong to the install pipeline (version
    validation); they ride along untouched.
    """

    target: str | None = None
    force: bool = False
    version: str | None = None


def declared_targets(variant: Any) -> list[str] | None:
    """Return a variant's declared targets as a list, or None if untagged."""
    if isinstance(variant, Mapping):
        raw = variant.get("target")
    else:
        raw = getattr(variant, "target", None)

    if raw is None:
        return None
    if isinstance(raw, str):
        return [raw]
    return [t for t in raw if isinstance(t, str)]
