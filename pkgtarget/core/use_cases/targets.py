"""
Target use cases — check target identifiers and resolve variant files.

A variant file is YAML (or JSON) holding either a list of variants, a
mapping with a ``variants`` list, or a single variant mapping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pkgtarget.core.config.loader import ConfigError
from pkgtarget.core.models.target import InvalidTargetError, TargetIdentifier
from pkgtarget.core.models.variant import ResolutionOptions
from pkgtarget.core.services.platform import (
    PLATFORM_UNSUPPORTED,
    PlatformUnsupportedError,
    TargetPredicateTable,
    default_table,
    effective_target,
    resolve,
)

logger = logging.getLogger(__name__)


@dataclass
class TargetCheck:
    target: str
    satisfied: bool
    valid: bool = True


@dataclass
class CheckResult:
    """Verdict for each requested target."""

    checks: list[TargetCheck] = field(default_factory=list)

    @property
    def any_satisfied(self) -> bool:
        return any(c.satisfied for c in self.checks)

    def to_dict(self) -> dict:
        return {
            "any_satisfied": self.any_satisfied,
            "targets": [
                {"target": c.target, "satisfied": c.satisfied, "valid": c.valid}
                for c in self.checks
            ],
        }


def check_targets(targets: list[str], table: TargetPredicateTable | None = None) -> CheckResult:
    """Evaluate each target against the host."""
    table = table or default_table()
    result = CheckResult()
    for raw in targets:
        try:
            TargetIdentifier.parse(raw)
        except InvalidTargetError:
            result.checks.append(TargetCheck(target=raw, satisfied=False, valid=False))
            continue
        result.checks.append(TargetCheck(target=raw, satisfied=table.satisfies(raw)))
    return result


@dataclass
class ResolveResult:
    """Result of resolving a variant file."""

    variant: Any = None
    effective_target: str | None = None
    variant_count: int = 0
    error: str | None = None
    code: str | None = None

    def to_dict(self) -> dict:
        result: dict = {
            "effective_target": self.effective_target,
            "variant_count": self.variant_count,
        }
        if self.error:
            result["error"] = self.error
            result["code"] = self.code
        else:
            result["variant"] = self.variant
        return result


def load_variants(path: Path) -> list[Any] | dict:
    """Read a variant declaration file.

    Raises:
        ConfigError: If the file is missing, unparseable, or not a
            list / mapping.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("variants"), list):
        return data["variants"]
    if isinstance(data, (list, dict)):
        return data
    raise ConfigError(f"Expected a variant list or mapping in {path}, got {type(data).__name__}")


def run_resolve(
    path: Path,
    target: str | None = None,
    table: TargetPredicateTable | None = None,
) -> ResolveResult:
    """Resolve the variants declared in ``path`` for this machine.

    Args:
        path: Variant declaration file.
        target: Optional explicit target.
        table: Predicate table (default: process-wide).
    """
    result = ResolveResult()

    try:
        variants = load_variants(path)
    except ConfigError as e:
        result.error = str(e)
        return result

    table = table or default_table()
    options = ResolutionOptions(target=target)
    result.variant_count = len(variants) if isinstance(variants, list) else 1

    try:
        result.effective_target = str(effective_target(options, table))
        result.variant = resolve(variants, options, table=table)
    except PlatformUnsupportedError as e:
        result.error = str(e)
        result.code = PLATFORM_UNSUPPORTED

    return result
