"""
L3 Detection — OS distribution.

Identifies the distribution and version of the host, picking the probe
through platform dispatch. On FreeBSD with a working Linux compat layer
the native FreeBSD probe still wins; the compat layer is reported
alongside it.
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from pkgtarget.core.models.capability import CompatLayer
from pkgtarget.core.services.platform.detection.capabilities import run_probe
from pkgtarget.core.services.platform.domain.predicate import TargetPredicateTable
from pkgtarget.core.services.platform.resolver.dispatch import table_or_default, when

logger = logging.getLogger(__name__)

_ETC = Path("/etc")


@dataclass
class OsDistribution:
    """Distribution identity of the host."""

    id: str
    version_id: str = ""
    version: dict[str, int] = field(default_factory=dict)
    compat_layer: CompatLayer | None = None

    def to_dict(self) -> dict:
        result: dict = {
            "id": self.id,
            "version_id": self.version_id,
            "version": dict(self.version),
        }
        if self.compat_layer is not None:
            result["compat_layer"] = self.compat_layer.model_dump()
        return result


# ── Parsers (pure) ──────────────────────────────────────────────


def parse_os_release(text: str) -> dict[str, str]:
    """Parse ``KEY=value`` lines, stripping surrounding quotes."""
    entries: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        entries[key.strip()] = value.strip().strip('"').strip("'")
    return entries


def _int_or_none(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def parse_linux_distribution(entries: dict[str, str]) -> OsDistribution:
    """Identify a Linux distribution from parsed os-release entries."""
    distro_id = entries.get("ID", "")
    version_id = entries.get("VERSION_ID", "")

    if distro_id == "ubuntu" and version_id:
        parts = version_id.split(".")
        version = {"major": _int_or_none(parts[0])}
        if len(parts) > 1:
            version["minor"] = _int_or_none(parts[1])
        return OsDistribution(
            id="ubuntu",
            version_id=version_id,
            version={k: v for k, v in version.items() if v is not None},
        )

    if distro_id == "centos" and version_id:
        major = _int_or_none(version_id.split(".")[0])
        return OsDistribution(
            id="centos",
            version_id=version_id,
            version={"major": major} if major is not None else {},
        )

    return OsDistribution(id="linux-generic")


def parse_freebsd_version(
    raw: str,
    compat_layer: CompatLayer | None = None,
) -> OsDistribution:
    """Parse ``13.2-RELEASE`` / ``14-CURRENT`` style version strings."""
    m = re.match(r"\s*(\d+)(?:\.(\d+))?", raw or "")
    if not m:
        return OsDistribution(id="freebsd", compat_layer=compat_layer)
    major = int(m.group(1))
    minor = int(m.group(2) or 0)
    return OsDistribution(
        id="freebsd",
        version_id=f"{major}.{minor}",
        version={"major": major, "minor": minor},
        compat_layer=compat_layer,
    )


# ── Probes ──────────────────────────────────────────────────────


def _linux_distribution() -> OsDistribution:
    text = ""
    for release_file in sorted(_ETC.glob("*-release")):
        try:
            text += release_file.read_text(encoding="utf-8", errors="replace") + "\n"
        except OSError as e:
            logger.debug("Cannot read %s: %s", release_file, e)
    if not text:
        return OsDistribution(id="linux-generic")
    return parse_linux_distribution(parse_os_release(text))


def _freebsd_distribution(compat_layer: CompatLayer | None) -> OsDistribution:
    for args in (["freebsd-version"], ["uname", "-r"]):
        ok, output = run_probe(args, ok_codes=(0,))
        if ok and output.strip():
            return parse_freebsd_version(output.strip(), compat_layer)
    return OsDistribution(id="freebsd", compat_layer=compat_layer)


def detect_distribution(table: TargetPredicateTable | None = None) -> OsDistribution:
    """Probe the host distribution (uncached)."""
    table = table_or_default(table)
    snapshot = table.snapshot
    return when(
        {
            "linux": _linux_distribution,
            "freebsd": lambda: _freebsd_distribution(snapshot.compat_layer),
            "darwin": lambda: OsDistribution(id="macOS"),
            "win": lambda: OsDistribution(id="windows"),
            "unix": lambda: OsDistribution(id=(snapshot.sysname or "unix").lower()),
        },
        table,
    )


@functools.lru_cache(maxsize=1)
def os_distribution() -> OsDistribution:
    """Process-cached ``detect_distribution()`` for the default table."""
    return detect_distribution()
