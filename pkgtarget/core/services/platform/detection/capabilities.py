"""
L3 Detection — Host capabilities.

Read-only probes for OS family, CPU architecture, libc flavor and, on
BSD hosts, a Linux compatibility tree. Probes never raise: a failed or
missing probe degrades to a less-capable value and is logged at DEBUG.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
import threading
from pathlib import Path

from pkgtarget.core.context import get_settings
from pkgtarget.core.models.capability import (
    BSD_FAMILIES,
    CapabilitySnapshot,
    CompatLayer,
    LibcFlavor,
    OsFamily,
)
from pkgtarget.core.models.settings import CompatSettings
from pkgtarget.core.services.platform.data.constants import (
    ARCH_ALIASES,
    COMPAT_KERNEL_MODULES,
    COMPAT_PROBE_BINARIES,
    COMPAT_ROOTS,
    PROBE_TIMEOUT_SECONDS,
    SYSNAME_FAMILIES,
)

logger = logging.getLogger(__name__)

_snapshot: CapabilitySnapshot | None = None
_snapshot_lock = threading.Lock()


# ── Helpers ─────────────────────────────────────────────────────


def run_probe(
    args: list[str],
    timeout: float = PROBE_TIMEOUT_SECONDS,
    ok_codes: tuple[int, ...] = (0, 1),
) -> tuple[bool, str]:
    """Run a probe command and return ``(ok, stdout + stderr)``.

    Exit code 1 counts as success by default: ``ldd --version`` on musl
    exits 1 while still printing its banner.
    """
    if not shutil.which(args[0]):
        return False, f"{args[0]} is not executable"
    try:
        r = subprocess.run(
            args,
            capture_output=True, text=True, timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Probe %s failed: %s", args[0], e)
        return False, ""
    return r.returncode in ok_codes, (r.stdout or "") + (r.stderr or "")


def normalize_arch(machine: str) -> str:
    """Map a raw ``uname -m`` value to a target arch token."""
    raw = (machine or "").strip()
    if not raw:
        return "unknown"
    return ARCH_ALIASES.get(raw) or ARCH_ALIASES.get(raw.lower()) or raw.lower()


def os_family_for(sysname: str) -> OsFamily:
    """Map ``platform.system()`` to an OS family."""
    return SYSNAME_FAMILIES.get((sysname or "").strip().lower(), OsFamily.GENERIC_UNIX)


# ── libc ────────────────────────────────────────────────────────


def detect_libc(family: OsFamily) -> LibcFlavor:
    """Detect the C library flavor.

    BSDs ship their own libc. On Linux, ask ``getconf`` first and fall
    back to parsing ``ldd --version``.
    """
    if family in BSD_FAMILIES:
        return LibcFlavor.BSD
    if family != OsFamily.LINUX:
        return LibcFlavor.UNKNOWN

    ok, output = run_probe(["getconf", "GNU_LIBC_VERSION"])
    if ok and "glibc" in output.lower():
        return LibcFlavor.GLIBC

    ok, output = run_probe(["ldd", "--version"])
    if ok:
        lowered = output.lower()
        if "musl" in lowered:
            return LibcFlavor.MUSL
        if "glibc" in lowered or "gnu" in lowered:
            return LibcFlavor.GLIBC

    logger.debug("Could not determine libc flavor, assuming unknown")
    return LibcFlavor.UNKNOWN


# ── Compatibility layer ─────────────────────────────────────────


def sniff_compat_distro(os_release: str) -> str:
    """Classify the contents of a compat tree's ``os-release`` file."""
    if any(name in os_release for name in ("CentOS", "AlmaLinux", "Rocky Linux")):
        for major in ("9", "8", "7"):
            if f'VERSION="{major}' in os_release or f'VERSION_ID="{major}' in os_release:
                return f"el{major}"
        return "unknown-linux"
    if "Ubuntu" in os_release:
        return "ubuntu"
    if "Debian" in os_release:
        return "debian"
    return "unknown-linux"


def _read_compat_distro(root: Path) -> str | None:
    try:
        text = (root / "etc" / "os-release").read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Compat os-release unreadable under %s: %s", root, e)
        return None
    return sniff_compat_distro(text)


def _detect_kernel_module() -> str | None:
    ok, output = run_probe(["kldstat"])
    if not ok:
        return None
    for module in COMPAT_KERNEL_MODULES:
        if module in output:
            return module
    return None


def probe_compat_layer(
    family: OsFamily,
    root: str | None = None,
    probe_binaries: tuple[str, ...] = COMPAT_PROBE_BINARIES,
    timeout: float = PROBE_TIMEOUT_SECONDS,
) -> CompatLayer | None:
    """Probe a BSD host for its Linux compatibility tree.

    Returns None when the family has no known compat root and none is
    configured. Otherwise returns a ``CompatLayer`` whose ``functional``
    flag is set only if one of ``probe_binaries`` (relative to the root)
    ran and exited 0.
    """
    root_str = root or COMPAT_ROOTS.get(family)
    if not root_str:
        return None

    root_path = Path(root_str)
    if not root_path.is_dir():
        logger.debug("No compatibility tree at %s", root_path)
        return CompatLayer(available=False, functional=False, root=root_str)

    kernel_module = _detect_kernel_module() if family == OsFamily.FREEBSD else None
    distro_id = _read_compat_distro(root_path)

    functional = False
    for rel in probe_binaries:
        binary = root_path / rel
        ok, _ = run_probe([str(binary)], timeout=timeout, ok_codes=(0,))
        if ok:
            functional = True
            logger.debug("Compatibility layer verified by running %s", binary)
            break

    if not functional:
        logger.debug("Compatibility tree at %s is present but not functional", root_path)

    return CompatLayer(
        available=True,
        functional=functional,
        foreign_distro_id=distro_id,
        root=root_str,
        kernel_module=kernel_module,
    )


# ── Snapshot ────────────────────────────────────────────────────


def build_snapshot(
    sysname: str | None = None,
    machine: str | None = None,
    *,
    posix: bool | None = None,
    compat: CompatSettings | None = None,
) -> CapabilitySnapshot:
    """Probe the host and build a fresh, uncached snapshot.

    Args:
        sysname: Override for ``platform.system()``.
        machine: Override for ``platform.machine()``.
        posix: Override for POSIX detection.
        compat: Compat-layer probe settings (defaults when None).
    """
    sysname = platform.system() if sysname is None else sysname
    machine = platform.machine() if machine is None else machine
    compat = compat or CompatSettings()

    family = os_family_for(sysname)
    if posix is None:
        posix = family != OsFamily.WINDOWS and (
            family != OsFamily.GENERIC_UNIX or os.name == "posix"
        )

    compat_layer = None
    if family in BSD_FAMILIES and compat.enabled:
        compat_layer = probe_compat_layer(
            family,
            root=compat.root,
            probe_binaries=tuple(compat.probe_binaries),
            timeout=compat.probe_timeout,
        )

    return CapabilitySnapshot(
        os_family=family,
        sysname=sysname,
        machine=machine,
        arch=normalize_arch(machine),
        libc_flavor=detect_libc(family),
        posix=posix,
        compat_layer=compat_layer,
    )


def detect() -> CapabilitySnapshot:
    """Return the process-wide capability snapshot, probing on first call."""
    global _snapshot
    if _snapshot is not None:
        return _snapshot
    with _snapshot_lock:
        if _snapshot is None:
            _snapshot = build_snapshot(compat=get_settings().compat)
            logger.debug(
                "Detected %s/%s libc=%s compat=%s",
                _snapshot.os_family.value, _snapshot.arch,
                _snapshot.libc_flavor.value, _snapshot.compat_functional,
            )
    return _snapshot


def clear_detection_cache() -> None:
    """Forget the cached snapshot so the next ``detect()`` probes again."""
    global _snapshot
    with _snapshot_lock:
        _snapshot = None
