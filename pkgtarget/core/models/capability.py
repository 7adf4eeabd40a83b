"""
Capability model — what the running machine natively supports.

A snapshot is computed once per process by the capability detector and
never mutated afterwards. Re-detection means building a new snapshot.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class OsFamily(str, Enum):
    """Operating-system family.

    Values double as target-identifier os tokens and as dispatch case
    keys, which is why Windows is ``win``.
    """

    LINUX = "linux"
    DARWIN = "darwin"
    WINDOWS = "win"
    FREEBSD = "freebsd"
    OPENBSD = "openbsd"
    NETBSD = "netbsd"
    GENERIC_UNIX = "unix"


class LibcFlavor(str, Enum):
    """C library flavor of the host."""

    GLIBC = "glibc"
    MUSL = "musl"
    BSD = "bsd"
    UNKNOWN = "unknown"


BSD_FAMILIES = frozenset({OsFamily.FREEBSD, OsFamily.OPENBSD, OsFamily.NETBSD})


class CompatLayer(BaseModel):
    """Foreign-OS compatibility subsystem (e.g. the FreeBSD Linuxulator).

    ``available`` means the compatibility root exists; ``functional``
    means a trivial foreign binary inside it actually ran.
    """

    model_config = ConfigDict(frozen=True)

    available: bool = False
    functional: bool = False
    foreign_distro_id: str | None = None
    root: str | None = None
    kernel_module: str | None = None  # linux64.ko / linux.ko, informational


class CapabilitySnapshot(BaseModel):
    """Immutable record of host capabilities."""

    model_config = ConfigDict(frozen=True)

    os_family: OsFamily
    sysname: str = ""
    machine: str = ""
    arch: str
    libc_flavor: LibcFlavor = LibcFlavor.UNKNOWN
    posix: bool = True
    compat_layer: CompatLayer | None = None

    @property
    def is_bsd(self) -> bool:
        return self.os_family in BSD_FAMILIES

    @property
    def is_64bit(self) -> bool:
        return self.arch in ("x64", "arm64")

    @property
    def compat_functional(self) -> bool:
        """True when a compat layer is both present and working."""
        layer = self.compat_layer
        return bool(layer and layer.available and layer.functional)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
