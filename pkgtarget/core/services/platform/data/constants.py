"""
L0 Data — Platform constants.

Pure data. No logic. No imports beyond stdlib and the models.
"""

from __future__ import annotations

from pkgtarget.core.models.capability import LibcFlavor, OsFamily

# Architecture name normalization (uname -m → target arch token).
# Anything not listed passes through lower-cased.
ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",        # Windows / FreeBSD report AMD64 / amd64
    "i386": "x86",
    "i686": "x86",
    "aarch64": "arm64",
    "aarch64_be": "arm64",
    "armv8b": "arm64",
    "armv8l": "arm64",
    "arm64": "arm64",      # macOS / FreeBSD
}

# platform.system() → family. Unlisted POSIX hosts become GENERIC_UNIX.
SYSNAME_FAMILIES: dict[str, OsFamily] = {
    "linux": OsFamily.LINUX,
    "darwin": OsFamily.DARWIN,
    "windows": OsFamily.WINDOWS,
    "freebsd": OsFamily.FREEBSD,
    "openbsd": OsFamily.OPENBSD,
    "netbsd": OsFamily.NETBSD,
}

# Where each BSD keeps its Linux compatibility tree. OpenBSD dropped
# Linux emulation, so it has no entry and is never probed.
COMPAT_ROOTS: dict[OsFamily, str] = {
    OsFamily.FREEBSD: "/compat/linux",
    OsFamily.NETBSD: "/emul/linux",
}

# Trivial binaries run inside the compat root, relative to it.
COMPAT_PROBE_BINARIES: tuple[str, ...] = ("bin/true", "usr/bin/true")

# Upper bound for any single detection subprocess (seconds).
PROBE_TIMEOUT_SECONDS: float = 2.0

# FreeBSD kernel modules that back the Linuxulator, most specific first.
COMPAT_KERNEL_MODULES: tuple[str, ...] = ("linux64.ko", "linux.ko")

# Family the Linux compat override contributes.
COMPAT_FAMILY = OsFamily.LINUX

# Env component → libc flavor it requires.
ENV_LIBC: dict[str, LibcFlavor] = {
    "gnu": LibcFlavor.GLIBC,
    "musl": LibcFlavor.MUSL,
}

# Env component → OS family it requires.
ENV_FAMILY: dict[str, OsFamily] = {
    "freebsd": OsFamily.FREEBSD,
    "openbsd": OsFamily.OPENBSD,
    "netbsd": OsFamily.NETBSD,
}

# OS tokens that name a group of families rather than one family.
OS_TOKEN_COVERS: dict[str, frozenset[str]] = {
    "mac": frozenset({"darwin"}),
    "win32": frozenset({"win"}),
    "win64": frozenset({"win"}),
    "bsd": frozenset({"freebsd", "openbsd", "netbsd"}),
    "unix": frozenset({"linux", "darwin", "freebsd", "openbsd", "netbsd", "unix"}),
}

# Extra dispatch-case keys accepted for a family.
FAMILY_CASE_ALIASES: dict[str, tuple[str, ...]] = {
    "darwin": ("darwin", "mac"),
}
