"""
L1 Domain — Target predicate table.

Answers "does this machine satisfy target ``os[_arch[_env]]``?" against
a capability snapshot, consulting an optional override policy first.

Known os tokens:
    linux, darwin, mac, win, win32, win64,
    freebsd, openbsd, netbsd, bsd, unix

Anything else is unsatisfied. There is no wildcard matching.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pkgtarget.core.models.capability import (
    BSD_FAMILIES,
    CapabilitySnapshot,
    OsFamily,
)
from pkgtarget.core.models.target import InvalidTargetError, TargetIdentifier
from pkgtarget.core.services.platform.data.constants import ENV_FAMILY, ENV_LIBC
from pkgtarget.core.services.platform.domain.override import OverridePolicy

logger = logging.getLogger(__name__)

_OS_CHECKS: dict[str, Callable[[CapabilitySnapshot], bool]] = {
    "linux": lambda s: s.os_family == OsFamily.LINUX,
    "darwin": lambda s: s.os_family == OsFamily.DARWIN,
    "mac": lambda s: s.os_family == OsFamily.DARWIN,
    "win": lambda s: s.os_family == OsFamily.WINDOWS,
    "win32": lambda s: s.os_family == OsFamily.WINDOWS,
    "win64": lambda s: s.os_family == OsFamily.WINDOWS and s.is_64bit,
    "freebsd": lambda s: s.os_family == OsFamily.FREEBSD,
    "openbsd": lambda s: s.os_family == OsFamily.OPENBSD,
    "netbsd": lambda s: s.os_family == OsFamily.NETBSD,
    "bsd": lambda s: s.os_family in BSD_FAMILIES,
    "unix": lambda s: s.posix,
}


def check_env(snapshot: CapabilitySnapshot, env: str) -> bool:
    """Does the host match an env component (gnu, musl, freebsd, ...)?"""
    if env in ENV_LIBC:
        return snapshot.libc_flavor == ENV_LIBC[env]
    if env in ENV_FAMILY:
        return snapshot.os_family == ENV_FAMILY[env]
    return False


class TargetPredicateTable:
    """Target predicates bound to one snapshot and one optional policy."""

    def __init__(
        self,
        snapshot: CapabilitySnapshot,
        override: OverridePolicy | None = None,
    ):
        self._snapshot = snapshot
        self._override = override

    @property
    def snapshot(self) -> CapabilitySnapshot:
        return self._snapshot

    @property
    def override(self) -> OverridePolicy | None:
        return self._override

    def satisfies(self, target: str | TargetIdentifier) -> bool:
        """Check a target against the host.

        Malformed identifiers are unsatisfied, not errors.
        """
        if isinstance(target, TargetIdentifier):
            parsed = target
        else:
            try:
                parsed = TargetIdentifier.parse(target)
            except InvalidTargetError:
                logger.debug("Unparseable target %r treated as unsatisfied", target)
                return False

        if self._override is not None:
            verdict = self._override.extend_predicate(parsed.os, parsed.arch, parsed.env)
            if verdict is not None:
                return verdict

        os_check = _OS_CHECKS.get(parsed.os)
        if os_check is None or not os_check(self._snapshot):
            return False
        if parsed.arch is not None and parsed.arch != self._snapshot.arch:
            return False
        if parsed.env is not None and not check_env(self._snapshot, parsed.env):
            return False
        return True

    def __getitem__(self, target: str) -> bool:
        return self.satisfies(target)

    def any_satisfied(self, targets: Iterable[str | TargetIdentifier]) -> bool:
        return any(self.satisfies(t) for t in targets)
