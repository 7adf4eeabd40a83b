"""
Target identifier — ``os[_arch[_env]]``.

Component order is fixed. An absent component means the target is
unconstrained on that axis, e.g. ``linux`` matches every architecture
and libc that ``linux_x64_gnu`` would.
"""

from __future__ import annotations

from dataclasses import dataclass

TARGET_SEPARATOR = "_"


class InvalidTargetError(ValueError):
    """Raised when a target identifier string is malformed."""


@dataclass(frozen=True)
class TargetIdentifier:
    """A parsed target identifier."""

    os: str
    arch: str | None = None
    env: str | None = None

    @classmethod
    def parse(cls, raw: str) -> TargetIdentifier:
        """Parse ``os[_arch[_env]]`` into its components.

        Raises:
            InvalidTargetError: On empty input, more than three
                components, or an empty component (``linux__gnu``).
        """
        if not isinstance(raw, str) or not raw.strip():
            raise InvalidTargetError(f"Invalid target identifier: {raw!r}")

        parts = raw.strip().split(TARGET_SEPARATOR)
        if len(parts) > 3:
            raise InvalidTargetError(
                f"Target identifier has more than 3 components: {raw!r}"
            )
        if any(not p for p in parts):
            raise InvalidTargetError(f"Empty component in target identifier: {raw!r}")

        os_, arch, env = (parts + [None, None])[:3]
        return cls(os=os_, arch=arch, env=env)

    def with_arch(self, arch: str) -> TargetIdentifier:
        return TargetIdentifier(os=self.os, arch=arch, env=self.env)

    def __str__(self) -> str:
        return TARGET_SEPARATOR.join(p for p in (self.os, self.arch, self.env) if p)
