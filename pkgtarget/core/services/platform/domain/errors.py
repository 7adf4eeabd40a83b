"""
L1 Domain — Resolution errors.
"""

from __future__ import annotations

PLATFORM_UNSUPPORTED = "PLATFORM_UNSUPPORTED"


class PlatformUnsupportedError(Exception):
    """No variant or family matched this machine.

    Recoverable: the caller may retry with another explicit target,
    prompt the user, or give up on the install.
    """

    code = PLATFORM_UNSUPPORTED

    def __init__(self, message: str = "No compatible distribution found for this package on this machine."):
        super().__init__(message)


class PlatformDispatchError(RuntimeError):
    """A dispatch case set has no producer for this platform.

    This is a caller bug (incomplete case set), not an environment
    condition, and is not meant to be caught.
    """
