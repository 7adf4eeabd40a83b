"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
Subprocess calls, file reads, platform queries — all read-only.
"""

from pkgtarget.core.services.platform.detection.capabilities import (  # noqa: F401
    build_snapshot,
    clear_detection_cache,
    detect,
    detect_libc,
    normalize_arch,
    os_family_for,
    probe_compat_layer,
    run_probe,
    sniff_compat_distro,
)
from pkgtarget.core.services.platform.detection.distribution import (  # noqa: F401
    OsDistribution,
    detect_distribution,
    os_distribution,
    parse_freebsd_version,
    parse_linux_distribution,
    parse_os_release,
)
