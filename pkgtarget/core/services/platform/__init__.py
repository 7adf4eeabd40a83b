"""
Platform target resolution — package re-exports.

This ``__init__.py`` re-exports every public symbol so that callers
import from one place::

    from pkgtarget.core.services.platform import resolve, when

Each symbol lives in its single-responsibility module inside the
appropriate onion layer (data → domain → resolver → detection →
orchestration).
"""

# ── L1: Domain ──
from pkgtarget.core.services.platform.domain.errors import (  # noqa: F401
    PLATFORM_UNSUPPORTED,
    PlatformDispatchError,
    PlatformUnsupportedError,
)
from pkgtarget.core.services.platform.domain.override import (  # noqa: F401
    LinuxCompatOverride,
    OverridePolicy,
)
from pkgtarget.core.services.platform.domain.predicate import (  # noqa: F401
    TargetPredicateTable,
)
from pkgtarget.core.services.platform.domain.search_path import (  # noqa: F401
    path_separator,
    search_path,
)

# ── L2: Resolver ──
from pkgtarget.core.services.platform.resolver.dispatch import (  # noqa: F401
    family_priority,
    get_by_platform,
    when,
)
from pkgtarget.core.services.platform.resolver.variant_resolution import (  # noqa: F401
    coalesce_by_target,
    effective_target,
    ensure_valid_platform,
    resolve,
)

# ── L3: Detection ──
from pkgtarget.core.services.platform.detection.capabilities import (  # noqa: F401
    build_snapshot,
    detect,
)
from pkgtarget.core.services.platform.detection.distribution import (  # noqa: F401
    os_distribution,
)

# ── L5: Orchestration ──
from pkgtarget.core.services.platform.orchestration.bootstrap import (  # noqa: F401
    default_table,
    setup,
)
