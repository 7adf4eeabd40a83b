"""
L2 Resolver — ``__init__.py`` re-exports variant selection and dispatch.
"""

from pkgtarget.core.services.platform.resolver.dispatch import (  # noqa: F401
    family_priority,
    get_by_platform,
    when,
)
from pkgtarget.core.services.platform.resolver.variant_resolution import (  # noqa: F401
    coalesce_by_target,
    effective_target,
    ensure_valid_platform,
    primary_family,
    resolve,
    variant_matches,
)
