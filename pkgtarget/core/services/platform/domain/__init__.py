"""
L1 Domain — ``__init__.py`` re-exports predicate, override and errors.

Pure logic. No I/O: everything here works on a capability snapshot.
"""

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
    check_env,
)
from pkgtarget.core.services.platform.domain.search_path import (  # noqa: F401
    path_separator,
    search_path,
)
