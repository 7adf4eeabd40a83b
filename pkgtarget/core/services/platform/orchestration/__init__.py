"""
L5 Orchestration — startup wiring.
"""

from pkgtarget.core.services.platform.orchestration.bootstrap import (  # noqa: F401
    default_table,
    setup,
)
