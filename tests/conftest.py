"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from pkgtarget.core import context
from pkgtarget.core.services.platform.detection.capabilities import clear_detection_cache
from pkgtarget.core.services.platform.detection.distribution import os_distribution


@pytest.fixture(autouse=True)
def _reset_process_state():
    """Every test starts with no settings, no policy and no cached snapshot."""
    context.reset()
    clear_detection_cache()
    os_distribution.cache_clear()
    yield
    context.reset()
    clear_detection_cache()
    os_distribution.cache_clear()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def compat_root(tmp_path: Path) -> Path:
    """A fake Linux compatibility tree with a CentOS 7 os-release."""
    root = tmp_path / "compat" / "linux"
    (root / "etc").mkdir(parents=True)
    (root / "bin").mkdir()
    (root / "etc" / "os-release").write_text(
        'NAME="CentOS Linux"\nVERSION="7 (Core)"\nID="centos"\n'
    )
    return root
