"""
Registry source parsing — turns declared package sources into concrete
selections for this machine.
"""

from pkgtarget.core.services.registry.github_release import (  # noqa: F401
    Download,
    ParsedGitHubReleaseSource,
    SourceParseError,
    interpolate,
    normalize_files,
    parse_github_release_source,
)
