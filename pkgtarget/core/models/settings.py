"""
Settings model — optional ``pkgtarget.yml``.

Every field has a default, so an absent settings file is valid and
yields the same behavior as an empty one.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_DOWNLOAD_URL_TEMPLATE = (
    "https://github.com/{repo}/releases/download/{version}/{file}"
)


class CompatSettings(BaseModel):
    """Foreign-OS compatibility layer probing."""

    enabled: bool = True
    root: str | None = None  # default depends on host family
    probe_binaries: list[str] = Field(
        default_factory=lambda: ["bin/true", "usr/bin/true"]
    )
    probe_timeout: float = Field(default=2.0, gt=0, le=10)


class GitHubSettings(BaseModel):
    download_url_template: str = DEFAULT_DOWNLOAD_URL_TEMPLATE


class Settings(BaseModel):
    """Resolver settings."""

    compat: CompatSettings = Field(default_factory=CompatSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)

    # Default explicit target applied when a caller passes none
    target: str | None = None

    install_root_dir: str = "~/.local/share/pkgtarget"
    PATH: Literal["prepend", "append", "skip"] = "prepend"
