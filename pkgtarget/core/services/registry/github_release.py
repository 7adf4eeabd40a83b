"""
GitHub release source — pick the release asset for this machine.

A registry declares release assets as a variant list::

    asset:
      - target: [darwin_x64, darwin_arm64]
        file: tool-{{version}}-macos.tar.gz
      - target: linux_x64_gnu
        file: tool-{{version}}-linux-x64.tar.gz:tool.tar.gz
      - target: freebsd_x64
        file: tool-{{version}}-freebsd.tar.gz

Parsing interpolates ``{{version}}``, selects one asset through the
variant resolver and builds download URLs. Nothing is downloaded here.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pkgtarget.core.context import get_settings
from pkgtarget.core.models.settings import Settings
from pkgtarget.core.models.variant import ResolutionOptions
from pkgtarget.core.services.platform.domain.predicate import TargetPredicateTable
from pkgtarget.core.services.platform.resolver.variant_resolution import resolve

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_]\w*)\s*\}\}")


class SourceParseError(ValueError):
    """Raised when a release source declaration is malformed."""


def interpolate(value: Any, context: Mapping[str, str]) -> Any:
    """Replace ``{{name}}`` placeholders in strings, lists and mappings.

    Raises:
        SourceParseError: A placeholder names an unknown variable.
    """
    if isinstance(value, str):
        def _sub(m: re.Match) -> str:
            name = m.group(1)
            if name not in context:
                raise SourceParseError(f"Unknown placeholder {{{{{name}}}}} in {value!r}")
            return str(context[name])
        return _PLACEHOLDER.sub(_sub, value)
    if isinstance(value, list):
        return [interpolate(v, context) for v in value]
    if isinstance(value, Mapping):
        return {k: interpolate(v, context) for k, v in value.items()}
    return value


def normalize_files(asset: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Return ``(remote, local)`` pairs from an asset's ``file`` field.

    ``"remote:local"`` renames on download; a bare name keeps its
    basename.
    """
    raw = asset.get("file")
    if raw is None:
        raise SourceParseError("Release asset has no 'file' field")
    entries = [raw] if isinstance(raw, str) else list(raw)

    pairs: list[tuple[str, str]] = []
    for entry in entries:
        if not isinstance(entry, str) or not entry:
            raise SourceParseError(f"Invalid file entry: {entry!r}")
        remote, sep, local = entry.partition(":")
        pairs.append((remote, local if sep and local else remote.rsplit("/", 1)[-1]))
    return pairs


@dataclass
class Download:
    url: str
    out_file: str


@dataclass
class ParsedGitHubReleaseSource:
    """The selected asset and where to fetch it from."""

    repo: str
    version: str
    asset: dict[str, Any]
    downloads: list[Download] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "repo": self.repo,
            "version": self.version,
            "asset": self.asset,
            "downloads": [{"url": d.url, "out_file": d.out_file} for d in self.downloads],
        }


def parse_github_release_source(
    source: Mapping[str, Any],
    repo: str,
    version: str,
    options: ResolutionOptions | None = None,
    *,
    table: TargetPredicateTable | None = None,
    settings: Settings | None = None,
) -> ParsedGitHubReleaseSource:
    """Select the release asset for this machine.

    Raises:
        SourceParseError: The declaration is malformed.
        PlatformUnsupportedError: No asset fits this machine.
    """
    if "asset" not in source:
        raise SourceParseError(f"Release source for {repo} declares no 'asset'")

    assets = interpolate(source["asset"], {"version": version})
    asset = resolve(assets, options, table=table)
    if not isinstance(asset, Mapping):
        raise SourceParseError(f"Release asset must be a mapping, got {type(asset).__name__}")

    template = (settings or get_settings()).github.download_url_template
    downloads: list[Download] = []
    for remote, local in normalize_files(asset):
        try:
            url = template.format(repo=repo, version=version, file=remote)
        except (KeyError, IndexError, ValueError) as e:
            raise SourceParseError(f"Invalid download_url_template {template!r}: {e}") from e
        downloads.append(Download(url=url, out_file=local))

    logger.debug("Selected %s asset %s", repo, [d.out_file for d in downloads])
    return ParsedGitHubReleaseSource(
        repo=repo,
        version=version,
        asset=dict(asset),
        downloads=downloads,
    )
