"""
Config check use case — validate pkgtarget.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pkgtarget.core.config.loader import SETTINGS_FILE, ConfigError, find_settings_file, load_settings
from pkgtarget.core.models.settings import Settings
from pkgtarget.core.models.target import InvalidTargetError, TargetIdentifier


@dataclass
class ConfigCheckResult:
    """Result of settings validation."""

    valid: bool = False
    settings: Settings | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "settings": self.settings.model_dump(mode="json") if self.settings else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate settings and report issues.

    Args:
        config_path: Optional explicit path to pkgtarget.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_settings_file()
        if config_path is None:
            result.warnings.append(f"No {SETTINGS_FILE} found; defaults apply.")
    result.config_path = config_path

    try:
        settings = load_settings(config_path) if config_path else Settings()
        result.settings = settings
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    if settings.target:
        try:
            TargetIdentifier.parse(settings.target)
        except InvalidTargetError as e:
            result.errors.append(f"target: {e}")

    template = settings.github.download_url_template
    if "{file}" not in template:
        result.errors.append("github.download_url_template must contain '{file}'.")
    else:
        try:
            template.format(repo="owner/name", version="v0.0.0", file="asset")
        except (KeyError, IndexError, ValueError) as e:
            result.errors.append(f"github.download_url_template is not a valid template: {e}")

    if settings.compat.enabled and settings.compat.root and not Path(settings.compat.root).is_dir():
        result.warnings.append(
            f"compat.root {settings.compat.root} does not exist; "
            "the compatibility layer will be reported unavailable."
        )

    if not settings.compat.probe_binaries:
        result.warnings.append(
            "compat.probe_binaries is empty; the compatibility layer can never be verified."
        )

    result.valid = not result.errors
    return result
