"""
Configuration loader — reads pkgtarget.yml into the Settings model.

Settings are optional: when no file is found, defaults apply. An
explicitly named file that is missing or invalid is an error.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from pkgtarget.core.models.settings import Settings

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "pkgtarget.yml"

# Env var naming an explicit settings file
SETTINGS_ENV_VAR = "PKGTARGET_CONFIG"


class ConfigError(Exception):
    """Raised when settings are invalid or an explicit file is missing."""


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for pkgtarget.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to pkgtarget.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate resolver settings.

    Args:
        path: Explicit path to a settings file. If None, uses
            ``PKGTARGET_CONFIG`` or searches upward from cwd.

    Returns:
        Validated Settings model (defaults when nothing was found).

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid.
    """
    if path is None and os.environ.get(SETTINGS_ENV_VAR):
        path = Path(os.environ[SETTINGS_ENV_VAR])

    if path is None:
        path = find_settings_file()
        if path is None:
            logger.debug("No %s found, using default settings", SETTINGS_FILE)
            return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "pkgtarget" key or be flat
    settings_data = data.get("pkgtarget", data) if "pkgtarget" in data else data

    try:
        settings = Settings.model_validate(settings_data)
    except Exception as e:
        raise ConfigError(f"Invalid settings: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
