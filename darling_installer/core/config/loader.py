"""
Configuration loader — reads installer.yml into InstallerSettings.

Every setting has a built-in default, so a config file is optional.
When one is given or found, it is read as YAML, validated against the
Pydantic schema, and returned as typed settings.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from darling_installer.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "installer.yml"
CONFIG_ENV_VAR = "DARLING_INSTALLER_CONFIG"


class ConfigError(Exception):
    """Raised when installer configuration is invalid or missing."""


def find_config_file(environ: Mapping[str, str] | None = None) -> Path | None:
    """Locate a config file without an explicit path.

    Order: ``$DARLING_INSTALLER_CONFIG``, then
    ``$XDG_CONFIG_HOME/darling-installer/installer.yml`` (falling back to
    ``~/.config``).

    Returns:
        Path to the config file, or None if none applies.
    """
    if environ is None:
        environ = os.environ

    explicit = environ.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit)

    config_home = environ.get("XDG_CONFIG_HOME")
    if not config_home and environ.get("HOME"):
        config_home = str(Path(environ["HOME"]) / ".config")
    if config_home:
        candidate = Path(config_home) / "darling-installer" / CONFIG_FILE
        if candidate.is_file():
            return candidate

    return None


def load_settings(path: Path | None = None) -> InstallerSettings:
    """Load and validate installer configuration.

    Args:
        path: Explicit path to a config file. If None, searches the
            usual places and falls back to defaults.

    Returns:
        Validated InstallerSettings.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return InstallerSettings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading installer config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under an "installer" key or be flat
    settings_data = data.get("installer", data)
    if not isinstance(settings_data, dict):
        raise ConfigError(f"Expected 'installer' to be a mapping in {path}")

    try:
        settings = InstallerSettings.model_validate(settings_data)
    except Exception as e:
        raise ConfigError(f"Invalid installer configuration: {e}") from e

    logger.info(
        "Loaded installer config for '%s' with %d catalog modules",
        settings.product, len(settings.modules),
    )
    return settings
