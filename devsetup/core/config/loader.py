"""
Configuration loader — reads the optional settings YAML.

Lookup order:
    1. explicit path (``--config``)
    2. ``$DEVSETUP_CONFIG``
    3. ``$XDG_CONFIG_HOME/devsetup/config.yml`` (``~/.config`` by default)
    4. built-in defaults

An explicit path that does not exist is an error; a missing file in the
default locations is not.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from devsetup.core.models.settings import ProvisionSettings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DEVSETUP_CONFIG"
CONFIG_DIR_NAME = "devsetup"
CONFIG_FILE_NAME = "config.yml"


class ConfigError(Exception):
    """Raised when the settings file is invalid or missing."""


def default_config_path() -> Path:
    """``$XDG_CONFIG_HOME/devsetup/config.yml``."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def find_config_file(explicit: Path | None = None) -> Path | None:
    """Resolve which settings file applies, if any.

    Raises:
        ConfigError: If an explicitly requested file does not exist.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        return explicit

    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        path = Path(from_env).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path} (from ${CONFIG_ENV_VAR})")
        return path

    candidate = default_config_path()
    if candidate.is_file():
        return candidate
    return None


def load_settings(path: Path | None = None) -> ProvisionSettings:
    """Load and validate provisioning settings.

    Args:
        path: Explicit settings file. If None, the lookup order applies.

    Returns:
        Validated ProvisionSettings (defaults when no file is found).

    Raises:
        ConfigError: If the file is unreadable or invalid.
    """
    path = find_config_file(path)
    if path is None:
        logger.debug("No settings file found, using defaults")
        return ProvisionSettings()

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
        return ProvisionSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Settings may be wrapped under a "devsetup" key or be flat
    section = data.get("devsetup", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected a mapping under 'devsetup' in {path}")

    try:
        settings = ProvisionSettings.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
