"""Settings loading."""

from devsetup.core.config.loader import ConfigError, find_config_file, load_settings

__all__ = ["ConfigError", "find_config_file", "load_settings"]
