"""Configuration module."""

from mup.config.loader import get_default_config, load_config
from mup.config.models import ConfigError, MupConfig, ServerConfig
from mup.config.paths import get_config_path, get_mup_home

__all__ = [
    "ConfigError",
    "MupConfig",
    "ServerConfig",
    "get_config_path",
    "get_default_config",
    "get_mup_home",
    "load_config",
]
