"""Configuration loading from TOML files and environment variables."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from mup.config.models import ConfigError, MupConfig
from mup.config.paths import get_config_path

logger = logging.getLogger(__name__)

# Environment variable -> key in the [server] section
SERVER_ENV_OVERRIDES = {
    "MUP_BINARY": "binary",
    "MUP_MUHOME": "muhome",
    "MUP_TIMEOUT": "timeout",
}
VERBOSE_ENV = "MUP_VERBOSE"


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("mup.toml"),  # Current directory
        get_config_path(),  # ~/.mup/config.toml (or MUP_HOME)
        Path("/etc/mup/config.toml"),  # System-wide
    ]


def _resolve_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply MUP_* environment variables on top of file values."""
    server = config.setdefault("server", {})
    if not isinstance(server, dict):
        raise ConfigError("[server] must be a table")
    for env_var, key in SERVER_ENV_OVERRIDES.items():
        if value := os.environ.get(env_var):
            server[key] = value

    if (verbose := os.environ.get(VERBOSE_ENV)) is not None:
        config["verbose"] = verbose.strip().lower() in ("1", "true", "yes", "on")
    return config


def load_config(path: Path | None = None) -> MupConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit path to config file. If None, searches default
            locations and falls back to built-in defaults.

    Returns:
        Validated MupConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the config file is invalid.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        logger.debug("Loading config from %s", config_path)
        try:
            with config_path.open("rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _resolve_env_overrides(raw_config)

    try:
        return MupConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def get_default_config() -> MupConfig:
    """Get the built-in default configuration."""
    return MupConfig()
