"""Path management for mup.

Per-user state lives under a single base directory, overridable with the
MUP_HOME environment variable.

Default locations:
- Linux/macOS: ~/.mup
- Windows: %USERPROFILE%\\.mup
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "MUP_HOME"


@lru_cache(maxsize=1)
def get_mup_home() -> Path:
    """Get the base directory for mup data.

    Resolution order:
    1. MUP_HOME environment variable (if set)
    2. Platform default (~/.mup)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".mup"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_mup_home() / "config.toml"
