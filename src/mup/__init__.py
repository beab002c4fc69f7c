"""Python client for the mu mail indexer's server mode."""

from mup.client import Mu, connect
from mup.config import MupConfig, ServerConfig, load_config
from mup.connection import Connection, ConnectionState
from mup.errors import (
    ConnectionClosedError,
    FrameError,
    LaunchError,
    MupError,
    SExpressionError,
)

__version__ = "0.1.0"
__all__ = [
    "Connection",
    "ConnectionClosedError",
    "ConnectionState",
    "FrameError",
    "LaunchError",
    "Mu",
    "MupConfig",
    "MupError",
    "SExpressionError",
    "ServerConfig",
    "connect",
    "load_config",
]
