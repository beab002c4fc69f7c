"""Shared test fixtures and factories."""

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from mup.config.models import MupConfig, ServerConfig
from mup.config.paths import get_mup_home
from mup.connection import Connection

FAKE_SERVER = Path(__file__).parent / "fake_mu_server.py"

# Long enough for the fake server to answer, short enough to keep tests quick
TEST_TIMEOUT = 0.3

MUP_ENV_VARS = (
    "MUP_BINARY",
    "MUP_MUHOME",
    "MUP_TIMEOUT",
    "MUP_VERBOSE",
    "MUP_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch) -> Iterator[None]:
    """Keep user configuration and MUP_* variables out of tests."""
    for var in MUP_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("MUP_HOME", str(tmp_path / "mup-home"))
    get_mup_home.cache_clear()
    yield
    get_mup_home.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


# =============================================================================
# Configuration Fixtures
# =============================================================================


def make_config(*args: str, timeout: float = TEST_TIMEOUT) -> MupConfig:
    """Configuration launching the fake server with extra arguments."""
    return MupConfig(
        server=ServerConfig(
            binary=sys.executable,
            subcommand=str(FAKE_SERVER),
            args=list(args),
            timeout=timeout,
        )
    )


@pytest.fixture
def fake_config() -> MupConfig:
    return make_config()


@pytest.fixture
def fake_config_factory():
    """Build fake-server configs with extra server arguments."""
    return make_config


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A TOML config file pointing at the fake server."""
    path = tmp_path / "mup.toml"
    path.write_text(
        f"""
[server]
binary = {str(sys.executable)!r}
subcommand = {str(FAKE_SERVER)!r}
timeout = {TEST_TIMEOUT}
"""
    )
    return path


# =============================================================================
# Connection Fixtures
# =============================================================================


@pytest.fixture
def connection(fake_config: MupConfig) -> Iterator[Connection]:
    conn = Connection(fake_config)
    conn.connect()
    yield conn
    conn.finish()
