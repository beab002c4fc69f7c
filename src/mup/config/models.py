"""Configuration models using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, Field


class ConfigError(Exception):
    """Configuration error."""

    pass


class ServerConfig(BaseModel):
    """How to launch and talk to the mu server process.

    ``timeout`` bounds each wait for output; a read cycle ends once the
    server has been silent that long.
    """

    binary: str = "mu"
    subcommand: str = "server"
    args: list[str] = []
    muhome: Path | None = None

    timeout: float = Field(default=1.0, gt=0)
    chunk_size: int = Field(default=1024, gt=0)
    # How long to wait for the server to exit before killing it
    reap_timeout: float = Field(default=5.0, gt=0)

    def command(self) -> list[str]:
        """Full argv used to launch the server."""
        argv = [self.binary, self.subcommand, *self.args]
        if self.muhome is not None:
            argv.append(f"--muhome={self.muhome.expanduser()}")
        return argv


class MupConfig(BaseModel):
    """Root configuration model."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    verbose: bool = False
