"""The mu server command surface."""

from __future__ import annotations

from typing import Any

from mup.config.loader import load_config
from mup.config.models import MupConfig, ServerConfig
from mup.connection import Connection


class Mu(Connection):
    """Connection exposing one method per mu server command.

    Keyword arguments are forwarded verbatim as ``key:value`` pairs, except
    ``timeout``, which overrides the read timeout for that call.

    Example::

        with mup.connect() as mu:
            for message in mu.find(query="subject:invoice", maxnum=10):
                print(message["subject"])
    """

    def add(self, **kwargs: Any) -> list[Any]:
        return self.execute("add", kwargs)

    def contacts(self, **kwargs: Any) -> list[Any]:
        return self.execute("contacts", kwargs)

    def extract(self, **kwargs: Any) -> list[Any]:
        return self.execute("extract", kwargs)

    def find(self, **kwargs: Any) -> list[Any]:
        return self.execute("find", kwargs)

    def index(self, **kwargs: Any) -> list[Any]:
        return self.execute("index", kwargs)

    def move(self, **kwargs: Any) -> list[Any]:
        return self.execute("move", kwargs)

    def ping(self, **kwargs: Any) -> list[Any]:
        return self.execute("ping", kwargs)

    def mkdir(self, **kwargs: Any) -> list[Any]:
        return self.execute("mkdir", kwargs)

    def remove(self, **kwargs: Any) -> list[Any]:
        return self.execute("remove", kwargs)

    def view(self, **kwargs: Any) -> list[Any]:
        return self.execute("view", kwargs)


def connect(
    config: MupConfig | None = None,
    *,
    verbose: bool | None = None,
    **server_overrides: Any,
) -> Mu:
    """Start a mu server and return a connected client.

    Args:
        config: Base configuration; when None it is read with
            :func:`load_config`, so config files and ``MUP_*`` variables
            apply.
        verbose: Override ``config.verbose``.
        **server_overrides: Override :class:`ServerConfig` fields, e.g.
            ``binary``, ``muhome`` or ``timeout``.

    Raises:
        LaunchError: If the server cannot be started.
        ConfigError: If a config file or ``MUP_*`` variable is invalid.
        pydantic.ValidationError: If an override is invalid.
    """
    config = config or load_config()
    if server_overrides:
        server = ServerConfig.model_validate(
            {**config.server.model_dump(), **server_overrides}
        )
        config = config.model_copy(update={"server": server})
    if verbose is not None:
        config = config.model_copy(update={"verbose": verbose})
    mu = Mu(config)
    mu.connect()
    return mu
