"""Commands that talk to the mu server."""

from pathlib import Path
from typing import Annotated, Any

import typer

from mup.cli.console import error, get_config, open_client, print_results
from mup.command import TIMEOUT_KEY
from mup.errors import LaunchError
from mup.logging import configure_logging

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log connection diagnostics"),
]
TimeoutOption = Annotated[
    float | None,
    typer.Option("--timeout", "-t", min=0.001, help="Read timeout in seconds"),
]


def parse_pairs(pairs: list[str]) -> dict[str, Any]:
    """Parse ``key:value`` arguments into a mapping.

    A ``timeout`` pair is read as seconds, like ``--timeout``.

    Raises:
        typer.BadParameter: If an argument has no key or a timeout is not
            a number.
    """
    args: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition(":")
        if not sep or not key:
            raise typer.BadParameter(f"expected key:value, got {pair!r}")
        if key == TIMEOUT_KEY:
            try:
                args[key] = float(value)
            except ValueError:
                msg = f"timeout must be seconds (see --timeout), got {value!r}"
                raise typer.BadParameter(msg) from None
            continue
        args[key] = value
    return args


def _run(
    verb: str,
    args: dict[str, Any],
    config_path: Path | None,
    verbose: bool,
    timeout: float | None,
) -> None:
    configure_logging("INFO" if verbose else None, use_rich=True)
    config = get_config(config_path, verbose=verbose)
    if timeout is not None:
        args["timeout"] = timeout
    client = open_client(config)
    try:
        results = client.execute(verb, args)
    except (ValueError, LaunchError) as e:
        error(str(e))
        raise typer.Exit(1) from None
    finally:
        client.finish()
    print_results(results)


def register(app: typer.Typer) -> None:
    """Register server query commands."""

    @app.command()
    def ping(
        config: ConfigOption = None,
        verbose: VerboseOption = False,
        timeout: TimeoutOption = None,
    ) -> None:
        """Check that the mu server responds."""
        _run("ping", {}, config, verbose, timeout)

    @app.command()
    def find(
        query: Annotated[str, typer.Argument(help="mu search expression")],
        maxnum: Annotated[
            int | None,
            typer.Option("--maxnum", "-n", help="Maximum number of results"),
        ] = None,
        config: ConfigOption = None,
        verbose: VerboseOption = False,
        timeout: TimeoutOption = None,
    ) -> None:
        """Search messages."""
        args: dict[str, Any] = {"query": query}
        if maxnum is not None:
            args["maxnum"] = maxnum
        _run("find", args, config, verbose, timeout)

    @app.command("exec")
    def exec_command(
        verb: Annotated[str, typer.Argument(help="Server command, e.g. view")],
        pairs: Annotated[
            list[str] | None,
            typer.Argument(help="Arguments as key:value"),
        ] = None,
        config: ConfigOption = None,
        verbose: VerboseOption = False,
        timeout: TimeoutOption = None,
    ) -> None:
        """Send an arbitrary command."""
        _run(verb, parse_pairs(pairs or []), config, verbose, timeout)
