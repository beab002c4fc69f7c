"""Configuration inspection command."""

from pathlib import Path
from typing import Annotated

import typer

from mup.cli.console import console, create_table, get_config
from mup.config.paths import get_config_path


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to config file (default: search mup.toml, $MUP_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Show the resolved configuration."""
        config_obj = get_config(path)
        server = config_obj.server

        table = create_table(
            "Configuration", [("Setting", "cyan"), ("Value", "green")]
        )
        table.add_row("Command", " ".join(server.command()))
        table.add_row("Timeout", f"{server.timeout:g}s")
        table.add_row("Chunk size", str(server.chunk_size))
        table.add_row("Reap timeout", f"{server.reap_timeout:g}s")
        table.add_row("Verbose", "yes" if config_obj.verbose else "no")
        console.print(table)
        console.print(f"[dim]Default config path: {get_config_path()}[/dim]")
