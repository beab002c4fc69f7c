"""Shared console utilities for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from mup.client import Mu
from mup.config import ConfigError, MupConfig, load_config
from mup.errors import LaunchError

# Shared console instance for all CLI commands
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{msg}[/red]")


def dim(msg: str) -> None:
    """Print a dimmed message."""
    console.print(f"[dim]{msg}[/dim]")


def create_table(title: str, columns: list[tuple[str, str]]) -> Table:
    """Create a styled table with consistent formatting."""
    table = Table(title=title)
    for name, style in columns:
        table.add_column(name, style=style)
    return table


def get_config(path: Path | None, verbose: bool = False) -> MupConfig:
    """Load configuration or exit with an error."""
    try:
        config = load_config(path)
    except (FileNotFoundError, ConfigError) as e:
        error(str(e))
        raise typer.Exit(1) from None
    if verbose:
        config = config.model_copy(update={"verbose": True})
    return config


def open_client(config: MupConfig) -> Mu:
    """Start a mu server for a command, exiting on launch failure."""
    client = Mu(config)
    try:
        client.connect()
    except LaunchError as e:
        error(str(e))
        raise typer.Exit(1) from None
    return client


def print_results(results: list[Any]) -> None:
    """Print decoded server responses as JSON."""
    if not results:
        dim("No response from mu server")
        return
    for result in results:
        console.print_json(data=result)
