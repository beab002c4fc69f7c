"""CLI command modules."""

from mup.cli.commands import config, query

__all__ = ["config", "query"]
