"""Command-line interface for mup."""

from mup.cli.app import app

__all__ = ["app"]
