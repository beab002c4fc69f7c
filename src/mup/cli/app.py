"""Main CLI application."""

import typer

from mup.cli.commands import config, query

app = typer.Typer(
    name="mup",
    help="mup - talk to a mu server from the command line",
    no_args_is_help=True,
)

query.register(app)
config.register(app)


if __name__ == "__main__":
    app()
