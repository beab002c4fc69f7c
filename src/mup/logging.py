"""Centralized logging configuration for mup.

Library code only creates module loggers; applications (including the
``mup`` CLI) call configure_logging() once at startup.

Logging Levels:
- DEBUG: Wire traffic, read cycles, discarded startup output
- INFO: Connection diagnostics when ``verbose`` is enabled
- WARNING: Recoverable issues such as server restarts
- ERROR: Failures that affect operation
"""

import logging
import os

LEVEL_ENV = "MUP_LOG_LEVEL"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ComponentFormatter(logging.Formatter):
    """Formatter that extracts component name from logger path.

    Converts full module paths to short component names:
    - mup.connection -> connection
    - mup.cli.commands.query -> cli
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "mup":
            record.component = parts[1]
        else:
            record.component = parts[0]
        return super().format(record)


def resolve_level(level: str | None = None) -> int:
    """Resolve a level name, falling back to MUP_LOG_LEVEL or WARNING."""
    if level is None:
        level = os.environ.get(LEVEL_ENV, "WARNING")
    level = level.upper()
    if level not in LEVELS:
        level = "WARNING"
    return getattr(logging, level)


def configure_logging(level: str | None = None, use_rich: bool = False) -> None:
    """Configure logging for mup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses MUP_LOG_LEVEL env var or WARNING.
        use_rich: Use Rich handler for colorful output.
    """
    log_level = resolve_level(level)

    if use_rich:
        from rich.console import Console
        from rich.logging import RichHandler

        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        console_handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[console_handler],
        force=True,
    )
