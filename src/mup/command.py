"""Render mu server command lines."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

TIMEOUT_KEY = "timeout"

_WHITESPACE_RE = re.compile(r"\s")


def quote(value: Any) -> str:
    """Render an argument value, double-quoting it if it contains whitespace."""
    if value is True:
        text = "true"
    elif value is False:
        text = "false"
    else:
        text = str(value)
    if _WHITESPACE_RE.search(text):
        return f'"{text}"'
    return text


def split_timeout(args: Mapping[str, Any]) -> tuple[dict[str, Any], float | None]:
    """Separate the reserved ``timeout`` entry from command arguments.

    Raises:
        ValueError: If ``timeout`` is not a positive number.
    """
    remaining = dict(args)
    if TIMEOUT_KEY not in remaining:
        return remaining, None
    raw = remaining.pop(TIMEOUT_KEY)
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        raise ValueError(f"timeout must be a number, got {raw!r}")
    if raw <= 0:
        raise ValueError(f"timeout must be positive, got {raw!r}")
    return remaining, float(raw)


def encode_command(
    verb: str, args: Mapping[str, Any] | None = None
) -> tuple[str, float | None]:
    """Build the command line for a verb.

    Returns:
        The command text (without trailing newline) and the per-call
        timeout override, if one was given.

    Raises:
        ValueError: If verb is empty or timeout is invalid.
    """
    verb = verb.strip()
    if not verb:
        raise ValueError("verb is required")
    remaining, timeout = split_timeout(args or {})
    parts = [f"cmd:{verb}"]
    parts.extend(
        f"{key}:{quote(value)}" for key, value in remaining.items() if value is not None
    )
    return " ".join(parts), timeout
