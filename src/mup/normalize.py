"""Convert decoded s-expressions into plain Python values.

``nil`` becomes ``None``, ``t`` becomes ``True``, property lists
(``(:docid 1 :subject "x")``) and association lists
(``(("a" . 1) ("b" . 2))``) become dicts with the keyword marker stripped
from their keys. Everything else keeps its shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mup.sexp import KEYWORD_MARKER, NIL, Cons, SExpr, Symbol, T


def normalize(value: SExpr | Mapping[Any, Any] | Any) -> Any:
    """Return the caller-facing form of a decoded value."""
    match value:
        case Symbol() if value == NIL:
            return None
        case Symbol() if value == T:
            return True
        case Symbol():
            return value.name
        case Cons(car=car, cdr=cdr):
            return [normalize(car), normalize(cdr)]
        case tuple() | list() if _is_plist(value):
            return {
                normalize_key(value[i]): normalize(value[i + 1])
                for i in range(0, len(value), 2)
            }
        case tuple() | list() if _is_alist(value):
            return {normalize_key(pair.car): normalize(pair.cdr) for pair in value}
        case tuple() | list():
            return [normalize(item) for item in value]
        case Mapping():
            return {normalize_key(k): normalize(v) for k, v in value.items()}
        case _:
            return value


def normalize_key(key: Any) -> str:
    """Render a mapping key, stripping the keyword marker if present."""
    name = key.name if isinstance(key, Symbol) else str(key)
    if len(name) > 1 and name.startswith(KEYWORD_MARKER):
        return name[len(KEYWORD_MARKER) :]
    return name


def _is_plist(items: tuple | list) -> bool:
    if not items or len(items) % 2:
        return False
    return all(isinstance(k, Symbol) and k.is_keyword for k in items[::2])


def _is_alist(items: tuple | list) -> bool:
    return bool(items) and all(isinstance(item, Cons) for item in items)
