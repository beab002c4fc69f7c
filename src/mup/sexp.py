"""Decoder for the s-expressions emitted by ``mu server``.

The server prints Emacs Lisp data, so the grammar is a small subset of
the Lisp reader:

- lists: ``(a b c)`` and dotted pairs ``(a . b)``
- strings: ``"text"`` with backslash escapes
- integers and floats, optionally signed
- symbols: any other run of non-delimiter characters (``nil``, ``t``,
  ``:subject``, ``seen``)
- ``;`` comments running to the end of the line

Decoded lists are tuples, so a value tree is immutable once built.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from mup.errors import SExpressionError

KEYWORD_MARKER = ":"

_INT_RE = re.compile(r"[+-]?\d+\Z")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?\Z")
_ATOM_RE = re.compile(r"[^\s()\";]+")
_STRING_CHUNK_RE = re.compile(r'[^"\\]+')

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "e": "\x1b",
    "\n": "",  # backslash-newline is a line continuation
}


@dataclass(frozen=True)
class Symbol:
    """A bare Lisp symbol such as ``nil``, ``t`` or ``:docid``."""

    name: str

    @property
    def is_keyword(self) -> bool:
        return len(self.name) > 1 and self.name.startswith(KEYWORD_MARKER)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Cons:
    """A dotted pair ``(car . cdr)``."""

    car: SExpr
    cdr: SExpr


NIL = Symbol("nil")
T = Symbol("t")

SExpr = str | int | float | Symbol | Cons | tuple["SExpr", ...]


class _Reader:
    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def at_end(self) -> bool:
        self.skip_space()
        return self._pos >= len(self._text)

    def skip_space(self) -> None:
        text = self._text
        while self._pos < len(text):
            char = text[self._pos]
            if char.isspace():
                self._pos += 1
            elif char == ";":
                newline = text.find("\n", self._pos)
                self._pos = len(text) if newline < 0 else newline + 1
            else:
                break

    def read(self) -> SExpr:
        self.skip_space()
        if self._pos >= len(self._text):
            raise SExpressionError("Unexpected end of input", self._pos)
        char = self._text[self._pos]
        if char == "(":
            return self._read_list()
        if char == ")":
            raise SExpressionError("Unexpected ')'", self._pos)
        if char == '"':
            return self._read_string()
        return self._read_atom()

    def _read_list(self) -> SExpr:
        start = self._pos
        self._pos += 1
        items: list[SExpr] = []
        while True:
            self.skip_space()
            if self._pos >= len(self._text):
                raise SExpressionError("Unterminated list", start)
            char = self._text[self._pos]
            if char == ")":
                self._pos += 1
                return tuple(items)
            if char == "." and self._lone_dot():
                return self._read_dotted_tail(items)
            items.append(self.read())

    def _lone_dot(self) -> bool:
        following = self._pos + 1
        return following >= len(self._text) or not _ATOM_RE.match(
            self._text, following
        )

    def _read_dotted_tail(self, items: list[SExpr]) -> SExpr:
        if not items:
            raise SExpressionError("Dotted pair without a head", self._pos)
        self._pos += 1
        result = self.read()
        self.skip_space()
        if self._pos >= len(self._text) or self._text[self._pos] != ")":
            raise SExpressionError("Expected ')' after dotted pair", self._pos)
        self._pos += 1
        for item in reversed(items):
            result = Cons(item, result)
        return result

    def _read_string(self) -> str:
        start = self._pos
        self._pos += 1
        text = self._text
        chunks: list[str] = []
        while self._pos < len(text):
            match = _STRING_CHUNK_RE.match(text, self._pos)
            if match:
                chunks.append(match.group(0))
                self._pos = match.end()
                continue
            char = text[self._pos]
            if char == '"':
                self._pos += 1
                return "".join(chunks)
            # Backslash escape
            if self._pos + 1 >= len(text):
                break
            escaped = text[self._pos + 1]
            chunks.append(_ESCAPES.get(escaped, escaped))
            self._pos += 2
        raise SExpressionError("Unterminated string", start)

    def _read_atom(self) -> SExpr:
        match = _ATOM_RE.match(self._text, self._pos)
        if match is None:
            raise SExpressionError("Unreadable token", self._pos)
        self._pos = match.end()
        token = match.group(0)
        if _INT_RE.match(token):
            return int(token)
        if _FLOAT_RE.match(token):
            return float(token)
        return Symbol(token)


def parse(text: str) -> SExpr:
    """Decode exactly one value from text.

    Raises:
        SExpressionError: If the text is empty, malformed, or holds more
            than one value.
    """
    reader = _Reader(text)
    value = reader.read()
    if not reader.at_end():
        raise SExpressionError("Trailing data after value", reader.position)
    return value


def parse_all(text: str) -> list[SExpr]:
    """Decode every top-level value in text."""
    reader = _Reader(text)
    values: list[SExpr] = []
    while not reader.at_end():
        values.append(reader.read())
    return values
