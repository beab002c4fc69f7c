"""Length-prefixed framing used by ``mu server`` responses.

Each response frame has the layout:

.. code-block:: text

    0xFE <lowercase hex byte count> 0xFF <payload>

The payload is s-expression text; one trailing newline inside the
counted span is not part of the value. Several frames may arrive
back-to-back in a single read.
"""

from __future__ import annotations

import string
from collections.abc import Iterator

from mup.errors import FrameError

FRAME_START = b"\xfe"
LENGTH_END = b"\xff"

_HEX_DIGITS = frozenset(string.hexdigits.encode())


def encode_frame(payload: bytes) -> bytes:
    """Wrap a payload in a frame header."""
    return FRAME_START + format(len(payload), "x").encode("ascii") + LENGTH_END + payload


def extract_frame(buffer: bytearray) -> bytes | None:
    """Remove the first complete frame from buffer and return its payload.

    Returns None, leaving the buffer untouched, when the buffer does not
    start with a frame header or the frame has not fully arrived yet.

    Raises:
        FrameError: If the length header contains non-hex bytes.
    """
    if not buffer.startswith(FRAME_START):
        return None

    header_end = buffer.find(LENGTH_END, len(FRAME_START))
    digits = bytes(buffer[len(FRAME_START) : header_end if header_end >= 0 else None])
    if any(b not in _HEX_DIGITS for b in digits):
        raise FrameError(f"Invalid frame length header: {digits[:32]!r}")
    if header_end < 0:
        return None
    if not digits:
        raise FrameError("Empty frame length header")

    count = int(digits, 16)
    start = header_end + len(LENGTH_END)
    if len(buffer) - start < count:
        return None

    payload = bytes(buffer[start : start + count])
    del buffer[: start + count]
    if payload.endswith(b"\n"):
        payload = payload[:-1]
    return payload


class FrameBuffer:
    """Receive buffer accumulating raw bytes read from the server."""

    def __init__(self) -> None:
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def feed(self, chunk: bytes) -> None:
        self._data.extend(chunk)

    def peek(self) -> bytes:
        """Return a copy of the unparsed bytes."""
        return bytes(self._data)

    def clear(self) -> bytes:
        """Discard and return any unparsed bytes."""
        discarded = bytes(self._data)
        self._data.clear()
        return discarded

    def next_frame(self) -> bytes | None:
        return extract_frame(self._data)

    def frames(self) -> Iterator[bytes]:
        """Yield payloads of all complete frames, consuming them."""
        while (payload := self.next_frame()) is not None:
            yield payload
