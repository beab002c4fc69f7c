"""Tests for response framing."""

import pytest

from mup.errors import FrameError
from mup.framing import FrameBuffer, encode_frame, extract_frame


class TestEncodeFrame:
    def test_layout(self):
        assert encode_frame(b"(:pong t)") == b"\xfe9\xff(:pong t)"

    def test_hex_length(self):
        payload = b"x" * 300
        assert encode_frame(payload).startswith(b"\xfe12c\xff")


class TestExtractFrame:
    """Tests for pulling one frame out of a receive buffer."""

    @pytest.mark.parametrize("size", [0, 1, 15, 16, 255, 4096])
    def test_payload_comes_back(self, size):
        payload = bytes(i % 200 for i in range(size))
        buffer = bytearray(encode_frame(payload))
        assert extract_frame(buffer) == payload
        assert buffer == bytearray()

    def test_strips_one_trailing_newline(self):
        buffer = bytearray(encode_frame(b"(:a 1)\n\n"))
        assert extract_frame(buffer) == b"(:a 1)\n"

    def test_leaves_following_bytes(self):
        buffer = bytearray(encode_frame(b"one") + encode_frame(b"two") + b"\xfe3")
        assert extract_frame(buffer) == b"one"
        assert extract_frame(buffer) == b"two"
        assert extract_frame(buffer) is None
        assert buffer == bytearray(b"\xfe3")

    def test_incomplete_frame_is_untouched(self):
        frame = encode_frame(b"(:docid 1 :subject \"hello\")")
        for cut in range(len(frame)):
            buffer = bytearray(frame[:cut])
            assert extract_frame(buffer) is None
            assert buffer == bytearray(frame[:cut])

    def test_no_frame_start(self):
        buffer = bytearray(b"warning: something\n")
        assert extract_frame(buffer) is None
        assert buffer == bytearray(b"warning: something\n")

    def test_uppercase_hex_accepted(self):
        payload = b"y" * 10
        buffer = bytearray(b"\xfeA\xff" + payload)
        assert extract_frame(buffer) == payload

    def test_non_hex_header(self):
        with pytest.raises(FrameError):
            extract_frame(bytearray(b"\xfezz\xff(:x 1)"))

    def test_non_hex_header_before_length_end(self):
        with pytest.raises(FrameError):
            extract_frame(bytearray(b"\xfe1g"))

    def test_empty_header(self):
        with pytest.raises(FrameError):
            extract_frame(bytearray(b"\xfe\xff(:x 1)"))


class TestFrameBuffer:
    def test_accumulates_across_feeds(self):
        frame = encode_frame(b"(:pong t)")
        buffer = FrameBuffer()
        buffer.feed(frame[:4])
        assert list(buffer.frames()) == []
        buffer.feed(frame[4:])
        assert list(buffer.frames()) == [b"(:pong t)"]
        assert not buffer

    def test_frames_drains_all(self):
        buffer = FrameBuffer()
        buffer.feed(encode_frame(b"a") + encode_frame(b"b") + encode_frame(b"c")[:3])
        assert list(buffer.frames()) == [b"a", b"b"]
        assert len(buffer) == 3

    def test_clear_returns_discarded(self):
        buffer = FrameBuffer()
        buffer.feed(b"\xfe10\xffpartial")
        assert buffer.peek() == b"\xfe10\xffpartial"
        assert buffer.clear() == b"\xfe10\xffpartial"
        assert buffer.clear() == b""
