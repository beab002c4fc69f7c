"""Exceptions raised by the mu client."""


class MupError(Exception):
    """Base class for mu client errors."""


class LaunchError(MupError):
    """The mu server binary could not be started."""

    def __init__(self, binary: str, message: str):
        super().__init__(f"Cannot launch {binary}: {message}")
        self.binary = binary


class ConnectionClosedError(MupError):
    """The connection was shut down and cannot be reused."""


class FrameError(MupError):
    """A response frame header could not be read."""


class SExpressionError(MupError):
    """Structured-value text could not be decoded."""

    def __init__(self, message: str, position: int | None = None):
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
        self.position = position
