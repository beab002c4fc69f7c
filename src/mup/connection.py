"""Connection to a ``mu server`` child process.

:class:`Connection` owns one server process and its pipes. Each call to
:meth:`Connection.execute` writes one command line and then runs a read
cycle: it waits up to ``timeout`` seconds for output, keeps reading while
output keeps arriving, and stops once the server has been silent for a
full timeout. Every complete frame collected during the cycle is decoded
and returned.

If the server dies mid-conversation (end of stream on its stdout), the
connection reaps it, throws away whatever could not be parsed, and starts
a fresh server before returning. The interrupted call returns whatever
frames were complete, often nothing; callers should retry.
"""

from __future__ import annotations

import logging
import selectors
from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any

from mup.command import encode_command
from mup.config.loader import get_default_config
from mup.config.models import MupConfig
from mup.errors import ConnectionClosedError, FrameError, LaunchError, SExpressionError
from mup.framing import FrameBuffer
from mup.normalize import normalize
from mup.process import ServerProcess
from mup.sexp import parse

logger = logging.getLogger(__name__)

QUIT_COMMAND = "cmd:quit"


class ConnectionState(StrEnum):
    """Read-cycle states of a connection."""

    IDLE = "idle"
    READING = "reading"
    DRAINED = "drained"
    CHILD_DEAD = "child_dead"
    CLOSING = "closing"


StateListener = Callable[[ConnectionState, ConnectionState], None]
RestartListener = Callable[[int, int], None]


class Connection:
    """A synchronous request/response connection to ``mu server``.

    Not thread-safe: callers sharing a connection must serialize access.

    Parameters:
        config: Client configuration; built-in defaults when None.
        on_state_change: Called with ``(old, new)`` on every state change.
        on_restart: Called with ``(old_pid, new_pid)`` after the server
            was relaunched.
        env: Environment for the server process; inherits ours when None.
    """

    def __init__(
        self,
        config: MupConfig | None = None,
        *,
        on_state_change: StateListener | None = None,
        on_restart: RestartListener | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config = config or get_default_config()
        self._original_timeout = self._config.server.timeout
        self._timeout = self._original_timeout
        self._on_state_change = on_state_change
        self._on_restart = on_restart
        self._env = env

        self._process: ServerProcess | None = None
        self._selector: selectors.BaseSelector | None = None
        self._buffer = FrameBuffer()
        self._state = ConnectionState.IDLE
        self._dying = False
        self._dead = False
        self._restarts = 0

    def __enter__(self) -> Connection:
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.finish()

    @property
    def config(self) -> MupConfig:
        return self._config

    @property
    def pid(self) -> int:
        """Process id of the running server, or 0 if none."""
        return self._process.pid if self._process is not None else 0

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def timeout(self) -> float:
        """Read timeout currently in effect."""
        return self._timeout

    @property
    def original_timeout(self) -> float:
        return self._original_timeout

    @property
    def verbose(self) -> bool:
        return self._config.verbose

    @property
    def restarts(self) -> int:
        """Number of times the server has been relaunched."""
        return self._restarts

    @property
    def dying(self) -> bool:
        return self._dying

    @property
    def closed(self) -> bool:
        return self._dead

    @property
    def buffered(self) -> bytes:
        """Unparsed bytes left in the receive buffer."""
        return self._buffer.peek()

    def connect(self) -> None:
        """Start the server if it is not already running.

        Raises:
            LaunchError: If the server cannot be started.
            ConnectionClosedError: If the connection was shut down.
        """
        self._check_open()
        if self._process is None:
            self._launch()

    def execute(
        self, verb: str, args: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> list[Any]:
        """Send one command and collect the server's response.

        Arguments may be passed as a mapping, as keywords, or both. A
        ``timeout`` argument overrides the read timeout for this call only.

        Returns:
            The normalized value of every complete frame received, in
            order. Empty if the server said nothing within the timeout or
            died during the call.

        Raises:
            ValueError: If verb is empty or timeout is invalid.
            LaunchError: If the server has to be (re)started and cannot be.
            ConnectionClosedError: If the connection was shut down.
        """
        self._check_open()
        line, timeout = encode_command(verb, {**(args or {}), **kwargs})
        self.connect()

        if stale := self._buffer.clear():
            self._diag("Discarding stale output: %r", stale)

        if timeout is not None:
            self._timeout = timeout
        try:
            self._diag("<<< %s", line)
            died = self._send(line) or self._read_cycle()
            results = self._parse()
            if died:
                # restart drains startup output at the configured timeout
                self._timeout = self._original_timeout
                self._recover()
        finally:
            self._timeout = self._original_timeout

        if not self._dead:
            self._set_state(ConnectionState.IDLE)
        return results

    def restart(self) -> None:
        """Reap the current server and launch a new one."""
        self._check_open()
        self._relaunch()

    def reset(self) -> Connection:
        """Discard any unparsed output."""
        if discarded := self._buffer.clear():
            self._diag("Reset discarding %d bytes", len(discarded))
        return self

    def finish(self) -> None:
        """Ask the server to quit and release it.

        Safe to call more than once. The connection cannot be used again.
        """
        if self._dead:
            return
        if self._process is not None:
            self._dying = True
            self._diag("<<< %s", QUIT_COMMAND)
            if not self._send(QUIT_COMMAND):
                self._read_cycle()
            if trailing := self._buffer.clear():
                self._diag("Output at shutdown: %r", trailing)
        self._teardown()

    close = finish

    def _check_open(self) -> None:
        if self._dead:
            raise ConnectionClosedError("Connection to mu server is closed")

    def _set_state(self, state: ConnectionState) -> None:
        previous = self._state
        if previous == state:
            return
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(previous, state)

    def _diag(self, msg: str, *args: Any) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, msg, *args)

    def _launch(self) -> None:
        server = self._config.server
        argv = server.command()
        self._process = ServerProcess.spawn(
            argv[0], argv[1], argv[2:], env=self._env, quiet=not self.verbose
        )
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._process, selectors.EVENT_READ)
        self._set_state(ConnectionState.IDLE)

        # mu greets us before any command is sent; nobody asked for it
        died = self._read_cycle()
        if startup := self._buffer.clear():
            self._diag("Startup output discarded: %r", startup)
        if died:
            self._cleanup()
            self._set_state(ConnectionState.IDLE)
            raise LaunchError(server.binary, "server exited during startup")
        self._set_state(ConnectionState.IDLE)

    def _relaunch(self) -> None:
        old_pid = self.pid
        self._cleanup()
        self._launch()
        self._restarts += 1
        logger.warning("mu server pid %d replaced by pid %d", old_pid, self.pid)
        if self._on_restart is not None:
            self._on_restart(old_pid, self.pid)

    def _recover(self) -> None:
        if self._dying:
            self._teardown()
        else:
            self._relaunch()

    def _cleanup(self) -> None:
        if self._selector is not None:
            self._selector.close()
            self._selector = None
        if self._process is not None:
            self._diag("Reaping mu server pid %d", self._process.pid)
            self._process.reap(self._config.server.reap_timeout)
            self._process = None
        if discarded := self._buffer.clear():
            self._diag("Discarding unparsed output: %r", discarded)

    def _teardown(self) -> None:
        self._cleanup()
        self._dead = True
        self._set_state(ConnectionState.CLOSING)

    def _send(self, line: str) -> bool:
        """Write a command line. Returns True if the server is gone."""
        assert self._process is not None
        try:
            self._process.write(f"{line}\n".encode())
        except BrokenPipeError:
            self._diag("mu server pid %d closed its input", self._process.pid)
            self._set_state(ConnectionState.CHILD_DEAD)
            return True
        return False

    def _read_cycle(self) -> bool:
        """Read until the server goes quiet. Returns True if it died."""
        assert self._process is not None
        self._set_state(ConnectionState.READING)
        while self._wait_readable(self._timeout):
            chunk = self._process.read(self._config.server.chunk_size)
            if not chunk:
                self._diag("mu server pid %d died", self._process.pid)
                self._set_state(ConnectionState.CHILD_DEAD)
                return True
            self._buffer.feed(chunk)
        self._set_state(ConnectionState.DRAINED)
        return False

    def _wait_readable(self, timeout: float) -> bool:
        assert self._selector is not None
        return bool(self._selector.select(timeout))

    def _parse(self) -> list[Any]:
        results: list[Any] = []
        try:
            for payload in self._buffer.frames():
                results.append(self._decode(payload))
        except FrameError as e:
            discarded = self._buffer.clear()
            self._diag("Malformed frame, discarding %d bytes: %s", len(discarded), e)
            results.append(None)
        return results

    def _decode(self, payload: bytes) -> Any:
        text = payload.decode("utf-8", errors="replace")
        try:
            return normalize(parse(text))
        except SExpressionError as e:
            self._diag("Undecodable frame %r: %s", text[:200], e)
            return None
