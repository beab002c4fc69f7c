"""Launch and reap the mu server child process."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence

from mup.errors import LaunchError

logger = logging.getLogger(__name__)


class ServerProcess:
    """A running ``mu server`` child and its pipe pair.

    Use :meth:`spawn` to create one. The owner writes commands with
    :meth:`write` and reads raw output with :meth:`read`.
    """

    def __init__(self, popen: subprocess.Popen[bytes]):
        self._popen = popen
        self._reaped = False

    @classmethod
    def spawn(
        cls,
        binary: str,
        subcommand: str,
        args: Sequence[str] = (),
        *,
        env: Mapping[str, str] | None = None,
        quiet: bool = True,
    ) -> ServerProcess:
        """Start the server with stdin and stdout connected to pipes.

        Args:
            binary: Executable name or path.
            subcommand: Server subcommand (``server`` for mu).
            args: Extra arguments appended after the subcommand.
            env: Environment for the child; inherits ours when None.
            quiet: Discard the child's stderr.

        Raises:
            LaunchError: If the binary cannot be executed.
        """
        argv = [binary, subcommand, *args]
        try:
            popen = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL if quiet else None,
                env=dict(env) if env is not None else None,
            )
        except OSError as e:
            raise LaunchError(binary, e.strerror or str(e)) from e
        logger.debug("Spawned %s (pid %d)", " ".join(argv), popen.pid)
        return cls(popen)

    @property
    def pid(self) -> int:
        return 0 if self._reaped else self._popen.pid

    @property
    def reaped(self) -> bool:
        return self._reaped

    def fileno(self) -> int:
        """File descriptor of the child's stdout, for readiness polling."""
        assert self._popen.stdout is not None
        return self._popen.stdout.fileno()

    def write(self, data: bytes) -> None:
        """Write to the child's stdin and flush.

        Raises:
            BrokenPipeError: If the child has gone away.
        """
        stdin = self._popen.stdin
        if stdin is None or stdin.closed:
            raise BrokenPipeError("server stdin is closed")
        stdin.write(data)
        stdin.flush()

    def read(self, size: int) -> bytes:
        """Read up to size bytes; an empty result means end of stream."""
        return os.read(self.fileno(), size)

    def reap(self, timeout: float = 5.0) -> int | None:
        """Wait for the child to exit and release its pipes.

        The child's stdin is closed first, which asks mu to exit. If it is
        still running after timeout seconds it is killed. Reaping twice
        is a no-op.

        Returns:
            The exit status, or None if already reaped.
        """
        if self._reaped:
            return None
        pid = self._popen.pid
        if self._popen.stdin is not None:
            try:
                self._popen.stdin.close()
            except BrokenPipeError:
                pass
        try:
            returncode = self._popen.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("mu server pid %d did not exit, killing it", pid)
            self._popen.kill()
            returncode = self._popen.wait()
        if self._popen.stdout is not None:
            self._popen.stdout.close()
        self._reaped = True
        logger.debug("Reaped mu server pid %d (exit %s)", pid, returncode)
        return returncode
