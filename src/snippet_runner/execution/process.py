from __future__ import annotations

import asyncio
import logging
import os
import signal
from typing import Sequence

from .errors import ExecutionTimeoutError, NonZeroExitError, SpawnFailureError
from .types import ProcessOutput

logger = logging.getLogger(__name__)

DEFAULT_KILL_GRACE_MS = 2000


def _decode(raw: bytes | None) -> str:
    """Decode captured child output, replacing undecodable bytes.

    Example:
        ```python
        text = _decode(b"hi\\n")
        ```
    """
    if not raw:
        return ""
    return raw.decode("utf-8", errors="replace")


class ProcessRunner:
    """Run one interpreter process with captured output and a wall-clock timeout.

    Example:
        ```python
        runner = ProcessRunner()
        out = await runner.run("python3", ["/tmp/code-execution/abc.py"], timeout_ms=30000)
        ```
    """

    def __init__(self, *, kill_grace_ms: int = DEFAULT_KILL_GRACE_MS) -> None:
        """Set how long a terminated child may take to exit before it is killed.

        Example:
            ```python
            runner = ProcessRunner(kill_grace_ms=500)
            ```
        """
        if kill_grace_ms <= 0:
            raise ValueError("kill_grace_ms must be positive")
        self._kill_grace_ms = kill_grace_ms

    async def run(self, command: str, args: Sequence[str], timeout_ms: int) -> ProcessOutput:
        """Spawn `command args...`, wait for it, and return its captured streams.

        Raises `SpawnFailureError` when the executable cannot start,
        `ExecutionTimeoutError` when it outlives `timeout_ms` (the child is
        terminated and reaped first), and `NonZeroExitError` on a failing exit status.

        Example:
            ```python
            out = await runner.run("node", ["--check", "/tmp/a.js"], timeout_ms=5000)
            ```
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                command,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as exc:
            logger.debug("Failed to spawn %s: %s", command, exc)
            raise SpawnFailureError(command, exc) from exc

        logger.debug("Spawned pid %s: %s %s", proc.pid, command, " ".join(args))
        try:
            out_b, err_b = await asyncio.wait_for(proc.communicate(), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            await self._stop(proc)
            logger.warning("Process %s timed out after %sms and was terminated", proc.pid, timeout_ms)
            raise ExecutionTimeoutError(timeout_ms) from None
        except asyncio.CancelledError:
            await self._stop(proc)
            raise

        # Background processes the snippet left in its group do not outlive the call.
        _signal_group(proc, signal.SIGKILL)
        stdout = _decode(out_b)
        stderr = _decode(err_b)
        returncode = proc.returncode if proc.returncode is not None else -1
        logger.debug("Process %s exited with code %s", proc.pid, returncode)
        if returncode != 0:
            raise NonZeroExitError(returncode, stderr)
        return ProcessOutput(stdout=stdout, stderr=stderr, returncode=returncode)

    async def _stop(self, proc: asyncio.subprocess.Process) -> None:
        """Terminate the child's process group, escalate to kill, and drain within the grace period.

        The child leads its own session, so background processes it started are
        signalled too. Output pipes still held open after the kill are abandoned.

        Example:
            ```python
            await runner._stop(proc)
            ```
        """
        _signal_group(proc, signal.SIGTERM)
        if await self._drain(proc):
            return
        logger.warning("Process group %s still running after SIGTERM; killing it", proc.pid)
        _signal_group(proc, signal.SIGKILL)
        if not await self._drain(proc):
            logger.warning("Output pipes of process group %s still open after SIGKILL; abandoning them", proc.pid)

    async def _drain(self, proc: asyncio.subprocess.Process) -> bool:
        """Wait up to the grace period for the child to exit and its pipes to close.

        Example:
            ```python
            finished = await runner._drain(proc)
            ```
        """
        try:
            await asyncio.wait_for(proc.communicate(), timeout=self._kill_grace_ms / 1000)
        except asyncio.TimeoutError:
            return False
        return True


def _signal_group(proc: asyncio.subprocess.Process, sig: signal.Signals) -> None:
    """Send a signal to every process in the child's process group.

    Example:
        ```python
        _signal_group(proc, signal.SIGTERM)
        ```
    """
    try:
        os.killpg(proc.pid, sig)
    except (ProcessLookupError, PermissionError):
        pass
