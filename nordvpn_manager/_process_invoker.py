"""Run the external VPN client and capture its output.

:class:`ProcessInvoker` is the seam the coordinator depends on; any object
with a matching ``run`` coroutine satisfies it. :class:`PlumbumInvoker` is the
production implementation. It resolves the program through plumbum's
``local`` machine, passes every argument token literally (no shell), bounds
the wait with a timeout and decodes both streams permissively.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from typing import Any, Protocol

from plumbum import local
from plumbum.commands.processes import CommandNotFound

from ._vpn_commands import redact_argv
from ._vpn_errors import CommandTimedOut, LaunchFailure
from ._vpn_models import CommandLine, ExecutionOutcome

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
# Grace period for reaping a killed process before giving up on its streams.
_KILL_GRACE = 5.0


class ProcessInvoker(Protocol):
    """Interface for running one external command to completion."""

    async def run(self, command: CommandLine, timeout: float) -> ExecutionOutcome:
        """Run ``command`` and return its outcome.

        Raises :class:`LaunchFailure` (or :class:`CommandTimedOut`) when the
        process could not be started or did not finish within ``timeout``.
        """
        ...


def _decode(stream: bytes | str | None) -> str:
    if stream is None:
        return ""
    if isinstance(stream, str):
        return stream
    return stream.decode("utf-8", errors="replace")


class PlumbumInvoker:
    """Invoke commands through a plumbum machine.

    Parameters
    ----------
    machine
        Plumbum machine used to resolve programs (``plumbum.local`` by
        default).
    """

    def __init__(self, machine: Any = None) -> None:
        self._machine = machine if machine is not None else local

    async def run(self, command: CommandLine, timeout: float) -> ExecutionOutcome:
        """Run ``command`` in a worker thread so the event loop is not blocked.

        Cancelling the awaiting task does not stop the worker; the process
        still runs until it exits or ``timeout`` elapses.
        """

        return await asyncio.to_thread(self.run_blocking, command, timeout)

    def run_blocking(self, command: CommandLine, timeout: float) -> ExecutionOutcome:
        """Run ``command`` synchronously.

        Parameters
        ----------
        command : CommandLine
            Program and argument tokens.
        timeout : float
            Seconds to wait before the process is killed.

        Returns
        -------
        ExecutionOutcome
            Exit status plus decoded standard output and standard error.

        Raises
        ------
        CommandTimedOut
            If the process outlives ``timeout``.
        LaunchFailure
            If the program cannot be found or started.

        Examples
        --------
        >>> PlumbumInvoker().run_blocking(CommandLine("printf", ("hello",)), 5).stdout
        'hello'
        """

        logger.debug("Running %s (timeout %ss)", redact_argv(command), timeout)
        try:
            bound = self._machine[command.program][list(command.args)]
            proc = bound.popen(stdin=subprocess.DEVNULL)
        except CommandNotFound as exc:
            msg = f"Command {command.program!r} not found"
            raise LaunchFailure(msg) from exc
        except OSError as exc:
            msg = f"Failed to start {command.program!r}: {exc.strerror or exc}"
            raise LaunchFailure(msg) from exc

        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            proc.kill()
            try:
                proc.communicate(timeout=_KILL_GRACE)
            except subprocess.TimeoutExpired:
                logger.warning("Process %s did not exit after kill", command.program)
            logger.warning("Command %s timed out after %ss", command.program, timeout)
            raise CommandTimedOut(command.argv, timeout) from exc

        outcome = ExecutionOutcome(
            exit_succeeded=proc.returncode == 0,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            return_code=proc.returncode,
        )
        logger.debug("Command %s exited with %s", command.program, proc.returncode)
        return outcome
