"""Dispatch VPN actions and status queries to the external client.

:class:`ActionCoordinator` is the entry point used by every transport. An
action flows through the command mapper, the process invoker and the outcome
classifier and always comes back as an :class:`ActionResult`; a status query
takes the same route and is then handed to the status parser.

Classification is deliberately conservative: any text on standard error is
reported as an error, even when the client exited successfully, because the
client reports some failures that way. Warnings on a successful run are
therefore surfaced as errors too. A non-zero exit with nothing on standard
error is also an error, since the client prints some failures to stdout.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ._process_invoker import DEFAULT_TIMEOUT, PlumbumInvoker, ProcessInvoker
from ._region_catalog import RegionCatalog
from ._status_parser import parse_status
from ._vpn_commands import VPN_PROGRAM, build_command, build_status_command
from ._vpn_errors import LaunchFailure, MappingError, ToolReportedError
from ._vpn_models import (
    ActionIntent,
    ActionResult,
    CommandLine,
    ExecutionOutcome,
    StatusResult,
)

logger = logging.getLogger(__name__)


def _exit_message(program: str, outcome: ExecutionOutcome) -> str:
    status = "unknown" if outcome.return_code is None else outcome.return_code
    message = f"{program} exited with status {status}"
    detail = outcome.stdout.strip()
    return f"{message}: {detail}" if detail else message


def classify_outcome(outcome: ExecutionOutcome, program: str = VPN_PROGRAM) -> ActionResult:
    """Map a completed execution onto a uniform result.

    Non-empty standard error dominates the exit status. A failed exit with a
    silent standard error is reported with the client's stdout as detail.

    Examples
    --------
    >>> classify_outcome(ExecutionOutcome(True, "ok", "")).to_mapping()
    {'output': 'ok'}
    >>> classify_outcome(ExecutionOutcome(True, "ok", "warn: cache stale")).to_mapping()
    {'error': 'warn: cache stale'}
    >>> classify_outcome(ExecutionOutcome(False, "No such server.\\n", "", 1)).to_mapping()
    {'error': 'nordvpn exited with status 1: No such server.'}
    """

    if outcome.stderr:
        return ActionResult.failure(ToolReportedError(outcome.stderr))
    if not outcome.exit_succeeded:
        return ActionResult.failure(ToolReportedError(_exit_message(program, outcome)))
    return ActionResult.success(outcome.stdout)


class ActionCoordinator:
    """Run intents and status queries against one external client.

    Parameters
    ----------
    invoker
        Process invoker (:class:`PlumbumInvoker` by default).
    catalog
        Region catalog used to validate ``connect`` requests.
    program
        Name of the external client executable.
    timeout
        Seconds allowed for each invocation.
    serialize_actions
        Serialize :meth:`dispatch` calls so only one action runs at a time.
    """

    def __init__(
        self,
        invoker: ProcessInvoker | None = None,
        *,
        catalog: RegionCatalog | None = None,
        program: str = VPN_PROGRAM,
        timeout: float = DEFAULT_TIMEOUT,
        serialize_actions: bool = False,
    ) -> None:
        self.invoker = invoker if invoker is not None else PlumbumInvoker()
        self.catalog = catalog or RegionCatalog()
        self.program = program
        self.timeout = timeout
        self._action_lock = asyncio.Lock() if serialize_actions else None

    def _action_guard(self) -> contextlib.AbstractAsyncContextManager[object]:
        if self._action_lock is None:
            return contextlib.nullcontext()
        return self._action_lock

    async def _execute(self, command: CommandLine) -> ActionResult:
        try:
            outcome = await self.invoker.run(command, self.timeout)
        except LaunchFailure as exc:
            logger.warning("Launch failed for %s: %s", command.program, exc)
            return ActionResult.failure(exc)
        result = classify_outcome(outcome, command.program)
        if not result.ok:
            logger.warning(
                "%s reported an error (exit %s): %s",
                command.program,
                outcome.return_code,
                result.error,
            )
        return result

    async def dispatch(
        self,
        intent: ActionIntent,
        auth_token: str | None = None,
    ) -> ActionResult:
        """Run one action and classify its outcome.

        Parameters
        ----------
        intent : ActionIntent
            The requested action.
        auth_token : str | None, optional
            Credential for ``login``.

        Returns
        -------
        ActionResult
            ``output`` with the client's stdout, or ``error`` with a readable
            message. Mapping errors are returned before any process starts.
        """

        try:
            command = build_command(
                intent,
                auth_token,
                catalog=self.catalog,
                program=self.program,
            )
        except MappingError as exc:
            logger.info("Rejected %r: %s", intent, exc)
            return ActionResult.failure(exc)

        async with self._action_guard():
            return await self._execute(command)

    async def query_status(self) -> StatusResult:
        """Query the client's connection status and parse it.

        Returns
        -------
        StatusResult
            The parsed :class:`ConnectionStatus`, or an error message.
        """

        try:
            command = build_status_command(self.program)
        except MappingError as exc:
            return StatusResult(error=str(exc), code=exc.code)
        result = await self._execute(command)
        if not result.ok:
            return StatusResult(error=result.error, code=result.code)
        return StatusResult(status=parse_status(result.output or ""))
