"""Data models shared by the NordVPN manager components.

Every value defined here is transient: it is created for a single request
and discarded once the response has been produced.
"""

from __future__ import annotations

from collections import abc as cabc
from dataclasses import dataclass, field
from typing import ClassVar

from ._vpn_errors import MissingRegionError, UnsupportedIntentError, VPNManagerError


@dataclass(frozen=True, slots=True)
class Login:
    """Authenticate the external client with the configured token."""

    kind: ClassVar[str] = "login"


@dataclass(frozen=True, slots=True)
class Disconnect:
    """Drop the current VPN connection."""

    kind: ClassVar[str] = "disconnect"


@dataclass(frozen=True, slots=True)
class Connect:
    """Connect to a named region.

    Examples
    --------
    >>> Connect("Japan").region
    'Japan'
    """

    kind: ClassVar[str] = "connect"

    region: str

    def __post_init__(self) -> None:
        if not self.region:
            raise MissingRegionError


ActionIntent = Login | Disconnect | Connect

INTENT_KINDS: tuple[str, ...] = (Login.kind, Disconnect.kind, Connect.kind)


def parse_intent(kind: str | None, region: str | None = None) -> ActionIntent:
    """Build an intent from a transport-level action type.

    Parameters
    ----------
    kind
        One of ``login``, ``disconnect`` or ``connect``.
    region
        Region name, only consulted for ``connect``.

    Returns
    -------
    ActionIntent
        The matching intent.

    Raises
    ------
    UnsupportedIntentError
        If ``kind`` is not a supported action type.
    MissingRegionError
        If ``kind`` is ``connect`` and ``region`` is empty.

    Examples
    --------
    >>> parse_intent("connect", "Japan")
    Connect(region='Japan')
    >>> parse_intent("disconnect")
    Disconnect()
    """

    if kind == Login.kind:
        return Login()
    if kind == Disconnect.kind:
        return Disconnect()
    if kind == Connect.kind:
        return Connect(region or "")
    raise UnsupportedIntentError(kind)


@dataclass(frozen=True, slots=True)
class CommandLine:
    """A program name plus discrete argument tokens.

    The tokens are handed to the process layer one by one and are never
    joined into a string for shell interpretation.
    """

    program: str
    args: tuple[str, ...] = ()

    @property
    def argv(self) -> tuple[str, ...]:
        """Return the full token sequence including the program name.

        Examples
        --------
        >>> CommandLine("nordvpn", ("connect", "Japan")).argv
        ('nordvpn', 'connect', 'Japan')
        """

        return (self.program, *self.args)


@dataclass(frozen=True, slots=True)
class ExecutionOutcome:
    """Captured result of a completed external process."""

    exit_succeeded: bool
    stdout: str
    stderr: str
    return_code: int | None = None


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Uniform result of a write-path action.

    Exactly one of ``output`` and ``error`` is populated. ``code`` names the
    failure class for transports and is not part of the payload.
    """

    output: str | None = None
    error: str | None = None
    code: str | None = None

    def __post_init__(self) -> None:
        if (self.output is None) == (self.error is None):
            msg = "ActionResult requires exactly one of output or error"
            raise ValueError(msg)

    @classmethod
    def success(cls, output: str) -> ActionResult:
        return cls(output=output)

    @classmethod
    def failure(cls, exc: VPNManagerError) -> ActionResult:
        """Wrap ``exc`` as a readable error payload.

        Examples
        --------
        >>> ActionResult.failure(MissingRegionError()).to_mapping()
        {'error': 'A region is required to connect'}
        """

        return cls(error=str(exc), code=exc.code)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_mapping(self) -> dict[str, str]:
        if self.error is not None:
            return {"error": self.error}
        return {"output": self.output or ""}


@dataclass(frozen=True, slots=True)
class MalformedStatusLine:
    """A status line that could not be split into a key and a value."""

    line_number: int
    text: str


@dataclass(frozen=True, slots=True)
class ConnectionStatus(cabc.Mapping[str, str]):
    """Ordered field mapping parsed from one status query.

    Fields keep the position of their first appearance in the source text.

    Examples
    --------
    >>> status = ConnectionStatus({"Status": "Connected", "Country": "Japan"})
    >>> list(status)
    ['Status', 'Country']
    >>> status["Country"]
    'Japan'
    """

    fields: dict[str, str] = field(default_factory=dict)
    diagnostics: tuple[MalformedStatusLine, ...] = ()

    def __getitem__(self, key: str) -> str:
        return self.fields[key]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def to_mapping(self) -> dict[str, str]:
        return dict(self.fields)


@dataclass(frozen=True, slots=True)
class StatusResult:
    """Result of a status query: a parsed status or an error message."""

    status: ConnectionStatus | None = None
    error: str | None = None
    code: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_mapping(self) -> dict[str, object]:
        if self.error is not None:
            return {"error": self.error}
        status = self.status if self.status is not None else ConnectionStatus()
        return {"output": status.to_mapping()}
