"""Map action intents onto ``nordvpn`` command lines.

The mapper is pure: it validates its inputs and returns a
:class:`~nordvpn_manager._vpn_models.CommandLine` whose tokens are passed to
the process layer as discrete arguments. Region names are checked against
the catalog before they can reach a command line.
"""

from __future__ import annotations

from ._region_catalog import RegionCatalog
from ._vpn_errors import (
    InvalidArgumentError,
    MissingCredentialError,
    UnknownRegionError,
    UnsupportedIntentError,
)
from ._vpn_models import ActionIntent, CommandLine, Connect, Disconnect, Login

VPN_PROGRAM = "nordvpn"

_MASK = "***"


def _validate_command_args(argv: tuple[str, ...]) -> None:
    """Validate command tokens for safe execution."""
    for arg in argv:
        if not isinstance(arg, str):
            msg = f"Command argument must be a string, got {type(arg).__name__}"
            raise InvalidArgumentError(msg)
        if any(char in arg for char in ("\x00", "\n", "\r")):
            msg = "Command argument contains an invalid control character"
            raise InvalidArgumentError(msg)


def build_command(
    intent: ActionIntent,
    auth_token: str | None = None,
    *,
    catalog: RegionCatalog | None = None,
    program: str = VPN_PROGRAM,
) -> CommandLine:
    """Translate ``intent`` into exactly one command line.

    Parameters
    ----------
    intent : ActionIntent
        The requested action.
    auth_token : str | None, optional
        Credential for ``login``. Ignored by the other intents.
    catalog : RegionCatalog | None, optional
        Catalog used to validate ``connect`` regions (bundled by default).
    program : str, optional
        Name of the external client executable.

    Returns
    -------
    CommandLine
        Program and argument tokens ready for the process layer.

    Raises
    ------
    MissingCredentialError
        If ``intent`` is :class:`Login` and ``auth_token`` is absent or empty.
    UnknownRegionError
        If ``intent`` is :class:`Connect` and its region is not catalogued.
    UnsupportedIntentError
        If ``intent`` is not one of the supported intents.

    Examples
    --------
    >>> build_command(Connect("Japan")).argv
    ('nordvpn', 'connect', 'Japan')
    >>> build_command(Login(), "tok").argv
    ('nordvpn', 'login', '--token', 'tok')
    """

    catalog = catalog or RegionCatalog()
    match intent:
        case Login():
            if not auth_token:
                raise MissingCredentialError
            command = CommandLine(program, ("login", "--token", auth_token))
        case Disconnect():
            command = CommandLine(program, ("disconnect",))
        case Connect(region=region):
            if not catalog.validate(region):
                raise UnknownRegionError(region)
            command = CommandLine(program, ("connect", region))
        case _:
            raise UnsupportedIntentError(intent)
    _validate_command_args(command.argv)
    return command


def build_status_command(program: str = VPN_PROGRAM) -> CommandLine:
    """Return the read-only status query command.

    Examples
    --------
    >>> build_status_command().argv
    ('nordvpn', 'status')
    """

    command = CommandLine(program, ("status",))
    _validate_command_args(command.argv)
    return command


def redact_argv(command: CommandLine) -> tuple[str, ...]:
    """Return ``command.argv`` with credential values masked for logging.

    Examples
    --------
    >>> redact_argv(CommandLine("nordvpn", ("login", "--token", "secret")))
    ('nordvpn', 'login', '--token', '***')
    """

    redacted: list[str] = []
    mask_next = False
    for token in command.argv:
        redacted.append(_MASK if mask_next else token)
        mask_next = token == "--token"
    return tuple(redacted)
