"""Exception hierarchy for the NordVPN manager.

The hierarchy separates client misuse detected before any process is
launched (:class:`MappingError`), infrastructure failures while launching or
awaiting the external client (:class:`LaunchFailure`), and failures reported
by the client itself on its standard error stream
(:class:`ToolReportedError`). Every error carries a short ``code`` that
transports use to choose a response status; the code never leaks into the
user-visible payload.

Exceptions
----------
VPNManagerError
MappingError
UnknownRegionError
MissingRegionError
MissingCredentialError
UnsupportedIntentError
InvalidArgumentError
LaunchFailure
CommandTimedOut
ToolReportedError
ConfigurationError
"""

from __future__ import annotations


class VPNManagerError(Exception):
    """Base error for NordVPN manager operations."""

    code = "error"


class MappingError(VPNManagerError):
    """Raised when an intent cannot be mapped to a command line.

    No process is launched once this error has been raised.
    """

    code = "mapping"


class UnknownRegionError(MappingError):
    """Raised when a region is not part of the region catalog.

    Parameters
    ----------
    region
        The rejected region name, kept verbatim for diagnostics.
    """

    def __init__(self, region: str) -> None:
        self.region = region
        super().__init__(f"Unknown region: {region!r}")


class MissingRegionError(MappingError):
    """Raised when a connect intent carries no region."""

    def __init__(self) -> None:
        super().__init__("A region is required to connect")


class MissingCredentialError(MappingError):
    """Raised when ``login`` is requested without an authentication token."""

    def __init__(self) -> None:
        super().__init__("An authentication token is required to log in")


class UnsupportedIntentError(MappingError):
    """Raised for action types outside the supported set."""

    def __init__(self, intent: object) -> None:
        self.intent = intent
        super().__init__(f"Unsupported action: {intent!r}")


class InvalidArgumentError(MappingError):
    """Raised when a command token contains characters unsafe to pass on."""


class LaunchFailure(VPNManagerError):
    """Raised when the external client could not be started or awaited."""

    code = "launch"


class CommandTimedOut(LaunchFailure):
    """Raised when the external client exceeds its time budget.

    Parameters
    ----------
    argv
        Tokens of the command that timed out.
    timeout
        Time budget in seconds.
    """

    def __init__(self, argv: tuple[str, ...], timeout: float) -> None:
        self.argv = argv
        self.timeout = timeout
        super().__init__(f"Command {argv[0]!r} timed out after {timeout:g} seconds")


class ToolReportedError(VPNManagerError):
    """Failure reported by the external client itself.

    Built by the outcome classifier from the standard error text, or from the
    exit status when standard error is empty, and returned as a result.
    """

    code = "tool"


class ConfigurationError(VPNManagerError):
    """Raised when configuration inputs are missing or malformed."""

    code = "config"
