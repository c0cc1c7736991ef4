"""Resolve NordVPN manager settings from parameters and the environment.

Each setting is looked up in order: explicit parameter, environment
variable, default. Secrets such as the login token are only ever read here
and handed to the coordinator explicitly.
"""

from __future__ import annotations

import os
from collections import abc as cabc
from dataclasses import dataclass, field
from pathlib import Path

from ._action_coordinator import ActionCoordinator
from ._process_invoker import DEFAULT_TIMEOUT, ProcessInvoker
from ._region_catalog import RegionCatalog, load_catalog
from ._vpn_commands import VPN_PROGRAM
from ._vpn_errors import ConfigurationError

TOKEN_ENV = "NORDVPN_TOKEN"
BINARY_ENV = "NORDVPN_BINARY"
TIMEOUT_ENV = "NORDVPN_COMMAND_TIMEOUT"
CATALOG_ENV = "NORDVPN_REGION_CATALOG"
SERIALIZE_ENV = "NORDVPN_SERIALIZE_ACTIONS"


@dataclass(frozen=True, slots=True)
class InputResolution:
    """Configuration for resolving an input from multiple sources."""

    env_key: str
    default: str | Path | None = None
    as_path: bool = False


def resolve_input(
    param_value: str | Path | None,
    resolution: InputResolution,
    env: cabc.Mapping[str, str] | None = None,
) -> str | Path | None:
    """Resolve input from parameter, environment variable, or default.

    Examples
    --------
    >>> resolve_input(None, InputResolution(env_key="NORDVPN_BINARY", default="nordvpn"), env={})
    'nordvpn'
    >>> resolve_input(None, InputResolution(env_key="NORDVPN_BINARY"), env={"NORDVPN_BINARY": "/opt/nordvpn"})
    '/opt/nordvpn'
    """

    if param_value is not None:
        return param_value

    env_value = (env if env is not None else os.environ).get(resolution.env_key)
    if env_value:
        return Path(env_value) if resolution.as_path else env_value

    return resolution.default


def parse_bool(value: str | bool | None, *, default: bool = False) -> bool:
    """Parse a boolean flag value.

    Examples
    --------
    >>> parse_bool("yes")
    True
    >>> parse_bool(None)
    False
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_timeout(value: str | float | None) -> float:
    """Parse a positive timeout in seconds.

    Examples
    --------
    >>> parse_timeout("12.5")
    12.5
    >>> parse_timeout(None)
    30.0
    """
    if value is None:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        msg = f"{TIMEOUT_ENV} must be a number of seconds, got: {value!r}"
        raise ConfigurationError(msg) from exc
    if timeout <= 0:
        msg = f"{TIMEOUT_ENV} must be positive, got: {value!r}"
        raise ConfigurationError(msg)
    return timeout


@dataclass(frozen=True, slots=True)
class VPNManagerConfig:
    """Resolved settings for a NordVPN manager instance."""

    auth_token: str | None = field(default=None, repr=False)
    program: str = VPN_PROGRAM
    timeout: float = DEFAULT_TIMEOUT
    catalog: RegionCatalog = RegionCatalog()
    serialize_actions: bool = False

    def build_coordinator(self, invoker: ProcessInvoker | None = None) -> ActionCoordinator:
        """Return a coordinator wired with these settings."""

        return ActionCoordinator(
            invoker,
            catalog=self.catalog,
            program=self.program,
            timeout=self.timeout,
            serialize_actions=self.serialize_actions,
        )


def build_config(
    *,
    auth_token: str | None = None,
    program: str | None = None,
    timeout: float | None = None,
    catalog_path: Path | None = None,
    serialize_actions: bool | None = None,
    env: cabc.Mapping[str, str] | None = None,
) -> VPNManagerConfig:
    """Build a configuration from explicit parameters and the environment.

    Parameters
    ----------
    auth_token, program, timeout, catalog_path, serialize_actions
        Explicit overrides. ``None`` falls back to the environment and then to
        the defaults.
    env
        Environment mapping (``os.environ`` by default).

    Returns
    -------
    VPNManagerConfig
        The resolved configuration.

    Raises
    ------
    ConfigurationError
        If the timeout is invalid or the region catalog cannot be loaded.

    Examples
    --------
    >>> build_config(env={"NORDVPN_TOKEN": "secret"}).auth_token
    'secret'
    >>> build_config(program="/usr/bin/nordvpn", env={}).program
    '/usr/bin/nordvpn'
    """

    resolved_token = resolve_input(auth_token, InputResolution(env_key=TOKEN_ENV), env=env)
    resolved_program = resolve_input(
        program,
        InputResolution(env_key=BINARY_ENV, default=VPN_PROGRAM),
        env=env,
    )
    raw_timeout = resolve_input(
        str(timeout) if timeout is not None else None,
        InputResolution(env_key=TIMEOUT_ENV),
        env=env,
    )
    resolved_catalog_path = resolve_input(
        catalog_path,
        InputResolution(env_key=CATALOG_ENV, as_path=True),
        env=env,
    )
    raw_serialize = resolve_input(
        None if serialize_actions is None else str(serialize_actions),
        InputResolution(env_key=SERIALIZE_ENV, default="false"),
        env=env,
    )

    return VPNManagerConfig(
        auth_token=str(resolved_token) if resolved_token else None,
        program=str(resolved_program),
        timeout=parse_timeout(None if raw_timeout is None else str(raw_timeout)),
        catalog=load_catalog(
            resolved_catalog_path if isinstance(resolved_catalog_path, Path) else None
        ),
        serialize_actions=parse_bool(str(raw_serialize)),
    )
