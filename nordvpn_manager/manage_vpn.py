#!/usr/bin/env -S uv run python
# /// script
# requires-python = ">=3.13"
# dependencies = ["plumbum", "cyclopts"]
# ///

"""Command-line control surface for the NordVPN client.

Usage:
  ./nordvpn_manager/manage_vpn.py status
  ./nordvpn_manager/manage_vpn.py connect United_Kingdom
  NORDVPN_TOKEN=... ./nordvpn_manager/manage_vpn.py login

Settings not given on the command line are read from ``NORDVPN_TOKEN``,
``NORDVPN_BINARY``, ``NORDVPN_COMMAND_TIMEOUT`` and
``NORDVPN_REGION_CATALOG``.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from cyclopts import App

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from nordvpn_manager._region_catalog import DEFAULT_REGION
from nordvpn_manager._vpn_config import VPNManagerConfig, build_config
from nordvpn_manager._vpn_errors import ConfigurationError
from nordvpn_manager._vpn_models import (
    ActionIntent,
    ActionResult,
    Connect,
    ConnectionStatus,
    Disconnect,
    Login,
)

app = App(help="Control the NordVPN client and report its connection status.")

logger = logging.getLogger(__name__)

_EMPTY_VALUE = "N/A"


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(
    *,
    token: str | None = None,
    binary: str | None = None,
    timeout: float | None = None,
    catalog: Path | None = None,
) -> VPNManagerConfig | None:
    try:
        return build_config(
            auth_token=token,
            program=binary,
            timeout=timeout,
            catalog_path=catalog,
        )
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return None


def format_status(status: ConnectionStatus) -> str:
    """Render status fields as ``key: value`` lines.

    Empty values are shown as ``N/A``.

    Examples
    --------
    >>> print(format_status(ConnectionStatus({"Status": "Disconnected", "Server": ""})))
    Status: Disconnected
    Server: N/A
    """

    return "\n".join(f"{key}: {value or _EMPTY_VALUE}" for key, value in status.items())


def _report(result: ActionResult) -> int:
    if not result.ok:
        print(f"error: {result.error.strip()}", file=sys.stderr)
        return 1
    output = (result.output or "").strip()
    if output:
        print(output)
    return 0


def _run_action(config: VPNManagerConfig, intent: ActionIntent) -> int:
    coordinator = config.build_coordinator()
    result = asyncio.run(coordinator.dispatch(intent, config.auth_token))
    return _report(result)


@app.command()
def status(
    binary: str | None = None,
    timeout: float | None = None,
    *,
    verbose: bool = False,
) -> int:
    """Show the current connection status.

    Parameters
    ----------
    binary
        Path or name of the NordVPN client executable.
    timeout
        Seconds to wait for the client.
    verbose
        Enable debug logging.
    """
    _configure_logging(verbose=verbose)
    config = _load_config(binary=binary, timeout=timeout)
    if config is None:
        return 1
    result = asyncio.run(config.build_coordinator().query_status())
    if not result.ok:
        print(f"error: {(result.error or '').strip()}", file=sys.stderr)
        return 1
    assert result.status is not None, "successful status query must carry a status"
    for diagnostic in result.status.diagnostics:
        logger.debug("Ignored status line %d: %r", diagnostic.line_number, diagnostic.text)
    print(format_status(result.status))
    return 0


@app.command()
def login(
    token: str | None = None,
    binary: str | None = None,
    timeout: float | None = None,
    *,
    verbose: bool = False,
) -> int:
    """Log the client in with an access token.

    Parameters
    ----------
    token
        NordVPN access token (defaults to ``NORDVPN_TOKEN``).
    binary
        Path or name of the NordVPN client executable.
    timeout
        Seconds to wait for the client.
    verbose
        Enable debug logging.
    """
    _configure_logging(verbose=verbose)
    config = _load_config(token=token, binary=binary, timeout=timeout)
    if config is None:
        return 1
    return _run_action(config, Login())


@app.command()
def connect(
    region: str = DEFAULT_REGION,
    binary: str | None = None,
    timeout: float | None = None,
    catalog: Path | None = None,
    *,
    verbose: bool = False,
) -> int:
    """Connect to a region.

    Parameters
    ----------
    region
        Region name as listed by ``regions``.
    binary
        Path or name of the NordVPN client executable.
    timeout
        Seconds to wait for the client.
    catalog
        TOML file replacing the bundled region catalog.
    verbose
        Enable debug logging.
    """
    _configure_logging(verbose=verbose)
    config = _load_config(binary=binary, timeout=timeout, catalog=catalog)
    if config is None:
        return 1
    if not region:
        print("error: A region is required to connect", file=sys.stderr)
        return 1
    return _run_action(config, Connect(region))


@app.command()
def disconnect(
    binary: str | None = None,
    timeout: float | None = None,
    *,
    verbose: bool = False,
) -> int:
    """Disconnect from the VPN.

    Parameters
    ----------
    binary
        Path or name of the NordVPN client executable.
    timeout
        Seconds to wait for the client.
    verbose
        Enable debug logging.
    """
    _configure_logging(verbose=verbose)
    config = _load_config(binary=binary, timeout=timeout)
    if config is None:
        return 1
    return _run_action(config, Disconnect())


@app.command()
def regions(catalog: Path | None = None) -> int:
    """List the regions accepted by ``connect``.

    Parameters
    ----------
    catalog
        TOML file replacing the bundled region catalog.
    """
    config = _load_config(catalog=catalog)
    if config is None:
        return 1
    for name in config.catalog:
        print(name)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(app())
