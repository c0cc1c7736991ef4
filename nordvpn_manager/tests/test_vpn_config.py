"""Tests for resolving settings from parameters and the environment."""

from __future__ import annotations

from pathlib import Path

import pytest

from nordvpn_manager._region_catalog import RegionCatalog
from nordvpn_manager._vpn_config import (
    InputResolution,
    build_config,
    parse_bool,
    parse_timeout,
    resolve_input,
)
from nordvpn_manager._vpn_errors import ConfigurationError


def test_defaults_without_environment() -> None:
    config = build_config(env={})
    assert config.auth_token is None
    assert config.program == "nordvpn"
    assert config.timeout == 30.0
    assert config.catalog == RegionCatalog()
    assert config.serialize_actions is False


def test_environment_values_are_used(tmp_path: Path) -> None:
    catalog_file = tmp_path / "regions.toml"
    catalog_file.write_text('regions = ["Japan", "Canada"]\n', encoding="utf-8")
    env = {
        "NORDVPN_TOKEN": "env-token",
        "NORDVPN_BINARY": "/usr/local/bin/nordvpn",
        "NORDVPN_COMMAND_TIMEOUT": "7.5",
        "NORDVPN_REGION_CATALOG": str(catalog_file),
        "NORDVPN_SERIALIZE_ACTIONS": "yes",
    }
    config = build_config(env=env)
    assert config.auth_token == "env-token"
    assert config.program == "/usr/local/bin/nordvpn"
    assert config.timeout == 7.5
    assert config.catalog.names == ("Japan", "Canada")
    assert config.serialize_actions is True


def test_parameters_override_environment() -> None:
    env = {"NORDVPN_TOKEN": "env-token", "NORDVPN_COMMAND_TIMEOUT": "7.5"}
    config = build_config(auth_token="cli-token", timeout=3, serialize_actions=False, env=env)
    assert config.auth_token == "cli-token"
    assert config.timeout == 3.0
    assert config.serialize_actions is False


def test_repr_hides_token() -> None:
    config = build_config(env={"NORDVPN_TOKEN": "s3cret-token"})
    assert config.auth_token == "s3cret-token"
    assert "s3cret-token" not in repr(config), "the token must not leak into logs"


def test_empty_token_is_treated_as_missing() -> None:
    assert build_config(env={"NORDVPN_TOKEN": ""}).auth_token is None


@pytest.mark.parametrize("value", ["soon", "0", "-1"])
def test_invalid_timeout_is_rejected(value: str) -> None:
    with pytest.raises(ConfigurationError, match="NORDVPN_COMMAND_TIMEOUT"):
        build_config(env={"NORDVPN_COMMAND_TIMEOUT": value})


def test_missing_catalog_file_is_reported(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Cannot read region catalog"):
        build_config(catalog_path=tmp_path / "absent.toml", env={})


def test_resolve_input_as_path() -> None:
    resolved = resolve_input(
        None,
        InputResolution(env_key="NORDVPN_REGION_CATALOG", as_path=True),
        env={"NORDVPN_REGION_CATALOG": "/etc/nordvpn/regions.toml"},
    )
    assert resolved == Path("/etc/nordvpn/regions.toml")


@pytest.mark.parametrize(
    ("value", "expected"),
    [("1", True), ("TRUE", True), ("on", True), ("0", False), ("no", False), (None, False)],
)
def test_parse_bool(value: str | None, expected: bool) -> None:
    assert parse_bool(value) is expected


def test_parse_timeout_default() -> None:
    assert parse_timeout(None) == 30.0


def test_build_coordinator_uses_settings() -> None:
    config = build_config(program="vpn", timeout=4, env={})
    coordinator = config.build_coordinator()
    assert coordinator.program == "vpn"
    assert coordinator.timeout == 4.0
    assert coordinator.catalog is config.catalog
