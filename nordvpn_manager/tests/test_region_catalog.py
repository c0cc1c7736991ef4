"""Tests for the region catalog and validator."""

from __future__ import annotations

from pathlib import Path

import pytest

from nordvpn_manager._region_catalog import (
    DEFAULT_REGION,
    DEFAULT_REGIONS,
    RegionCatalog,
    load_catalog,
)
from nordvpn_manager._vpn_errors import ConfigurationError

MULTI_WORD_REGIONS = [name for name in DEFAULT_REGIONS if "_" in name]


@pytest.mark.parametrize("region", DEFAULT_REGIONS)
def test_every_catalogued_region_is_valid(region: str) -> None:
    assert RegionCatalog().validate(region), f"{region} should be accepted"


@pytest.mark.parametrize("region", DEFAULT_REGIONS)
def test_case_variants_are_rejected(region: str) -> None:
    catalog = RegionCatalog()
    assert not catalog.validate(region.lower()), "lower-case spelling must be rejected"
    assert not catalog.validate(region.upper()), "upper-case spelling must be rejected"


@pytest.mark.parametrize("region", MULTI_WORD_REGIONS)
def test_space_separated_variants_are_rejected(region: str) -> None:
    assert not RegionCatalog().validate(region.replace("_", " ")), (
        "spaces in place of underscores must be rejected"
    )


@pytest.mark.parametrize(
    "candidate",
    ["", "Mars", "Japan ", " Japan", "Japan; rm -rf /", "Japan\n", "United-States"],
)
def test_unknown_names_are_rejected(candidate: str) -> None:
    assert not RegionCatalog().validate(candidate)


def test_bundled_catalog_shape() -> None:
    catalog = RegionCatalog()
    assert len(catalog) == 112, "bundled catalog should list 112 regions"
    assert len(set(catalog)) == len(catalog), "bundled catalog must not repeat names"
    assert DEFAULT_REGION in catalog, "default connect region must be catalogued"
    assert list(catalog)[0] == "Albania", "catalog order should be preserved"


def test_contains_ignores_non_strings() -> None:
    assert 42 not in RegionCatalog()


def test_from_file_preserves_order_and_drops_duplicates(tmp_path: Path) -> None:
    path = tmp_path / "regions.toml"
    path.write_text('regions = ["Japan", "Mars_Base", "Japan", "Canada"]\n', encoding="utf-8")
    catalog = RegionCatalog.from_file(path)
    assert catalog.names == ("Japan", "Mars_Base", "Canada")
    assert catalog.validate("Mars_Base"), "custom entries should be accepted"
    assert not catalog.validate("Germany"), "bundled entries should not leak into custom catalogs"


def test_from_file_rejects_missing_regions_key(tmp_path: Path) -> None:
    path = tmp_path / "regions.toml"
    path.write_text('countries = ["Japan"]\n', encoding="utf-8")
    with pytest.raises(ConfigurationError, match="non-empty 'regions' array"):
        RegionCatalog.from_file(path)


def test_from_file_rejects_blank_entries(tmp_path: Path) -> None:
    path = tmp_path / "regions.toml"
    path.write_text('regions = ["Japan", " ", 3]\n', encoding="utf-8")
    with pytest.raises(ConfigurationError, match="invalid entries"):
        RegionCatalog.from_file(path)


def test_from_file_rejects_invalid_toml(tmp_path: Path) -> None:
    path = tmp_path / "regions.toml"
    path.write_text("regions = [", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid TOML"):
        RegionCatalog.from_file(path)


def test_from_file_reports_unreadable_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Cannot read region catalog"):
        RegionCatalog.from_file(tmp_path / "missing.toml")


def test_load_catalog_defaults_to_bundled_regions() -> None:
    assert load_catalog(None) == RegionCatalog()
