"""Region catalog and validator for ``nordvpn connect``.

The catalog is data: the bundled names live in :data:`DEFAULT_REGIONS` and a
deployment may replace them with a TOML file of the form::

    regions = ["Japan", "United_States"]

Membership is the only validity criterion. Comparison is exact and
case-sensitive against the canonical spelling, which joins words with
underscores.
"""

from __future__ import annotations

import logging
import tomllib
from collections import abc as cabc
from dataclasses import dataclass
from pathlib import Path

from ._vpn_errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_REGIONS: tuple[str, ...] = (
    "Albania",
    "Algeria",
    "Andorra",
    "Argentina",
    "Armenia",
    "Australia",
    "Austria",
    "Azerbaijan",
    "Bahamas",
    "Bangladesh",
    "Belgium",
    "Belize",
    "Bermuda",
    "Bhutan",
    "Bolivia",
    "Bosnia_And_Herzegovina",
    "Brazil",
    "Brunei_Darussalam",
    "Bulgaria",
    "Cambodia",
    "Canada",
    "Cayman_Islands",
    "Chile",
    "Colombia",
    "Costa_Rica",
    "Croatia",
    "Cyprus",
    "Czech_Republic",
    "Denmark",
    "Dominican_Republic",
    "Ecuador",
    "Egypt",
    "El_Salvador",
    "Estonia",
    "Finland",
    "France",
    "Georgia",
    "Germany",
    "Ghana",
    "Greece",
    "Greenland",
    "Guam",
    "Guatemala",
    "Honduras",
    "Hong_Kong",
    "Hungary",
    "Iceland",
    "India",
    "Indonesia",
    "Ireland",
    "Isle_Of_Man",
    "Israel",
    "Italy",
    "Jamaica",
    "Japan",
    "Jersey",
    "Kazakhstan",
    "Kenya",
    "Lao_Peoples_Democratic_Republic",
    "Latvia",
    "Lebanon",
    "Liechtenstein",
    "Lithuania",
    "Luxembourg",
    "Malaysia",
    "Malta",
    "Mexico",
    "Moldova",
    "Monaco",
    "Mongolia",
    "Montenegro",
    "Morocco",
    "Myanmar",
    "Nepal",
    "Netherlands",
    "New_Zealand",
    "Nigeria",
    "North_Macedonia",
    "Norway",
    "Pakistan",
    "Panama",
    "Papua_New_Guinea",
    "Paraguay",
    "Peru",
    "Philippines",
    "Poland",
    "Portugal",
    "Puerto_Rico",
    "Romania",
    "Serbia",
    "Singapore",
    "Slovakia",
    "Slovenia",
    "South_Africa",
    "South_Korea",
    "Spain",
    "Sri_Lanka",
    "Sweden",
    "Switzerland",
    "Taiwan",
    "Thailand",
    "Trinidad_And_Tobago",
    "Turkey",
    "Ukraine",
    "United_Arab_Emirates",
    "United_Kingdom",
    "United_States",
    "Uruguay",
    "Uzbekistan",
    "Venezuela",
    "Vietnam",
)

DEFAULT_REGION = "Japan"


@dataclass(frozen=True, slots=True)
class RegionCatalog:
    """Ordered, fixed set of valid region identifiers."""

    names: tuple[str, ...] = DEFAULT_REGIONS

    def validate(self, name: str) -> bool:
        """Return ``True`` when ``name`` exactly matches a catalog entry.

        Parameters
        ----------
        name : str
            Candidate region name.

        Returns
        -------
        bool
            Whether the name is a known region.

        Examples
        --------
        >>> RegionCatalog().validate("United_States")
        True
        >>> RegionCatalog().validate("united states")
        False
        """

        return name in self.names

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.validate(name)

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    @classmethod
    def from_file(cls, path: Path) -> RegionCatalog:
        """Load a catalog from a TOML file with a top-level ``regions`` array.

        Parameters
        ----------
        path : Path
            TOML document to read.

        Returns
        -------
        RegionCatalog
            Catalog preserving the file's order with duplicates removed.

        Raises
        ------
        ConfigurationError
            If the file is unreadable, not valid TOML, or ``regions`` is not
            a non-empty list of non-empty strings.
        """

        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            msg = f"Cannot read region catalog {path}: {exc.strerror or exc}"
            raise ConfigurationError(msg) from exc
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in region catalog {path}: {exc}"
            raise ConfigurationError(msg) from exc

        regions = data.get("regions")
        if not isinstance(regions, list) or not regions:
            msg = f"Region catalog {path} must define a non-empty 'regions' array"
            raise ConfigurationError(msg)
        invalid = [entry for entry in regions if not isinstance(entry, str) or not entry.strip()]
        if invalid:
            msg = f"Region catalog {path} contains invalid entries: {invalid!r}"
            raise ConfigurationError(msg)

        names = tuple(dict.fromkeys(regions))
        logger.debug("Loaded %d regions from %s", len(names), path)
        return cls(names=names)


def load_catalog(path: Path | None = None) -> RegionCatalog:
    """Return the catalog at ``path``, or the bundled catalog when ``None``."""

    if path is None:
        return RegionCatalog()
    return RegionCatalog.from_file(path)
