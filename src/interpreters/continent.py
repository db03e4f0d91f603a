"""Continent interpretation.

This module parses verbatim continent values against the closed set of
seven continents. It is the template for every other field interpreter:
a canonical value on success, otherwise no value with one PARSE_ERROR
issue and one SET_TO_NULL lineage.
"""

from __future__ import annotations

from enum import Enum

from interpretation.issues import IssueType
from interpretation.result import FieldResult, Ok, failed_to_null
from interpreters.parsers import normalize_key


class Continent(Enum):
    """Continents with their canonical display titles."""

    AFRICA = "Africa"
    ANTARCTICA = "Antarctica"
    ASIA = "Asia"
    EUROPE = "Europe"
    NORTH_AMERICA = "North America"
    OCEANIA = "Oceania"
    SOUTH_AMERICA = "South America"

    @property
    def title(self) -> str:
        return self.value


_CONTINENT_SYNONYMS = {
    "af": Continent.AFRICA,
    "afrika": Continent.AFRICA,
    "afrique": Continent.AFRICA,
    "an": Continent.ANTARCTICA,
    "antarctic": Continent.ANTARCTICA,
    "antartica": Continent.ANTARCTICA,
    "as": Continent.ASIA,
    "asien": Continent.ASIA,
    "eu": Continent.EUROPE,
    "europa": Continent.EUROPE,
    "na": Continent.NORTH_AMERICA,
    "namerica": Continent.NORTH_AMERICA,
    "northernamerica": Continent.NORTH_AMERICA,
    "norteamerica": Continent.NORTH_AMERICA,
    "oc": Continent.OCEANIA,
    "australia": Continent.OCEANIA,
    "australasia": Continent.OCEANIA,
    "oceanie": Continent.OCEANIA,
    "sa": Continent.SOUTH_AMERICA,
    "samerica": Continent.SOUTH_AMERICA,
    "sudamerica": Continent.SOUTH_AMERICA,
    "suramerica": Continent.SOUTH_AMERICA,
    "americadelsur": Continent.SOUTH_AMERICA,
}

_CONTINENTS_BY_KEY = {
    **{normalize_key(continent.title): continent for continent in Continent},
    **_CONTINENT_SYNONYMS,
}


def parse_continent(raw_value: str) -> Continent | None:
    """Return the continent for a verbatim value, or None if unknown."""
    return _CONTINENTS_BY_KEY.get(normalize_key(raw_value))


def interpret_continent(raw_value: str | None) -> FieldResult[str]:
    """Interpret a verbatim continent into its canonical title.

    Args:
        raw_value: Verbatim continent, possibly None.

    Returns:
        ``Ok`` with the title form, or ``Failed`` with one PARSE_ERROR
        issue and one SET_TO_NULL lineage.
    """
    if raw_value is None:
        reason = "the input is null"
    else:
        continent = parse_continent(raw_value)
        if continent is not None:
            return Ok(continent.title)
        reason = f"'{raw_value.strip()}' is not a recognised continent"
    return failed_to_null(
        IssueType.PARSE_ERROR,
        f"Could not parse continent because {reason}",
        "Could not parse the continent or invalid value, setting it to null",
    )
