"""Unit tests for location interpretation."""

from __future__ import annotations

from core.records import VerbatimRecord
from core.terms import term_for_name
from interpretation.issues import IssueType
from interpreters.location import build_location_chain


def _verbatim(terms: dict[str, str]) -> VerbatimRecord:
    return VerbatimRecord(
        id="l1",
        core_terms={term_for_name(name).qualified_name: value for name, value in terms.items()},
    )


def _interpret(terms: dict[str, str]):
    return build_location_chain().run(_verbatim(terms)).target


def test_valid_location_has_no_issues() -> None:
    """A complete, valid location should be fully populated."""
    record = _interpret(
        {
            "continent": "South America",
            "country": "Peru",
            "countryCode": "pe",
            "locality": "  Cusco ",
            "decimalLatitude": "-13.53",
            "decimalLongitude": "-71.97",
            "coordinateUncertaintyInMeters": "250 m",
            "minimumElevationInMeters": "3300",
            "maximumElevationInMeters": "3400m",
        }
    )

    assert record.continent == "South America" and record.country_code == "PE"
    assert record.locality == "Cusco"
    assert (record.decimal_latitude, record.decimal_longitude) == (-13.53, -71.97)
    assert record.has_coordinate is True
    assert record.coordinate_uncertainty_in_meters == 250.0
    assert (record.minimum_elevation_in_meters, record.maximum_elevation_in_meters) == (
        3300.0,
        3400.0,
    )
    assert not record.issues


def test_unknown_continent_is_parse_error() -> None:
    """Continent failures use PARSE_ERROR."""
    record = _interpret({"continent": "Middle Earth"})

    assert record.continent is None
    assert record.issues.issue_types() == (IssueType.PARSE_ERROR,)


def test_coordinates_out_of_range_are_nulled_together() -> None:
    """An out of range pair sets neither coordinate."""
    record = _interpret({"decimalLatitude": "95", "decimalLongitude": "10"})

    assert record.decimal_latitude is None and record.decimal_longitude is None
    assert record.has_coordinate is False
    assert record.issues.issue_types() == (IssueType.COORDINATE_OUT_OF_RANGE,)


def test_half_coordinate_pair_is_invalid() -> None:
    """A latitude without longitude is an incomplete pair."""
    record = _interpret({"decimalLatitude": "10"})

    assert record.decimal_latitude is None
    assert record.issues.issue_types() == (IssueType.COORDINATE_INVALID,)


def test_inverted_elevation_range_nulls_both_bounds() -> None:
    """Minimum above maximum should null both elevations."""
    record = _interpret({"minimumElevationInMeters": "500", "maximumElevationInMeters": "100"})

    assert record.minimum_elevation_in_meters is None
    assert record.maximum_elevation_in_meters is None
    assert record.issues.issue_types() == (IssueType.ELEVATION_MIN_MAX_INVERTED,)


def test_non_numeric_elevation_keeps_valid_partner() -> None:
    """Only the unparsable bound is dropped."""
    record = _interpret({"minimumElevationInMeters": "high", "maximumElevationInMeters": "100"})

    assert record.minimum_elevation_in_meters is None
    assert record.maximum_elevation_in_meters == 100.0
    assert record.issues.issue_types() == (IssueType.ELEVATION_NON_NUMERIC,)


def test_country_code_and_uncertainty_failures() -> None:
    """Bad country codes and non-positive uncertainty are separate issues."""
    record = _interpret({"countryCode": "Peru", "coordinateUncertaintyInMeters": "0"})

    assert record.issues.issue_types() == (
        IssueType.COUNTRY_INVALID,
        IssueType.COORDINATE_UNCERTAINTY_METERS_INVALID,
    )
