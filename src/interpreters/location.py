"""Location interpretation.

This module interprets where an occurrence was recorded: continent,
country code, decimal coordinates, coordinate uncertainty and elevation.
Coordinates and elevations are interpreted as pairs because each value
is only meaningful together with its partner.
"""

from __future__ import annotations

from core.records import LocationRecord, VerbatimRecord
from core.terms import (
    CONTINENT,
    COORDINATE_UNCERTAINTY_IN_METERS,
    COUNTRY,
    COUNTRY_CODE,
    DECIMAL_LATITUDE,
    DECIMAL_LONGITUDE,
    LOCALITY,
    MAXIMUM_ELEVATION_IN_METERS,
    MINIMUM_ELEVATION_IN_METERS,
    STATE_PROVINCE,
    WATER_BODY,
)
from interpretation.chain import (
    FieldMapping,
    InterpretationChain,
    apply_field_result,
    copy_step,
    field_step,
)
from interpretation.issues import IssueType
from interpretation.result import FieldResult, Ok, failed_to_null
from interpretation.trace import Interpretation
from interpreters.continent import interpret_continent
from interpreters.parsers import parse_decimal, strip_meter_suffix

MAX_COORDINATE_UNCERTAINTY_METERS = 5_000_000.0

LOCATION_FIELD_MAPPINGS = (
    FieldMapping(COUNTRY, "country"),
    FieldMapping(STATE_PROVINCE, "state_province"),
    FieldMapping(LOCALITY, "locality"),
    FieldMapping(WATER_BODY, "water_body"),
)


def interpret_country_code(raw_value: str) -> FieldResult[str]:
    """Accept two-letter ISO 3166-1 alpha-2 style codes."""
    code = raw_value.strip()
    if len(code) == 2 and code.isascii() and code.isalpha():
        return Ok(code.upper())
    return failed_to_null(
        IssueType.COUNTRY_INVALID,
        f"Could not parse country code because '{code}' is not a two-letter code",
        "Invalid country code, setting it to null",
    )


def interpret_coordinate_uncertainty(raw_value: str) -> FieldResult[float]:
    parsed = parse_decimal(
        strip_meter_suffix(raw_value),
        IssueType.COORDINATE_UNCERTAINTY_METERS_INVALID,
        "coordinate uncertainty",
        maximum=MAX_COORDINATE_UNCERTAINTY_METERS,
    )
    if isinstance(parsed, Ok) and parsed.value <= 0:
        return failed_to_null(
            IssueType.COORDINATE_UNCERTAINTY_METERS_INVALID,
            f"Could not parse coordinate uncertainty because {parsed.value} is not positive",
            "Invalid coordinate uncertainty, setting it to null",
        )
    return parsed


def interpret_coordinates(source: VerbatimRecord, target: LocationRecord) -> Interpretation[None]:
    """Interpret ``decimalLatitude`` and ``decimalLongitude`` together.

    Both values are set, or neither is; ``has_coordinate`` follows.
    """
    raw_latitude = source.value(DECIMAL_LATITUDE)
    raw_longitude = source.value(DECIMAL_LONGITUDE)
    if raw_latitude is None and raw_longitude is None:
        return Interpretation.of(None)
    if raw_latitude is None or raw_longitude is None:
        missing = "decimalLatitude" if raw_latitude is None else "decimalLongitude"
        failed = failed_to_null(
            IssueType.COORDINATE_INVALID,
            f"Could not interpret coordinates because {missing} is missing",
            "Incomplete coordinate pair, setting it to null",
        )
        return apply_field_result(target, "decimal_latitude", failed)
    latitude = parse_decimal(raw_latitude, IssueType.COORDINATE_INVALID, "decimal latitude")
    longitude = parse_decimal(raw_longitude, IssueType.COORDINATE_INVALID, "decimal longitude")
    if not isinstance(latitude, Ok):
        return apply_field_result(target, "decimal_latitude", latitude)
    if not isinstance(longitude, Ok):
        return apply_field_result(target, "decimal_longitude", longitude)
    if abs(latitude.value) > 90 or abs(longitude.value) > 180:
        failed = failed_to_null(
            IssueType.COORDINATE_OUT_OF_RANGE,
            f"Coordinates ({latitude.value}, {longitude.value}) are outside the valid range",
            "Out of range coordinates, setting them to null",
        )
        return apply_field_result(target, "decimal_latitude", failed)
    target.decimal_latitude = latitude.value
    target.decimal_longitude = longitude.value
    target.has_coordinate = True
    return Interpretation.of(None)


def interpret_elevation(source: VerbatimRecord, target: LocationRecord) -> Interpretation[None]:
    """Interpret minimum and maximum elevation in metres."""
    interpretation: Interpretation[None] = Interpretation.of(None)
    bounds = (
        (MINIMUM_ELEVATION_IN_METERS, "minimum_elevation_in_meters", "minimum elevation"),
        (MAXIMUM_ELEVATION_IN_METERS, "maximum_elevation_in_meters", "maximum elevation"),
    )
    parsed_values: dict[str, float] = {}
    for term, field_name, label in bounds:
        raw_value = source.value(term)
        if raw_value is None:
            continue
        parsed = parse_decimal(
            strip_meter_suffix(raw_value), IssueType.ELEVATION_NON_NUMERIC, label
        )
        if isinstance(parsed, Ok):
            parsed_values[field_name] = parsed.value
        else:
            interpretation = interpretation.then(apply_field_result(target, field_name, parsed))
    minimum = parsed_values.get("minimum_elevation_in_meters")
    maximum = parsed_values.get("maximum_elevation_in_meters")
    if minimum is not None and maximum is not None and minimum > maximum:
        failed = failed_to_null(
            IssueType.ELEVATION_MIN_MAX_INVERTED,
            f"Minimum elevation {minimum} is greater than maximum elevation {maximum}",
            "Inverted elevation range, setting it to null",
        )
        return interpretation.then(
            apply_field_result(target, "minimum_elevation_in_meters", failed)
        )
    for field_name, value in parsed_values.items():
        setattr(target, field_name, value)
    return interpretation


def build_location_chain() -> InterpretationChain[VerbatimRecord, LocationRecord]:
    """Build the chain populating ``LocationRecord``."""
    return (
        InterpretationChain.to(LocationRecord.empty)
        .when(VerbatimRecord.has_core_terms)
        .via(copy_step(LOCATION_FIELD_MAPPINGS))
        .via(field_step(CONTINENT, "continent", interpret_continent))
        .via(field_step(COUNTRY_CODE, "country_code", interpret_country_code))
        .via(interpret_coordinates)
        .via(
            field_step(
                COORDINATE_UNCERTAINTY_IN_METERS,
                "coordinate_uncertainty_in_meters",
                interpret_coordinate_uncertainty,
            )
        )
        .via(interpret_elevation)
    )
