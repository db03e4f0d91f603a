"""Reusable parse strategies for field interpreters.

Every parser returns ``Ok`` with the typed value or a ``Failed`` result
that nulls the field with one issue of the caller's choosing.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Mapping, TypeVar
from urllib.parse import urlparse

from core.constants import LIST_VALUE_DELIMITERS
from interpretation.issues import IssueType
from interpretation.result import Failed, FieldResult, Ok, failed_to_null

E = TypeVar("E", bound=Enum)

_SUPPORTED_URI_SCHEMES = ("http", "https", "ftp")
_UNIT_SUFFIX_PATTERN = re.compile(r"\s*(m|meters|metres|mts)\.?$", re.IGNORECASE)
_LIST_SPLIT_PATTERN = re.compile(
    "|".join(re.escape(delimiter) for delimiter in LIST_VALUE_DELIMITERS)
)


def normalize_key(raw_value: str) -> str:
    """Lowercase and drop every non-alphanumeric character."""
    return "".join(character for character in raw_value.lower() if character.isalnum())


def split_list(raw_value: str) -> list[str]:
    """Split a delimited verbatim list, dropping blank entries."""
    return [item.strip() for item in _LIST_SPLIT_PATTERN.split(raw_value) if item.strip()]


def strip_meter_suffix(raw_value: str) -> str:
    return _UNIT_SUFFIX_PATTERN.sub("", raw_value.strip())


def parse_integer(
    raw_value: str,
    issue_type: IssueType,
    field_label: str,
    minimum: int | None = None,
    maximum: int | None = None,
) -> FieldResult[int]:
    """Parse a whole number within optional inclusive bounds.

    Decimal strings with no fractional part (``"12.0"``) are accepted.
    """
    decimal_result = parse_decimal(raw_value, issue_type, field_label)
    if not isinstance(decimal_result, Ok):
        return decimal_result
    number = decimal_result.value
    if not number.is_integer():
        reason = f"'{raw_value.strip()}' is not a whole number"
        return _null_field(issue_type, field_label, reason)
    integer_value = int(number)
    if minimum is not None and integer_value < minimum:
        return _null_field(issue_type, field_label, f"{integer_value} is below {minimum}")
    if maximum is not None and integer_value > maximum:
        return _null_field(issue_type, field_label, f"{integer_value} is above {maximum}")
    return Ok(integer_value)


def parse_decimal(
    raw_value: str,
    issue_type: IssueType,
    field_label: str,
    minimum: float | None = None,
    maximum: float | None = None,
) -> FieldResult[float]:
    """Parse a finite decimal number within optional inclusive bounds."""
    try:
        number = float(raw_value.strip())
    except ValueError:
        return _null_field(issue_type, field_label, f"'{raw_value.strip()}' is not a number")
    if not math.isfinite(number):
        return _null_field(issue_type, field_label, f"'{raw_value.strip()}' is not finite")
    if minimum is not None and number < minimum:
        return _null_field(issue_type, field_label, f"{number} is below {minimum}")
    if maximum is not None and number > maximum:
        return _null_field(issue_type, field_label, f"{number} is above {maximum}")
    return Ok(number)


def parse_enum(
    raw_value: str,
    enum_type: type[E],
    issue_type: IssueType,
    field_label: str,
    synonyms: Mapping[str, E] | None = None,
) -> FieldResult[E]:
    """Parse a value against a closed enumeration.

    Matching ignores case and punctuation, so ``"PreservedSpecimen"`` and
    ``"preserved specimen"`` both match ``PRESERVED_SPECIMEN``. Synonym
    keys must already be normalized with ``normalize_key``.
    """
    key = normalize_key(raw_value)
    for member in enum_type:
        if normalize_key(member.name) == key:
            return Ok(member)
    if synonyms and key in synonyms:
        return Ok(synonyms[key])
    return _null_field(
        issue_type, field_label, f"'{raw_value.strip()}' is not a known {field_label}"
    )


def parse_uri(raw_value: str, issue_type: IssueType, field_label: str) -> FieldResult[str]:
    """Accept absolute http, https and ftp URIs with a host."""
    candidate = raw_value.strip()
    parsed = urlparse(candidate)
    if parsed.scheme.lower() not in _SUPPORTED_URI_SCHEMES or not parsed.netloc:
        return _null_field(issue_type, field_label, f"'{candidate}' is not a valid URI")
    if any(character.isspace() for character in candidate):
        return _null_field(issue_type, field_label, f"'{candidate}' contains whitespace")
    return Ok(candidate)


def _null_field(issue_type: IssueType, field_label: str, reason: str) -> Failed:
    return failed_to_null(
        issue_type,
        f"Could not parse {field_label} because {reason}",
        f"Invalid {field_label}, setting it to null",
    )
