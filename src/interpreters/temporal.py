"""Temporal interpretation.

This module interprets event dates, atomised year/month/day values,
day-of-year bounds, identification dates and modification timestamps.
Reduced-precision dates (``2004``, ``2004-05``) and ordinal dates
(``2004-123``) are separate parse strategies with the same
success-or-null-with-issue contract as every other field.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from core.constants import MAX_DAY_OF_YEAR, UNLIKELY_YEAR_FLOOR
from core.records import EventDate, TemporalRecord, VerbatimRecord
from core.terms import (
    DATE_IDENTIFIED,
    DAY,
    END_DAY_OF_YEAR,
    EVENT_DATE,
    MODIFIED,
    MONTH,
    START_DAY_OF_YEAR,
    YEAR,
)
from interpretation.chain import InterpretationChain, apply_field_result, field_step
from interpretation.issues import IssueType, Lineage, LineageType
from interpretation.result import FieldResult, Ok, failed_to_null
from interpretation.trace import Interpretation, Trace
from interpreters.parsers import parse_integer

_YEAR_PATTERN = re.compile(r"^\d{4}$")
_YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")
_ORDINAL_PATTERN = re.compile(r"^(\d{4})-(\d{3})$")
_RANGE_SEPARATOR = "/"


@dataclass(frozen=True)
class PartialDate:
    """A date parsed at year, month, day or timestamp precision.

    Attributes:
        text: Normalized ISO representation at the parsed precision.
        earliest: First calendar day the value can denote.
        latest: Last calendar day the value can denote.
        month_known: Whether the month was given.
        day_known: Whether the day was given.
    """

    text: str
    earliest: date
    latest: date
    month_known: bool
    day_known: bool


def parse_partial_date(raw_value: str) -> PartialDate | None:
    """Parse one ISO-like date at any supported precision.

    Args:
        raw_value: Verbatim date text without range separator.

    Returns:
        Parsed date, or None when no strategy accepts the value.
    """
    text = raw_value.strip()
    if _YEAR_PATTERN.match(text):
        year = int(text)
        if year < 1:
            return None
        return PartialDate(
            text=f"{year:04d}",
            earliest=date(year, 1, 1),
            latest=date(year, 12, 31),
            month_known=False,
            day_known=False,
        )
    year_month = _YEAR_MONTH_PATTERN.match(text)
    if year_month:
        return _parse_year_month(int(year_month.group(1)), int(year_month.group(2)))
    if _ORDINAL_PATTERN.match(text):
        return _parse_ordinal(text)
    return _parse_full_date(text)


def _parse_year_month(year: int, month: int) -> PartialDate | None:
    if year < 1 or not 1 <= month <= 12:
        return None
    last_day = calendar.monthrange(year, month)[1]
    return PartialDate(
        text=f"{year:04d}-{month:02d}",
        earliest=date(year, month, 1),
        latest=date(year, month, last_day),
        month_known=True,
        day_known=False,
    )


def _parse_ordinal(text: str) -> PartialDate | None:
    try:
        parsed = datetime.strptime(text, "%Y-%j").date()
    except ValueError:
        return None
    if parsed.year != int(text[:4]):
        return None
    return _full_date(parsed.isoformat(), parsed)


def _parse_full_date(text: str) -> PartialDate | None:
    try:
        parsed_date = date.fromisoformat(text)
    except ValueError:
        parsed_date = None
    if parsed_date is not None:
        return _full_date(parsed_date.isoformat(), parsed_date)
    timestamp_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed_datetime = datetime.fromisoformat(timestamp_text)
    except ValueError:
        return None
    return _full_date(parsed_datetime.isoformat(), parsed_datetime.date())


def _full_date(text: str, parsed: date) -> PartialDate:
    return PartialDate(
        text=text, earliest=parsed, latest=parsed, month_known=True, day_known=True
    )


def _is_unlikely(parsed: PartialDate, today: date) -> bool:
    return parsed.earliest.year < UNLIKELY_YEAR_FLOOR or parsed.earliest > today


def interpret_event_date(raw_value: str) -> FieldResult[EventDate]:
    """Interpret ``dwc:eventDate`` as a single date or ``start/end`` range.

    Args:
        raw_value: Verbatim event date.

    Returns:
        ``Ok`` with the interval, or ``Failed`` with
        RECORDED_DATE_INVALID or RECORDED_DATE_UNLIKELY.
    """
    parts = raw_value.strip().split(_RANGE_SEPARATOR)
    if len(parts) > 2:
        return _invalid_event_date(raw_value, "it has more than one range separator")
    start = parse_partial_date(parts[0])
    end = parse_partial_date(parts[-1])
    if start is None or end is None:
        return _invalid_event_date(raw_value, "it is not a recognised ISO 8601 date")
    if end.latest < start.earliest:
        return _invalid_event_date(raw_value, "the range ends before it starts")
    today = date.today()
    if _is_unlikely(start, today) or _is_unlikely(end, today):
        return failed_to_null(
            IssueType.RECORDED_DATE_UNLIKELY,
            f"Event date '{raw_value.strip()}' is before {UNLIKELY_YEAR_FLOOR} or in the future",
            "Unlikely event date, setting it to null",
        )
    if len(parts) == 1:
        return Ok(EventDate(gte=start.text))
    return Ok(EventDate(gte=start.text, lte=end.text))


def _invalid_event_date(raw_value: str, reason: str) -> FieldResult[EventDate]:
    return failed_to_null(
        IssueType.RECORDED_DATE_INVALID,
        f"Could not parse event date '{raw_value.strip()}' because {reason}",
        "Invalid event date, setting it to null",
    )


def interpret_single_date(raw_value: str, issue_type: IssueType, label: str) -> FieldResult[str]:
    """Interpret a standalone date such as ``dateIdentified`` or ``modified``."""
    parsed = parse_partial_date(raw_value)
    if parsed is None:
        reason = "it is not a recognised ISO 8601 date"
    elif _is_unlikely(parsed, date.today()):
        reason = f"it is before {UNLIKELY_YEAR_FLOOR} or in the future"
    else:
        return Ok(parsed.text)
    return failed_to_null(
        issue_type,
        f"Could not parse {label} '{raw_value.strip()}' because {reason}",
        f"Invalid {label}, setting it to null",
    )


def interpret_year(raw_value: str) -> FieldResult[int]:
    parsed = parse_integer(raw_value, IssueType.RECORDED_DATE_INVALID, "year", 1, 9999)
    if not isinstance(parsed, Ok):
        return parsed
    if parsed.value < UNLIKELY_YEAR_FLOOR or parsed.value > date.today().year:
        return failed_to_null(
            IssueType.RECORDED_DATE_UNLIKELY,
            f"Year {parsed.value} is before {UNLIKELY_YEAR_FLOOR} or in the future",
            "Unlikely year, setting it to null",
        )
    return parsed


def interpret_month(raw_value: str) -> FieldResult[int]:
    return parse_integer(raw_value, IssueType.RECORDED_DATE_INVALID, "month", 1, 12)


def interpret_day(raw_value: str, year: int | None, month: int | None) -> FieldResult[int]:
    """Interpret a day of month, checked against the month length if known."""
    parsed = parse_integer(raw_value, IssueType.RECORDED_DATE_INVALID, "day", 1, 31)
    if not isinstance(parsed, Ok) or month is None:
        return parsed
    # Leap years only matter when the year is known.
    month_length = calendar.monthrange(year if year is not None else 2000, month)[1]
    if parsed.value > month_length:
        return failed_to_null(
            IssueType.RECORDED_DATE_INVALID,
            f"Could not parse day because {parsed.value} is past the end of month {month}",
            "Invalid day, setting it to null",
        )
    return parsed


def interpret_day_of_year(raw_value: str, label: str) -> FieldResult[int]:
    return parse_integer(raw_value, IssueType.DAY_OF_YEAR_INVALID, label, 1, MAX_DAY_OF_YEAR)


def interpret_year_month_day(
    source: VerbatimRecord,
    target: TemporalRecord,
) -> Interpretation[None]:
    """Interpret the atomised ``year``, ``month`` and ``day`` group."""
    interpretation: Interpretation[None] = Interpretation.of(None)
    year_value = source.value(YEAR)
    if year_value is not None:
        interpretation = interpretation.then(
            apply_field_result(target, "year", interpret_year(year_value))
        )
    month_value = source.value(MONTH)
    if month_value is not None:
        interpretation = interpretation.then(
            apply_field_result(target, "month", interpret_month(month_value))
        )
    day_value = source.value(DAY)
    if day_value is not None:
        day_result = interpret_day(day_value, target.year, target.month)
        interpretation = interpretation.then(apply_field_result(target, "day", day_result))
    return interpretation


def reconcile_event_date(source: VerbatimRecord, target: TemporalRecord) -> Interpretation[None]:
    """Cross-check ``eventDate`` against the atomised fields.

    A single-valued event date fills missing atomised fields. When no day
    of the event date interval carries the supplied year, month and day,
    the event date is nulled with RECORDED_DATE_MISMATCH.
    """
    interpretation: Interpretation[None] = Interpretation.of(None)
    if target.event_date is None or target.event_date.gte is None:
        return interpretation
    start = parse_partial_date(target.event_date.gte)
    end = start
    if target.event_date.lte is not None:
        end = parse_partial_date(target.event_date.lte)
    if start is None or end is None:
        return interpretation
    atomised_given = any(value is not None for value in (target.year, target.month, target.day))
    if atomised_given and not _interval_matches(
        start.earliest, end.latest, target.year, target.month, target.day
    ):
        target.event_date = None
        target.issues.add_lineage(
            Lineage(
                lineage_type=LineageType.SET_TO_NULL,
                remark="Event date disagrees with year/month/day, setting it to null",
            )
        )
        return interpretation.with_trace(
            Trace(
                context=IssueType.RECORDED_DATE_MISMATCH,
                field_name="event_date",
                remark="Event date does not match the supplied year, month or day",
            )
        )
    if target.event_date.lte is None and not _any_atomised_verbatim(source):
        target.year = start.earliest.year
        target.month = start.earliest.month if start.month_known else None
        target.day = start.earliest.day if start.day_known else None
    return interpretation


def _interval_matches(
    earliest: date,
    latest: date,
    year: int | None,
    month: int | None,
    day: int | None,
) -> bool:
    """Return whether some day in ``[earliest, latest]`` has the given parts."""
    if year is not None:
        if not earliest.year <= year <= latest.year:
            return False
        earliest = max(earliest, date(year, 1, 1))
        latest = min(latest, date(year, 12, 31))
    if month is None and day is None:
        return True
    # Any interval longer than a year contains every month and day.
    if (latest - earliest).days >= 366:
        return True
    current = earliest
    while current <= latest:
        if (month is None or current.month == month) and (day is None or current.day == day):
            return True
        current += timedelta(days=1)
    return False


def _any_atomised_verbatim(source: VerbatimRecord) -> bool:
    return any(source.value(term) is not None for term in (YEAR, MONTH, DAY))


def build_temporal_chain() -> InterpretationChain[VerbatimRecord, TemporalRecord]:
    """Build the chain populating ``TemporalRecord``."""
    return (
        InterpretationChain.to(TemporalRecord.empty)
        .when(VerbatimRecord.has_core_terms)
        .via(interpret_year_month_day)
        .via(field_step(EVENT_DATE, "event_date", interpret_event_date))
        .via(reconcile_event_date)
        .via(
            field_step(
                START_DAY_OF_YEAR,
                "start_day_of_year",
                lambda raw: interpret_day_of_year(raw, "start day of year"),
            )
        )
        .via(
            field_step(
                END_DAY_OF_YEAR,
                "end_day_of_year",
                lambda raw: interpret_day_of_year(raw, "end day of year"),
            )
        )
        .via(
            field_step(
                DATE_IDENTIFIED,
                "date_identified",
                lambda raw: interpret_single_date(
                    raw, IssueType.IDENTIFIED_DATE_INVALID, "date identified"
                ),
            )
        )
        .via(
            field_step(
                MODIFIED,
                "modified",
                lambda raw: interpret_single_date(
                    raw, IssueType.MODIFIED_DATE_INVALID, "modified date"
                ),
            )
        )
    )
