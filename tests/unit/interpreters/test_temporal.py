"""Unit tests for temporal interpretation."""

from __future__ import annotations

from core.records import EventDate, VerbatimRecord
from core.terms import term_for_name
from interpretation.issues import IssueType, LineageType
from interpretation.result import Failed, Ok
from interpreters.temporal import (
    build_temporal_chain,
    interpret_day_of_year,
    interpret_event_date,
    interpret_year,
    parse_partial_date,
)


def _verbatim(terms: dict[str, str]) -> VerbatimRecord:
    return VerbatimRecord(
        id="t1",
        core_terms={term_for_name(name).qualified_name: value for name, value in terms.items()},
    )


def _issue_types(result: object) -> list[IssueType]:
    assert isinstance(result, Failed)
    return [issue.issue_type for issue in result.issues]


def test_event_date_single_day() -> None:
    """A full ISO date should become a single-valued interval."""
    assert interpret_event_date("2004-05-12") == Ok(EventDate(gte="2004-05-12"))


def test_event_date_reduced_precision_range() -> None:
    """Year-month ranges keep their precision on both ends."""
    assert interpret_event_date("2004-05/2004-06") == Ok(EventDate(gte="2004-05", lte="2004-06"))


def test_event_date_ordinal_date() -> None:
    """Ordinal dates should resolve to the calendar day."""
    assert interpret_event_date("2004-123") == Ok(EventDate(gte="2004-05-02"))


def test_event_date_timestamp_with_zulu_suffix() -> None:
    """A trailing Z should be read as UTC."""
    result = interpret_event_date("2004-05-12T10:00:00Z")

    assert result == Ok(EventDate(gte="2004-05-12T10:00:00+00:00"))


def test_event_date_reversed_range_is_invalid() -> None:
    """A range ending before it starts should be rejected."""
    result = interpret_event_date("2004-05-12/2004-05-01")

    assert _issue_types(result) == [IssueType.RECORDED_DATE_INVALID]


def test_event_date_garbage_is_invalid() -> None:
    """Unparsable text should be RECORDED_DATE_INVALID."""
    assert _issue_types(interpret_event_date("last tuesday")) == [IssueType.RECORDED_DATE_INVALID]


def test_event_date_before_floor_is_unlikely() -> None:
    """Dates before 1600 are parsed but flagged as unlikely."""
    assert _issue_types(interpret_event_date("1500-01-01")) == [IssueType.RECORDED_DATE_UNLIKELY]


def test_year_far_future_is_unlikely() -> None:
    """Years after the current year are unlikely."""
    assert _issue_types(interpret_year("9000")) == [IssueType.RECORDED_DATE_UNLIKELY]


def test_day_of_year_bounds() -> None:
    """Day of year must fall within 1..366."""
    assert interpret_day_of_year("366", "start day of year") == Ok(366)
    assert _issue_types(interpret_day_of_year("367", "start day of year")) == [
        IssueType.DAY_OF_YEAR_INVALID
    ]


def test_partial_date_rejects_ordinal_past_year_end() -> None:
    """Day 366 of a non-leap year does not exist."""
    assert parse_partial_date("2003-366") is None


def test_chain_fills_atomised_fields_from_event_date() -> None:
    """A single event date should populate missing year, month and day."""
    result = build_temporal_chain().run(_verbatim({"eventDate": "2004-05-12"}))

    record = result.target
    assert (record.year, record.month, record.day) == (2004, 5, 12)
    assert not record.issues


def test_chain_nulls_event_date_that_disagrees() -> None:
    """A mismatch between eventDate and year/month/day should null the date."""
    verbatim = _verbatim({"eventDate": "2004-06-01", "year": "2004", "month": "5", "day": "12"})

    record = build_temporal_chain().run(verbatim).target

    assert record.event_date is None and record.month == 5
    assert record.issues.issue_types() == (IssueType.RECORDED_DATE_MISMATCH,)
    assert [lineage.lineage_type for lineage in record.issues.lineages] == [
        LineageType.SET_TO_NULL
    ]


def test_chain_accepts_year_inside_event_date_range() -> None:
    """A year within a ranged event date is consistent with it."""
    verbatim = _verbatim({"eventDate": "2003/2005", "year": "2005"})

    record = build_temporal_chain().run(verbatim).target

    assert record.event_date == EventDate(gte="2003", lte="2005")
    assert record.year == 2005
    assert not record.issues


def test_chain_nulls_range_when_month_falls_outside() -> None:
    """Atomised parts outside every day of the range are a mismatch."""
    verbatim = _verbatim({"eventDate": "2005-03/2005-04", "year": "2005", "month": "7"})

    record = build_temporal_chain().run(verbatim).target

    assert record.event_date is None and record.month == 7
    assert record.issues.issue_types() == (IssueType.RECORDED_DATE_MISMATCH,)


def test_chain_nulls_event_date_when_only_day_disagrees() -> None:
    """A lone day value is cross-checked against the event date."""
    verbatim = _verbatim({"eventDate": "2004-05-10", "day": "11"})

    record = build_temporal_chain().run(verbatim).target

    assert record.event_date is None and record.day == 11
    assert record.issues.issue_types() == (IssueType.RECORDED_DATE_MISMATCH,)


def test_chain_keeps_year_only_event_date_with_matching_month() -> None:
    """A month inside a year-precision event date is not a mismatch."""
    verbatim = _verbatim({"eventDate": "2004", "year": "2004", "month": "5"})

    record = build_temporal_chain().run(verbatim).target

    assert record.event_date == EventDate(gte="2004")
    assert not record.issues

def test_chain_rejects_day_past_month_end() -> None:
    """Day 31 of February should be nulled with RECORDED_DATE_INVALID."""
    record = build_temporal_chain().run(
        _verbatim({"year": "2004", "month": "2", "day": "31"})
    ).target

    assert record.day is None and record.month == 2
    assert record.issues.issue_types() == (IssueType.RECORDED_DATE_INVALID,)


def test_chain_interprets_identification_and_modified_dates() -> None:
    """Standalone dates get their own issue types."""
    record = build_temporal_chain().run(
        _verbatim({"dateIdentified": "2010-02", "modified": "yesterday"})
    ).target

    assert record.date_identified == "2010-02" and record.modified is None
    assert record.issues.issue_types() == (IssueType.MODIFIED_DATE_INVALID,)
