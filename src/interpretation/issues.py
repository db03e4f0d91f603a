"""Issue and lineage model.

This module defines the data-quality vocabulary recorded while
interpreting a record, and the append-only list that carries it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from interpretation.trace import Trace


class IssueType(Enum):
    """Data-quality problems detected during interpretation."""

    PARSE_ERROR = "PARSE_ERROR"
    BASIS_OF_RECORD_INVALID = "BASIS_OF_RECORD_INVALID"
    INDIVIDUAL_COUNT_INVALID = "INDIVIDUAL_COUNT_INVALID"
    SAMPLE_SIZE_VALUE_INVALID = "SAMPLE_SIZE_VALUE_INVALID"
    LICENSE_INVALID = "LICENSE_INVALID"
    REFERENCES_URI_INVALID = "REFERENCES_URI_INVALID"
    COORDINATE_INVALID = "COORDINATE_INVALID"
    COORDINATE_OUT_OF_RANGE = "COORDINATE_OUT_OF_RANGE"
    COORDINATE_UNCERTAINTY_METERS_INVALID = "COORDINATE_UNCERTAINTY_METERS_INVALID"
    ELEVATION_NON_NUMERIC = "ELEVATION_NON_NUMERIC"
    ELEVATION_MIN_MAX_INVERTED = "ELEVATION_MIN_MAX_INVERTED"
    COUNTRY_INVALID = "COUNTRY_INVALID"
    RECORDED_DATE_INVALID = "RECORDED_DATE_INVALID"
    RECORDED_DATE_UNLIKELY = "RECORDED_DATE_UNLIKELY"
    RECORDED_DATE_MISMATCH = "RECORDED_DATE_MISMATCH"
    IDENTIFIED_DATE_INVALID = "IDENTIFIED_DATE_INVALID"
    MODIFIED_DATE_INVALID = "MODIFIED_DATE_INVALID"
    DAY_OF_YEAR_INVALID = "DAY_OF_YEAR_INVALID"
    TAXON_RANK_INVALID = "TAXON_RANK_INVALID"
    SCIENTIFIC_NAME_MISSING = "SCIENTIFIC_NAME_MISSING"
    MULTIMEDIA_URI_INVALID = "MULTIMEDIA_URI_INVALID"
    VOCABULARY_MATCH_NONE = "VOCABULARY_MATCH_NONE"


class LineageType(Enum):
    """Corrective actions taken in response to an issue."""

    SET_TO_NULL = "SET_TO_NULL"
    SET_TO_DEFAULT = "SET_TO_DEFAULT"
    NORMALIZED = "NORMALIZED"


@dataclass(frozen=True)
class Issue:
    """A detected data-quality problem.

    Attributes:
        issue_type: Kind of problem.
        remark: Human-readable explanation.
    """

    issue_type: IssueType
    remark: str


@dataclass(frozen=True)
class Lineage:
    """A corrective action applied to a field.

    Attributes:
        lineage_type: Kind of action.
        remark: Human-readable explanation.
    """

    lineage_type: LineageType
    remark: str


class IssueList:
    """Append-only collection of issues and lineage for one record.

    Entries can be added but never removed or replaced, so every
    decision made during interpretation survives to the emitted record.
    """

    def __init__(self) -> None:
        self._issues: list[Issue] = []
        self._lineages: list[Lineage] = []

    @property
    def issues(self) -> tuple[Issue, ...]:
        return tuple(self._issues)

    @property
    def lineages(self) -> tuple[Lineage, ...]:
        return tuple(self._lineages)

    def add_issue(self, issue: Issue) -> None:
        self._issues.append(issue)

    def add_lineage(self, lineage: Lineage) -> None:
        self._lineages.append(lineage)

    def add_trace(self, trace: Trace[IssueType]) -> None:
        """Record an issue trace emitted by an interpretation step."""
        self._issues.append(Issue(issue_type=trace.context, remark=trace.remark or ""))

    def issue_types(self) -> tuple[IssueType, ...]:
        return tuple(issue.issue_type for issue in self._issues)

    def __iter__(self) -> Iterator[Issue]:
        return iter(tuple(self._issues))

    def __len__(self) -> int:
        return len(self._issues)

    def __bool__(self) -> bool:
        return bool(self._issues) or bool(self._lineages)

    def __repr__(self) -> str:
        return f"IssueList(issues={self._issues!r}, lineages={self._lineages!r})"
