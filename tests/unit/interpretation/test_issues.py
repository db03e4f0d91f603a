"""Unit tests for issue lists and field results."""

from __future__ import annotations

from interpretation.issues import Issue, IssueList, IssueType, Lineage, LineageType
from interpretation.result import Failed, Ok, failed_to_null
from interpretation.trace import Trace


def test_issue_list_is_append_only_and_ordered() -> None:
    """Entries should come back in insertion order as immutable tuples."""
    issues = IssueList()
    issues.add_issue(Issue(issue_type=IssueType.PARSE_ERROR, remark="first"))
    issues.add_trace(Trace(context=IssueType.LICENSE_INVALID, remark="second"))
    issues.add_lineage(Lineage(lineage_type=LineageType.SET_TO_NULL, remark="nulled"))

    assert [issue.remark for issue in issues] == ["first", "second"]
    assert isinstance(issues.issues, tuple) and len(issues) == 2
    assert issues.lineages == (Lineage(lineage_type=LineageType.SET_TO_NULL, remark="nulled"),)


def test_empty_issue_list_is_falsy() -> None:
    """A list without issues or lineage should be falsy."""
    assert not IssueList()


def test_failed_to_null_pairs_issue_with_lineage() -> None:
    """The common failure should hold one issue and one SET_TO_NULL lineage."""
    result = failed_to_null(IssueType.COUNTRY_INVALID, "bad", "nulled")

    assert isinstance(result, Failed) and result.is_ok() is False
    assert [issue.issue_type for issue in result.issues] == [IssueType.COUNTRY_INVALID]
    assert [lineage.lineage_type for lineage in result.lineages] == [LineageType.SET_TO_NULL]


def test_ok_carries_value() -> None:
    """Ok should expose the interpreted value."""
    assert Ok(3).value == 3 and Ok(3).is_ok()
