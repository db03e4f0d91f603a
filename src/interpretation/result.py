"""Tagged field interpretation results.

A field interpreter returns ``Ok`` with the typed value or ``Failed``
with the issues and lineage explaining why the field stays unset.
Expected data problems flow through this type, never through exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from interpretation.issues import Issue, IssueType, Lineage, LineageType

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful interpretation carrying the typed value."""

    value: T

    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """Failed interpretation carrying its explanation.

    Attributes:
        issues: At least one issue describing the problem.
        lineages: Corrective actions taken, usually ``SET_TO_NULL``.
    """

    issues: tuple[Issue, ...]
    lineages: tuple[Lineage, ...] = ()

    def is_ok(self) -> bool:
        return False


FieldResult = Union[Ok[T], Failed]


def failed_to_null(issue_type: IssueType, remark: str, lineage_remark: str) -> Failed:
    """Build the common one-issue failure that nulls the field.

    Args:
        issue_type: Kind of problem detected.
        remark: Explanation of the problem.
        lineage_remark: Explanation of why the field was nulled.

    Returns:
        Failed result with one issue and one ``SET_TO_NULL`` lineage.
    """
    return Failed(
        issues=(Issue(issue_type=issue_type, remark=remark),),
        lineages=(Lineage(lineage_type=LineageType.SET_TO_NULL, remark=lineage_remark),),
    )
