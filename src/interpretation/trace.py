"""Accumulating interpretation values.

This module defines ``Interpretation``, a value paired with the ordered
traces recorded while producing it. Combining interpretations
concatenates their traces in step order; the empty trace sequence is the
identity, and no trace is ever deduplicated or reordered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Generic, Iterable, TypeVar

if TYPE_CHECKING:
    from interpretation.issues import Issue, IssueType

T = TypeVar("T")
U = TypeVar("U")
C = TypeVar("C")


@dataclass(frozen=True)
class Trace(Generic[C]):
    """What happened, where, and why.

    Attributes:
        context: The traced element, usually an ``IssueType``.
        field_name: Output field the trace refers to, if any.
        remark: Observation about the traced event.
    """

    context: C
    field_name: str | None = None
    remark: str | None = None


@dataclass(frozen=True)
class Interpretation(Generic[T]):
    """A value plus everything recorded while constructing it.

    Attributes:
        value: The interpreted value.
        traces: Issue traces in the order they were recorded.
    """

    value: T
    traces: tuple[Trace["IssueType"], ...] = ()

    @classmethod
    def of(cls, value: U) -> "Interpretation[U]":
        """Wrap a value with an empty trace sequence."""
        return Interpretation(value=value)

    def with_trace(self, trace: Trace["IssueType"]) -> "Interpretation[T]":
        return Interpretation(value=self.value, traces=self.traces + (trace,))

    def with_traces(self, traces: Iterable[Trace["IssueType"]]) -> "Interpretation[T]":
        return Interpretation(value=self.value, traces=self.traces + tuple(traces))

    def with_issue(self, field_name: str | None, issue: "Issue") -> "Interpretation[T]":
        """Append an issue as a trace against ``field_name``."""
        trace = Trace(context=issue.issue_type, field_name=field_name, remark=issue.remark)
        return self.with_trace(trace)

    def using(self, mapper: Callable[[T], "Interpretation[U]"]) -> "Interpretation[U]":
        """Map the value into a new interpretation, keeping earlier traces first.

        Args:
            mapper: Function producing the next interpretation from the value.

        Returns:
            Interpretation holding the mapped value and both trace sequences.
        """
        mapped = mapper(self.value)
        return Interpretation(value=mapped.value, traces=self.traces + mapped.traces)

    def then(self, other: "Interpretation[U]") -> "Interpretation[U]":
        """Sequence two interpretations, keeping the second value."""
        return Interpretation(value=other.value, traces=self.traces + other.traces)

    def has_traces(self) -> bool:
        return bool(self.traces)

    def for_each_trace(self, consumer: Callable[[Trace["IssueType"]], None]) -> None:
        """Feed every trace to ``consumer`` in recorded order."""
        for trace in self.traces:
            consumer(trace)
