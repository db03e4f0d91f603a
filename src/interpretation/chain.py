"""Interpretation chain combinator.

This module threads a source record through an ordered list of steps
that populate a freshly created target record. Chains are immutable:
``when`` and ``via`` return new chains, so one chain can be built at
worker setup and run concurrently for any number of records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from core.errors import BiotraceInterpretationError
from core.records import VerbatimRecord
from core.terms import Term
from interpretation.issues import IssueList, IssueType
from interpretation.result import FieldResult, Ok
from interpretation.trace import Interpretation, Trace

S = TypeVar("S")
R = TypeVar("R")

Step = Callable[[S, R], Optional[Interpretation[Any]]]
Predicate = Callable[[S], bool]


@dataclass(frozen=True)
class _Gate(Generic[S]):
    predicate: Predicate[S]


@dataclass(frozen=True)
class ChainResult(Generic[R]):
    """Outcome of running a chain for one source.

    Attributes:
        target: The populated target record.
        traces: Issue traces from every step, in step order.
        applicable: False when a gate skipped the rest of the chain.
    """

    target: R
    traces: tuple[Trace[IssueType], ...]
    applicable: bool = True

    def get_or_none(self) -> R | None:
        """Return the target, or None when the chain did not apply."""
        return self.target if self.applicable else None

    def for_each_trace(self, consumer: Callable[[Trace[IssueType]], None]) -> None:
        for trace in self.traces:
            consumer(trace)

    def as_interpretation(self) -> Interpretation[R]:
        return Interpretation(value=self.target, traces=self.traces)


@dataclass(frozen=True)
class InterpretationChain(Generic[S, R]):
    """Ordered, gated sequence of interpretation steps.

    Attributes:
        target_factory: Builds an empty target record from the source.
        stages: Steps and gates in declaration order.
    """

    target_factory: Callable[[S], R]
    stages: tuple[Step[S, R] | _Gate[S], ...] = ()

    @classmethod
    def to(cls, target_factory: Callable[[S], R]) -> "InterpretationChain[S, R]":
        """Start a chain that populates targets built by ``target_factory``."""
        return cls(target_factory=target_factory)

    def when(self, predicate: Predicate[S]) -> "InterpretationChain[S, R]":
        """Skip all later steps for sources failing ``predicate``.

        A skipped source is not applicable; nothing is recorded for it.
        """
        if not callable(predicate):
            raise BiotraceInterpretationError(
                f"Chain gate must be callable, got {type(predicate).__name__}."
            )
        return InterpretationChain(
            target_factory=self.target_factory,
            stages=self.stages + (_Gate(predicate),),
        )

    def via(self, step: Step[S, R]) -> "InterpretationChain[S, R]":
        """Append a step that may mutate the target and return traces."""
        if not callable(step):
            raise BiotraceInterpretationError(
                f"Chain step must be callable, got {type(step).__name__}."
            )
        return InterpretationChain(
            target_factory=self.target_factory,
            stages=self.stages + (step,),
        )

    def run(self, source: S) -> ChainResult[R]:
        """Run every stage for ``source``.

        Args:
            source: Record to interpret.

        Returns:
            Chain result holding the target and the concatenated traces.
            Traces are also appended to the target's ``IssueList`` when
            the target carries one.
        """
        interpretation: Interpretation[R] = Interpretation.of(self.target_factory(source))
        applicable = True
        for stage in self.stages:
            if isinstance(stage, _Gate):
                if not stage.predicate(source):
                    applicable = False
                    break
                continue
            interpretation = interpretation.using(_bind_step(stage, source))
        result = ChainResult(
            target=interpretation.value,
            traces=interpretation.traces,
            applicable=applicable,
        )
        issue_list = getattr(result.target, "issues", None)
        if isinstance(issue_list, IssueList):
            result.for_each_trace(issue_list.add_trace)
        return result


def _bind_step(step: Step[S, R], source: S) -> Callable[[R], Interpretation[R]]:
    def apply(target: R) -> Interpretation[R]:
        step_result = step(source, target)
        if step_result is None:
            return Interpretation.of(target)
        return Interpretation(value=target, traces=step_result.traces)

    return apply


@dataclass(frozen=True)
class FieldMapping:
    """One entry of a term to output field copy table.

    Attributes:
        term: Verbatim term to read.
        field_name: Output record attribute to set.
        convert: Conversion applied to the null-aware raw value.
    """

    term: Term
    field_name: str
    convert: Callable[[str], Any] = str.strip


def apply_field_result(
    target: Any,
    field_name: str,
    result: FieldResult[Any],
) -> Interpretation[None]:
    """Apply a field result to ``target``.

    ``Ok`` sets the field. ``Failed`` leaves it untouched, records the
    lineage on the target and returns the issues as traces.

    Args:
        target: Interpreted record being populated.
        field_name: Attribute owned by the interpreter.
        result: Interpreter result.

    Returns:
        Interpretation carrying the issue traces, empty on success.
    """
    interpretation: Interpretation[None] = Interpretation.of(None)
    if isinstance(result, Ok):
        setattr(target, field_name, result.value)
        return interpretation
    for lineage in result.lineages:
        target.issues.add_lineage(lineage)
    for issue in result.issues:
        interpretation = interpretation.with_issue(field_name, issue)
    return interpretation


def field_step(
    term: Term,
    field_name: str,
    interpreter: Callable[[str], FieldResult[Any]],
) -> Step[VerbatimRecord, Any]:
    """Build a step that interprets one term into one field.

    Absent verbatim values leave the field unset without an issue; there
    is nothing to interpret.
    """

    def step(source: VerbatimRecord, target: Any) -> Interpretation[None] | None:
        raw_value = source.value(term)
        if raw_value is None:
            return None
        return apply_field_result(target, field_name, interpreter(raw_value))

    return step


def copy_step(mappings: Sequence[FieldMapping]) -> Step[VerbatimRecord, Any]:
    """Build a step that copies terms into fields through a mapping table."""
    mapping_table = tuple(mappings)

    def step(source: VerbatimRecord, target: Any) -> None:
        for mapping in mapping_table:
            raw_value = source.value(mapping.term)
            if raw_value is not None:
                setattr(target, mapping.field_name, mapping.convert(raw_value))

    return step
