"""Vocabulary concept resolution.

This module maps raw categorical values through an optional controlled
vocabulary service into normalized concepts with root-first lineage.
Vocabulary enrichment is an explicit capability: a disabled capability
resolves nothing and records nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.records import VerbatimRecord, VocabularyConcept
from core.terms import Term
from interpretation.chain import Step, apply_field_result
from interpretation.issues import IssueType
from interpretation.result import failed_to_null
from interpretation.trace import Interpretation
from lookups.vocabulary_service import LookupMatch, VocabularyService

__all__ = [
    "UnmatchedPolicy",
    "VocabularyConcept",
    "VocabularySupport",
    "build_concept",
    "resolve_concept",
    "vocabulary_step",
]


class UnmatchedPolicy(Enum):
    """What to record when a present value has no vocabulary match."""

    SILENT = "silent"
    RECORD_ISSUE = "record_issue"


@dataclass(frozen=True)
class VocabularySupport:
    """Vocabulary enrichment capability passed into interpreters.

    Attributes:
        service: Vocabulary service, None when enrichment is disabled.
        unmatched_policy: Handling of values the vocabulary does not know.
    """

    service: VocabularyService | None = None
    unmatched_policy: UnmatchedPolicy = UnmatchedPolicy.SILENT

    @classmethod
    def disabled(cls) -> "VocabularySupport":
        return cls()

    @classmethod
    def enabled(
        cls,
        service: VocabularyService,
        unmatched_policy: UnmatchedPolicy = UnmatchedPolicy.SILENT,
    ) -> "VocabularySupport":
        return cls(service=service, unmatched_policy=unmatched_policy)

    @property
    def is_enabled(self) -> bool:
        return self.service is not None


def build_concept(match: LookupMatch) -> VocabularyConcept:
    """Build a concept whose lineage runs root-first and ends with itself.

    Args:
        match: Vocabulary match with leaf-to-root ancestors.

    Returns:
        Concept with reversed ancestors plus the canonical name.
    """
    lineage = list(reversed(match.ancestors))
    lineage.append(match.canonical_name)
    return VocabularyConcept(concept=match.canonical_name, lineage=tuple(lineage))


def resolve_concept(
    term: Term,
    raw_value: str | None,
    vocabulary: VocabularySupport,
) -> VocabularyConcept | None:
    """Resolve a raw value into a vocabulary concept.

    Args:
        term: Term the value was recorded under.
        raw_value: Verbatim value, possibly None or blank.
        vocabulary: Vocabulary capability for this deployment.

    Returns:
        The concept, or None when disabled, blank, or unmatched. None is
        never accompanied by an issue here; callers apply the policy.
    """
    if vocabulary.service is None:
        return None
    if raw_value is None or not raw_value.strip():
        return None
    handle = vocabulary.service.has_vocabulary(term)
    if handle is None:
        return None
    match = handle.lookup(raw_value)
    if match is None:
        return None
    return build_concept(match)


def vocabulary_step(
    term: Term,
    field_name: str,
    vocabulary: VocabularySupport,
) -> Step[VerbatimRecord, Any]:
    """Build a step that sets ``field_name`` from a vocabulary lookup.

    Unmatched values only produce an issue under
    ``UnmatchedPolicy.RECORD_ISSUE``.
    """

    def step(source: VerbatimRecord, target: Any) -> Interpretation[None] | None:
        raw_value = source.value(term)
        concept = resolve_concept(term, raw_value, vocabulary)
        if concept is not None:
            setattr(target, field_name, concept)
            return None
        if raw_value is None or vocabulary.service is None:
            return None
        if vocabulary.unmatched_policy is not UnmatchedPolicy.RECORD_ISSUE:
            return None
        if vocabulary.service.has_vocabulary(term) is None:
            return None
        failed = failed_to_null(
            IssueType.VOCABULARY_MATCH_NONE,
            f"Value '{raw_value.strip()}' of {term.prefixed_name} has no vocabulary match",
            f"Unmatched {term.simple_name}, setting it to null",
        )
        return apply_field_result(target, field_name, failed)

    return step
