"""Controlled vocabulary lookup service.

This module defines the narrow interface interpreters consume to
normalize categorical values, and a file-backed implementation loaded
from YAML. A loaded service is read-only, so any number of worker
threads may query it without locking.

YAML layout::

    vocabularies:
      - name: LifeStage
        term: dwc:lifeStage
        concepts:
          - name: Adult
            labels: [adults, imago]
          - name: Larva
            parent: Juvenile
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol

from core.errors import BiotraceLookupError
from core.logging_config import get_logger
from core.terms import Term, term_for_name
from lookups.yaml_payload import (
    expect_mapping,
    expect_sequence,
    expect_string,
    load_yaml_mapping,
    optional_string,
)

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class LookupMatch:
    """A matched vocabulary concept.

    Attributes:
        canonical_name: Canonical concept name.
        ancestors: Broader concepts, nearest parent first (leaf-to-root).
    """

    canonical_name: str
    ancestors: tuple[str, ...] = ()


class LookupHandle(Protocol):
    """Lookup over one vocabulary."""

    def lookup(self, raw_value: str) -> LookupMatch | None:
        ...


class VocabularyService(Protocol):
    """Source of vocabulary lookups keyed by term."""

    def has_vocabulary(self, term: Term) -> LookupHandle | None:
        ...

    def close(self) -> None:
        ...


@dataclass(frozen=True)
class VocabularyLookup:
    """In-memory lookup for one vocabulary.

    Attributes:
        name: Vocabulary name.
        matches_by_label: Matches keyed by normalized label.
    """

    name: str
    matches_by_label: Mapping[str, LookupMatch]

    def lookup(self, raw_value: str) -> LookupMatch | None:
        return self.matches_by_label.get(normalize_label(raw_value))


class FileVocabularyService:
    """Vocabulary service backed by a YAML file loaded once."""

    def __init__(self, lookups_by_term: Mapping[str, VocabularyLookup]) -> None:
        self._lookups_by_term = dict(lookups_by_term)
        self._closed = False

    @classmethod
    def from_yaml(cls, vocabulary_path: Path) -> "FileVocabularyService":
        """Load every vocabulary declared in a YAML file.

        Args:
            vocabulary_path: YAML vocabulary file.

        Returns:
            Ready-to-query service.

        Raises:
            BiotraceLookupError: If the file is missing or invalid.
        """
        root_mapping = load_yaml_mapping(vocabulary_path, "vocabulary file")
        lookups_by_term: dict[str, VocabularyLookup] = {}
        for index, raw_vocabulary in enumerate(
            expect_sequence(root_mapping.get("vocabularies"), "vocabularies")
        ):
            term, lookup = _parse_vocabulary(raw_vocabulary, f"vocabularies[{index}]")
            lookups_by_term[term.qualified_name] = lookup
        _LOGGER.info(
            "vocabulary_loaded",
            vocabulary_path=str(vocabulary_path),
            vocabularies=sorted(lookup.name for lookup in lookups_by_term.values()),
        )
        return cls(lookups_by_term)

    def has_vocabulary(self, term: Term) -> LookupHandle | None:
        """Return the lookup bound to ``term`` if one is configured.

        Raises:
            BiotraceLookupError: If the service was already closed.
        """
        if self._closed:
            raise BiotraceLookupError(
                "Vocabulary service is closed. Acquire a new service for this worker."
            )
        return self._lookups_by_term.get(term.qualified_name)

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "FileVocabularyService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def normalize_label(raw_value: str) -> str:
    """Normalize a label for matching: case, whitespace and punctuation."""
    return "".join(character for character in raw_value.lower() if character.isalnum())


def _parse_vocabulary(raw_vocabulary: object, context: str) -> tuple[Term, VocabularyLookup]:
    vocabulary_mapping = expect_mapping(raw_vocabulary, context)
    name = expect_string(vocabulary_mapping.get("name"), f"{context}.name")
    term = term_for_name(expect_string(vocabulary_mapping.get("term"), f"{context}.term"))
    parents: dict[str, str | None] = {}
    labels: dict[str, tuple[str, ...]] = {}
    for index, raw_concept in enumerate(
        expect_sequence(vocabulary_mapping.get("concepts"), f"{context}.concepts")
    ):
        concept_context = f"{context}.concepts[{index}]"
        concept_mapping = expect_mapping(raw_concept, concept_context)
        concept_name = expect_string(concept_mapping.get("name"), f"{concept_context}.name")
        parents[concept_name] = optional_string(concept_mapping, "parent", concept_context)
        raw_labels = expect_sequence(concept_mapping.get("labels"), f"{concept_context}.labels")
        labels[concept_name] = tuple(
            expect_string(label, f"{concept_context}.labels") for label in raw_labels
        )
    matches_by_label: dict[str, LookupMatch] = {}
    for concept_name, concept_labels in labels.items():
        match = LookupMatch(
            canonical_name=concept_name,
            ancestors=_collect_ancestors(concept_name, parents, context),
        )
        for label in (concept_name, *concept_labels):
            matches_by_label[normalize_label(label)] = match
    return term, VocabularyLookup(name=name, matches_by_label=matches_by_label)


def _collect_ancestors(
    concept_name: str,
    parents: Mapping[str, str | None],
    context: str,
) -> tuple[str, ...]:
    """Walk parent links from a concept up to its root, nearest first."""
    ancestors: list[str] = []
    current_parent = parents.get(concept_name)
    while current_parent is not None:
        if current_parent == concept_name or current_parent in ancestors:
            raise BiotraceLookupError(
                f"Invalid {context}: concept '{concept_name}' has a cyclic parent chain."
            )
        if current_parent not in parents:
            raise BiotraceLookupError(
                f"Invalid {context}: concept '{concept_name}' references unknown parent "
                f"'{current_parent}'."
            )
        ancestors.append(current_parent)
        current_parent = parents[current_parent]
    return tuple(ancestors)
