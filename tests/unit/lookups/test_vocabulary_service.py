"""Unit tests for the file-backed vocabulary service."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import BiotraceLookupError
from core.terms import EVENT_TYPE, LIFE_STAGE, SEX
from lookups.vocabulary_service import FileVocabularyService, LookupMatch


def test_lookup_matches_labels_ignoring_case_and_punctuation(vocabulary_path: Path) -> None:
    """Labels and canonical names both match after normalization."""
    with FileVocabularyService.from_yaml(vocabulary_path) as service:
        handle = service.has_vocabulary(LIFE_STAGE)
        assert handle is not None
        by_label = handle.lookup("  LARVAL ")
        by_name = handle.lookup("larva")

    assert by_label == LookupMatch(canonical_name="Larva", ancestors=("Juvenile", "Organism"))
    assert by_name == by_label


def test_unconfigured_term_has_no_vocabulary(vocabulary_path: Path) -> None:
    """Terms without a vocabulary return no handle."""
    service = FileVocabularyService.from_yaml(vocabulary_path)

    assert service.has_vocabulary(SEX) is None
    assert service.has_vocabulary(EVENT_TYPE) is not None


def test_closed_service_refuses_lookups(vocabulary_path: Path) -> None:
    """A closed service cannot be reused across teardown."""
    service = FileVocabularyService.from_yaml(vocabulary_path)
    service.close()

    with pytest.raises(BiotraceLookupError):
        service.has_vocabulary(LIFE_STAGE)


def test_missing_vocabulary_file_fails(tmp_path: Path) -> None:
    """Unloadable vocabularies are fatal."""
    with pytest.raises(BiotraceLookupError):
        FileVocabularyService.from_yaml(tmp_path / "absent.yaml")


def test_unknown_parent_is_rejected(tmp_path: Path) -> None:
    """Concepts must reference declared parents."""
    vocabulary_path = tmp_path / "broken.yaml"
    vocabulary_path.write_text(
        "vocabularies:\n"
        "  - name: LifeStage\n"
        "    term: lifeStage\n"
        "    concepts:\n"
        "      - name: Larva\n"
        "        parent: Juvenile\n",
        encoding="utf-8",
    )

    with pytest.raises(BiotraceLookupError):
        FileVocabularyService.from_yaml(vocabulary_path)


def test_cyclic_parents_are_rejected(tmp_path: Path) -> None:
    """Parent chains must end at a root."""
    vocabulary_path = tmp_path / "cycle.yaml"
    vocabulary_path.write_text(
        "vocabularies:\n"
        "  - name: LifeStage\n"
        "    term: lifeStage\n"
        "    concepts:\n"
        "      - {name: A, parent: B}\n"
        "      - {name: B, parent: A}\n",
        encoding="utf-8",
    )

    with pytest.raises(BiotraceLookupError):
        FileVocabularyService.from_yaml(vocabulary_path)
