"""Unit tests for event core interpretation."""

from __future__ import annotations

from pathlib import Path

from core.records import VerbatimRecord, VocabularyConcept
from core.terms import term_for_name
from interpretation.issues import IssueType
from interpreters.event import build_event_chain
from interpreters.vocabulary import UnmatchedPolicy, VocabularySupport
from lookups.vocabulary_service import FileVocabularyService


def _verbatim(terms: dict[str, str]) -> VerbatimRecord:
    return VerbatimRecord(
        id="e1",
        core_terms={term_for_name(name).qualified_name: value for name, value in terms.items()},
    )


def test_event_chain_interprets_all_fields(vocabulary_path: Path) -> None:
    """A valid event should be fully populated without issues."""
    verbatim = _verbatim(
        {
            "eventID": "ev-1",
            "parentEventID": "site-1",
            "eventType": "Transect survey",
            "references": "https://example.org/events/ev-1",
            "sampleSizeValue": "5",
            "sampleSizeUnit": "square metre",
            "license": "CC0",
            "datasetID": "DS1",
            "datasetName": "Peruvian Plant Survey",
            "samplingProtocol": "quadrat; pitfall trap",
        }
    )

    with FileVocabularyService.from_yaml(vocabulary_path) as service:
        record = build_event_chain(VocabularySupport.enabled(service)).run(verbatim).target

    assert record.event_id == "ev-1" and record.parent_event_id == "site-1"
    assert record.event_type == VocabularyConcept(concept="Survey", lineage=("Survey",))
    assert record.references == "https://example.org/events/ev-1"
    assert record.sample_size_value == 5.0 and record.sample_size_unit == "square metre"
    assert record.license == "CC0_1_0"
    assert record.dataset_id == ["DS1"] and record.dataset_name == ["Peruvian Plant Survey"]
    assert record.sampling_protocol == ["quadrat", "pitfall trap"]
    assert not record.issues


def test_event_chain_flags_bad_references_and_sample_size() -> None:
    """Invalid references and non-positive sample sizes are issues."""
    verbatim = _verbatim({"references": "not a uri", "sampleSizeValue": "-2"})

    record = build_event_chain(VocabularySupport.disabled()).run(verbatim).target

    assert record.references is None and record.sample_size_value is None
    assert record.issues.issue_types() == (
        IssueType.REFERENCES_URI_INVALID,
        IssueType.SAMPLE_SIZE_VALUE_INVALID,
    )


def test_event_id_url_fills_missing_references() -> None:
    """A resolvable event id stands in for absent references."""
    verbatim = _verbatim({"eventID": "http://example.org/ev/9"})

    record = build_event_chain(VocabularySupport.disabled()).run(verbatim).target

    assert record.references == "http://example.org/ev/9" and not record.issues


def test_unmatched_event_type_records_issue_when_requested(vocabulary_path: Path) -> None:
    """RECORD_ISSUE should surface unmatched vocabulary values."""
    with FileVocabularyService.from_yaml(vocabulary_path) as service:
        vocabulary = VocabularySupport.enabled(service, UnmatchedPolicy.RECORD_ISSUE)
        record = build_event_chain(vocabulary).run(_verbatim({"eventType": "picnic"})).target

    assert record.event_type is None
    assert record.issues.issue_types() == (IssueType.VOCABULARY_MATCH_NONE,)
