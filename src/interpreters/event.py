"""Event core interpretation.

This module interprets sampling events: event type, references, sample
size, licence, dataset identifiers and sampling protocols.
"""

from __future__ import annotations

from core.records import EventCoreRecord, VerbatimRecord
from core.terms import (
    DATASET_ID,
    DATASET_NAME,
    EVENT_ID,
    EVENT_TYPE,
    LICENSE,
    PARENT_EVENT_ID,
    REFERENCES,
    SAMPLE_SIZE_UNIT,
    SAMPLE_SIZE_VALUE,
    SAMPLING_PROTOCOL,
)
from interpretation.chain import (
    FieldMapping,
    InterpretationChain,
    apply_field_result,
    copy_step,
    field_step,
)
from interpretation.issues import IssueType
from interpretation.result import FieldResult, Ok, failed_to_null
from interpretation.trace import Interpretation
from interpreters.license import interpret_license
from interpreters.parsers import parse_decimal, parse_uri, split_list
from interpreters.vocabulary import VocabularySupport, vocabulary_step

EVENT_FIELD_MAPPINGS = (
    FieldMapping(EVENT_ID, "event_id"),
    FieldMapping(PARENT_EVENT_ID, "parent_event_id"),
    FieldMapping(SAMPLE_SIZE_UNIT, "sample_size_unit"),
)


def interpret_sample_size_value(raw_value: str) -> FieldResult[float]:
    parsed = parse_decimal(raw_value, IssueType.SAMPLE_SIZE_VALUE_INVALID, "sample size value")
    if isinstance(parsed, Ok) and parsed.value <= 0:
        return failed_to_null(
            IssueType.SAMPLE_SIZE_VALUE_INVALID,
            f"Could not parse sample size value because {parsed.value} is not positive",
            "Invalid sample size value, setting it to null",
        )
    return parsed


def interpret_list(raw_value: str) -> FieldResult[list[str]]:
    return Ok(split_list(raw_value))


def interpret_references(source: VerbatimRecord, target: EventCoreRecord) -> Interpretation[None]:
    """Interpret ``dcterms:references``, falling back to a resolvable event id.

    The fallback only runs after the references value itself was absent,
    so an invalid references URI is never silently replaced.
    """
    raw_references = source.value(REFERENCES)
    if raw_references is not None:
        references = parse_uri(raw_references, IssueType.REFERENCES_URI_INVALID, "references")
        return apply_field_result(target, "references", references)
    return Interpretation.of(source.value(EVENT_ID)).using(
        lambda event_id: _event_id_as_references(event_id, target)
    )


def _event_id_as_references(event_id: str | None, target: EventCoreRecord) -> Interpretation[None]:
    if event_id is None:
        return Interpretation.of(None)
    parsed = parse_uri(event_id, IssueType.REFERENCES_URI_INVALID, "event id")
    if isinstance(parsed, Ok):
        target.references = parsed.value
    return Interpretation.of(None)


def build_event_chain(
    vocabulary: VocabularySupport,
) -> InterpretationChain[VerbatimRecord, EventCoreRecord]:
    """Build the chain populating ``EventCoreRecord``.

    Args:
        vocabulary: Vocabulary capability for the event type.

    Returns:
        Reusable chain for the event aspect.
    """
    return (
        InterpretationChain.to(EventCoreRecord.empty)
        .when(VerbatimRecord.has_core_terms)
        .via(vocabulary_step(EVENT_TYPE, "event_type", vocabulary))
        .via(copy_step(EVENT_FIELD_MAPPINGS))
        .via(interpret_references)
        .via(field_step(SAMPLE_SIZE_VALUE, "sample_size_value", interpret_sample_size_value))
        .via(field_step(LICENSE, "license", interpret_license))
        .via(field_step(DATASET_ID, "dataset_id", interpret_list))
        .via(field_step(DATASET_NAME, "dataset_name", interpret_list))
        .via(field_step(SAMPLING_PROTOCOL, "sampling_protocol", interpret_list))
    )
