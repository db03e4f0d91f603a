"""Basic record interpretation.

This module interprets occurrence-level facts: basis of record, sex,
counts, recorders, type status, licence and the vocabulary-backed life
stage, establishment means, degree of establishment and pathway.
"""

from __future__ import annotations

import re
from enum import Enum

from core.records import BasicRecord, VerbatimRecord
from core.terms import (
    BASIS_OF_RECORD,
    CATALOG_NUMBER,
    COLLECTION_CODE,
    DEGREE_OF_ESTABLISHMENT,
    ESTABLISHMENT_MEANS,
    INDIVIDUAL_COUNT,
    INSTITUTION_CODE,
    LICENSE,
    LIFE_STAGE,
    OCCURRENCE_ID,
    OCCURRENCE_REMARKS,
    ORGANISM_QUANTITY,
    ORGANISM_QUANTITY_TYPE,
    PATHWAY,
    RECORDED_BY,
    SEX,
    TYPE_STATUS,
)
from interpretation.chain import FieldMapping, InterpretationChain, copy_step, field_step
from interpretation.issues import IssueType
from interpretation.result import FieldResult, Ok
from interpreters.license import interpret_license
from interpreters.parsers import parse_decimal, parse_enum, parse_integer, split_list
from interpreters.vocabulary import VocabularySupport, vocabulary_step


class BasisOfRecord(Enum):
    PRESERVED_SPECIMEN = "PreservedSpecimen"
    FOSSIL_SPECIMEN = "FossilSpecimen"
    LIVING_SPECIMEN = "LivingSpecimen"
    HUMAN_OBSERVATION = "HumanObservation"
    MACHINE_OBSERVATION = "MachineObservation"
    MATERIAL_SAMPLE = "MaterialSample"
    MATERIAL_CITATION = "MaterialCitation"
    OCCURRENCE = "Occurrence"
    OBSERVATION = "Observation"


class Sex(Enum):
    MALE = "male"
    FEMALE = "female"
    HERMAPHRODITE = "hermaphrodite"


_BASIS_OF_RECORD_SYNONYMS = {
    "specimen": BasisOfRecord.PRESERVED_SPECIMEN,
    "herbariumsheet": BasisOfRecord.PRESERVED_SPECIMEN,
    "fossil": BasisOfRecord.FOSSIL_SPECIMEN,
    "livingcollection": BasisOfRecord.LIVING_SPECIMEN,
    "humanobs": BasisOfRecord.HUMAN_OBSERVATION,
    "fieldobservation": BasisOfRecord.HUMAN_OBSERVATION,
    "machineobs": BasisOfRecord.MACHINE_OBSERVATION,
    "cameratrap": BasisOfRecord.MACHINE_OBSERVATION,
    "sample": BasisOfRecord.MATERIAL_SAMPLE,
    "literature": BasisOfRecord.MATERIAL_CITATION,
}

_AGENT_SEPARATOR_PATTERN = re.compile(r"\s+-\s+")
_INITIALS_PATTERN = re.compile(r"^(?:[A-Z]\.?){1,3}$")
_HONORIFICS = frozenset({"mr", "mrs", "ms", "miss", "dr", "prof"})

_SEX_SYNONYMS = {
    "m": Sex.MALE,
    "males": Sex.MALE,
    "f": Sex.FEMALE,
    "females": Sex.FEMALE,
    "hermaphroditic": Sex.HERMAPHRODITE,
}

BASIC_FIELD_MAPPINGS = (
    FieldMapping(OCCURRENCE_ID, "occurrence_id"),
    FieldMapping(CATALOG_NUMBER, "catalog_number"),
    FieldMapping(COLLECTION_CODE, "collection_code"),
    FieldMapping(INSTITUTION_CODE, "institution_code"),
    FieldMapping(OCCURRENCE_REMARKS, "occurrence_remarks"),
    FieldMapping(ORGANISM_QUANTITY_TYPE, "organism_quantity_type"),
)


def interpret_basis_of_record(raw_value: str) -> FieldResult[str]:
    parsed = parse_enum(
        raw_value,
        BasisOfRecord,
        IssueType.BASIS_OF_RECORD_INVALID,
        "basis of record",
        _BASIS_OF_RECORD_SYNONYMS,
    )
    return Ok(parsed.value.name) if isinstance(parsed, Ok) else parsed


def interpret_sex(raw_value: str) -> FieldResult[str]:
    parsed = parse_enum(raw_value, Sex, IssueType.PARSE_ERROR, "sex", _SEX_SYNONYMS)
    return Ok(parsed.value.name) if isinstance(parsed, Ok) else parsed


def interpret_individual_count(raw_value: str) -> FieldResult[int]:
    return parse_integer(
        raw_value, IssueType.INDIVIDUAL_COUNT_INVALID, "individual count", minimum=0
    )


def interpret_organism_quantity(raw_value: str) -> FieldResult[float]:
    return parse_decimal(raw_value, IssueType.PARSE_ERROR, "organism quantity", minimum=0)


def interpret_recorded_by(raw_value: str) -> FieldResult[list[str]]:
    """Split and normalize a recorder list.

    Entries are separated by ``;``, ``|`` or a spaced hyphen. Each name is
    rewritten as ``Surname, Initials Given`` with honorifics removed, so
    ``"Dr NL Kirby"`` becomes ``"Kirby, N.L."``. Entries that are not
    personal names, such as e-mail addresses or institutions, are kept.

    Args:
        raw_value: Verbatim ``dwc:recordedBy`` value.

    Returns:
        ``Ok`` with the normalized names in input order.
    """
    entries = [
        entry.strip()
        for item in split_list(raw_value)
        for entry in _AGENT_SEPARATOR_PATTERN.split(item)
        if entry.strip()
    ]
    return Ok([normalize_agent_name(entry) for entry in entries])


def normalize_agent_name(name: str) -> str:
    """Rewrite one person name as ``Surname, Initials Given``."""
    if "@" in name:
        return name
    if "," in name:
        surname, _, given = name.partition(",")
        return _format_agent(surname.strip(), _without_honorifics(given.split()))
    tokens = _without_honorifics(name.split())
    if not any(_INITIALS_PATTERN.match(token) for token in tokens):
        return " ".join(tokens)
    surname_index = max(
        (index for index, token in enumerate(tokens) if not _INITIALS_PATTERN.match(token)),
        default=None,
    )
    if surname_index is None:
        return " ".join(tokens)
    surname = tokens.pop(surname_index)
    return _format_agent(surname, tokens)


def _without_honorifics(tokens: list[str]) -> list[str]:
    return [token for token in tokens if token.rstrip(".").lower() not in _HONORIFICS]


def _format_agent(surname: str, given_tokens: list[str]) -> str:
    initials = "".join(
        f"{letter}."
        for token in given_tokens
        if _INITIALS_PATTERN.match(token)
        for letter in token.replace(".", "")
    )
    given_names = " ".join(
        token for token in given_tokens if not _INITIALS_PATTERN.match(token)
    )
    given = " ".join(part for part in (initials, given_names) if part)
    return f"{surname}, {given}" if given else surname


def interpret_type_status(raw_value: str) -> FieldResult[list[str]]:
    return Ok([status.upper() for status in split_list(raw_value)])


def build_basic_chain(
    vocabulary: VocabularySupport,
) -> InterpretationChain[VerbatimRecord, BasicRecord]:
    """Build the chain populating ``BasicRecord``.

    Args:
        vocabulary: Vocabulary capability for concept-backed fields.

    Returns:
        Reusable chain for the basic aspect.
    """
    return (
        InterpretationChain.to(BasicRecord.empty)
        .when(VerbatimRecord.has_core_terms)
        .via(copy_step(BASIC_FIELD_MAPPINGS))
        .via(field_step(BASIS_OF_RECORD, "basis_of_record", interpret_basis_of_record))
        .via(field_step(SEX, "sex", interpret_sex))
        .via(field_step(INDIVIDUAL_COUNT, "individual_count", interpret_individual_count))
        .via(field_step(ORGANISM_QUANTITY, "organism_quantity", interpret_organism_quantity))
        .via(field_step(RECORDED_BY, "recorded_by", interpret_recorded_by))
        .via(field_step(TYPE_STATUS, "type_status", interpret_type_status))
        .via(field_step(LICENSE, "license", interpret_license))
        .via(vocabulary_step(LIFE_STAGE, "life_stage", vocabulary))
        .via(vocabulary_step(ESTABLISHMENT_MEANS, "establishment_means", vocabulary))
        .via(vocabulary_step(DEGREE_OF_ESTABLISHMENT, "degree_of_establishment", vocabulary))
        .via(vocabulary_step(PATHWAY, "pathway", vocabulary))
    )
