"""Taxon interpretation.

This module normalizes the verbatim identification: scientific name,
taxon rank and the higher classification as supplied by the publisher.
Matching names against a taxonomic backbone is left to external services.
"""

from __future__ import annotations

from enum import Enum

from core.records import TaxonRecord, VerbatimRecord
from core.terms import (
    CLASS,
    FAMILY,
    GENUS,
    KINGDOM,
    ORDER,
    PHYLUM,
    SCIENTIFIC_NAME,
    SPECIFIC_EPITHET,
    TAXON_RANK,
    VERNACULAR_NAME,
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
from interpreters.parsers import parse_enum


class TaxonRank(Enum):
    KINGDOM = "kingdom"
    PHYLUM = "phylum"
    CLASS = "class"
    ORDER = "order"
    FAMILY = "family"
    GENUS = "genus"
    SPECIES = "species"
    SUBSPECIES = "subspecies"
    VARIETY = "variety"
    FORM = "form"


_RANK_SYNONYMS = {
    "sp": TaxonRank.SPECIES,
    "spp": TaxonRank.SPECIES,
    "ssp": TaxonRank.SUBSPECIES,
    "subsp": TaxonRank.SUBSPECIES,
    "var": TaxonRank.VARIETY,
    "f": TaxonRank.FORM,
    "forma": TaxonRank.FORM,
    "fam": TaxonRank.FAMILY,
    "gen": TaxonRank.GENUS,
    "regnum": TaxonRank.KINGDOM,
    "divisio": TaxonRank.PHYLUM,
    "division": TaxonRank.PHYLUM,
    "ordo": TaxonRank.ORDER,
}

CLASSIFICATION_TERMS = (
    (KINGDOM, "kingdom"),
    (PHYLUM, "phylum"),
    (CLASS, "class"),
    (ORDER, "order"),
    (FAMILY, "family"),
    (GENUS, "genus"),
    (SPECIFIC_EPITHET, "specific_epithet"),
)

TAXON_FIELD_MAPPINGS = (FieldMapping(VERNACULAR_NAME, "vernacular_name"),)


def interpret_taxon_rank(raw_value: str) -> FieldResult[str]:
    parsed = parse_enum(
        raw_value, TaxonRank, IssueType.TAXON_RANK_INVALID, "taxon rank", _RANK_SYNONYMS
    )
    return Ok(parsed.value.name) if isinstance(parsed, Ok) else parsed


def interpret_scientific_name(source: VerbatimRecord, target: TaxonRecord) -> Interpretation[None]:
    """Collapse whitespace in the scientific name; a missing name is an issue."""
    raw_value = source.value(SCIENTIFIC_NAME)
    if raw_value is None:
        failed = failed_to_null(
            IssueType.SCIENTIFIC_NAME_MISSING,
            "Record has no scientific name",
            "Missing scientific name, leaving it null",
        )
        return apply_field_result(target, "scientific_name", failed)
    return apply_field_result(target, "scientific_name", Ok(" ".join(raw_value.split())))


def interpret_classification(source: VerbatimRecord, target: TaxonRecord) -> None:
    for term, rank_name in CLASSIFICATION_TERMS:
        raw_value = source.value(term)
        if raw_value is not None:
            target.classification[rank_name] = raw_value.strip()


def build_taxon_chain() -> InterpretationChain[VerbatimRecord, TaxonRecord]:
    """Build the chain populating ``TaxonRecord``."""
    return (
        InterpretationChain.to(TaxonRecord.empty)
        .when(VerbatimRecord.has_core_terms)
        .via(interpret_scientific_name)
        .via(field_step(TAXON_RANK, "taxon_rank", interpret_taxon_rank))
        .via(interpret_classification)
        .via(copy_step(TAXON_FIELD_MAPPINGS))
    )
