"""Verbatim and interpreted record models.

This module defines the immutable verbatim input record and one mutable
interpreted record per aspect. Interpreted records are created empty
(identifier only) at the start of interpretation and populated by the
interpretation chain before being handed to writers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
import time
from typing import Mapping, TypeVar

from core.terms import Term
from interpretation.issues import IssueList

_NULL_LITERAL = "null"

R = TypeVar("R", bound="InterpretedRecord")


class RecordAspect(Enum):
    """Interpreted record variants produced from one verbatim record."""

    BASIC = "basic"
    LOCATION = "location"
    TEMPORAL = "temporal"
    TAXON = "taxon"
    EVENT = "event"
    METADATA = "metadata"
    MULTIMEDIA = "multimedia"


@dataclass(frozen=True)
class VerbatimRecord:
    """Raw ingested record.

    Attributes:
        id: Record identifier.
        core_terms: Raw values keyed by qualified term name.
    """

    id: str
    core_terms: Mapping[str, str] = field(default_factory=dict)

    def value(self, term: Term) -> str | None:
        """Return the null-aware raw value for ``term``.

        Missing, blank and literal ``"null"`` values are all treated as
        absent.
        """
        raw_value = self.core_terms.get(term.qualified_name)
        if raw_value is None:
            return None
        if not raw_value.strip() or raw_value.strip().lower() == _NULL_LITERAL:
            return None
        return raw_value

    def has_core_terms(self) -> bool:
        return bool(self.core_terms)


@dataclass(frozen=True)
class VocabularyConcept:
    """Normalized categorical value with its ancestor chain.

    Attributes:
        concept: Canonical concept name.
        lineage: Ancestors root-first, ending with the concept itself.
    """

    concept: str
    lineage: tuple[str, ...]


@dataclass(frozen=True)
class EventDate:
    """Interpreted event date interval as ISO strings."""

    gte: str | None = None
    lte: str | None = None


def _now_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class InterpretedRecord:
    """Fields shared by every interpreted aspect record.

    Attributes:
        id: Identifier copied from the verbatim record.
        created: Creation time in epoch milliseconds.
        issues: Append-only issues and lineage for this record.
    """

    id: str
    created: int = field(default_factory=_now_millis)
    issues: IssueList = field(default_factory=IssueList, repr=False, compare=False)

    @classmethod
    def empty(cls: type[R], source: VerbatimRecord) -> R:
        """Create an unpopulated record for ``source``."""
        return cls(id=source.id)


@dataclass
class BasicRecord(InterpretedRecord):
    """Occurrence-level facts about the observed organism."""

    basis_of_record: str | None = None
    occurrence_id: str | None = None
    catalog_number: str | None = None
    collection_code: str | None = None
    institution_code: str | None = None
    occurrence_remarks: str | None = None
    sex: str | None = None
    individual_count: int | None = None
    organism_quantity: float | None = None
    organism_quantity_type: str | None = None
    type_status: list[str] = field(default_factory=list)
    recorded_by: list[str] = field(default_factory=list)
    license: str | None = None
    life_stage: VocabularyConcept | None = None
    establishment_means: VocabularyConcept | None = None
    degree_of_establishment: VocabularyConcept | None = None
    pathway: VocabularyConcept | None = None


@dataclass
class LocationRecord(InterpretedRecord):
    """Where the occurrence was recorded."""

    continent: str | None = None
    country: str | None = None
    country_code: str | None = None
    state_province: str | None = None
    locality: str | None = None
    water_body: str | None = None
    decimal_latitude: float | None = None
    decimal_longitude: float | None = None
    has_coordinate: bool = False
    coordinate_uncertainty_in_meters: float | None = None
    minimum_elevation_in_meters: float | None = None
    maximum_elevation_in_meters: float | None = None


@dataclass
class TemporalRecord(InterpretedRecord):
    """When the occurrence was recorded and identified."""

    year: int | None = None
    month: int | None = None
    day: int | None = None
    event_date: EventDate | None = None
    start_day_of_year: int | None = None
    end_day_of_year: int | None = None
    date_identified: str | None = None
    modified: str | None = None


@dataclass
class TaxonRecord(InterpretedRecord):
    """Verbatim taxonomic identification, normalized."""

    scientific_name: str | None = None
    taxon_rank: str | None = None
    vernacular_name: str | None = None
    classification: dict[str, str] = field(default_factory=dict)


@dataclass
class EventCoreRecord(InterpretedRecord):
    """Sampling event facts."""

    event_id: str | None = None
    parent_event_id: str | None = None
    event_type: VocabularyConcept | None = None
    references: str | None = None
    sample_size_unit: str | None = None
    sample_size_value: float | None = None
    license: str | None = None
    dataset_id: list[str] = field(default_factory=list)
    dataset_name: list[str] = field(default_factory=list)
    sampling_protocol: list[str] = field(default_factory=list)


@dataclass
class MetadataRecord(InterpretedRecord):
    """Dataset attribution attached to the record."""

    dataset_id: str | None = None
    dataset_title: str | None = None
    publisher: str | None = None
    license: str | None = None


@dataclass
class MultimediaRecord(InterpretedRecord):
    """Media items associated with the occurrence."""

    media: list[str] = field(default_factory=list)


def record_to_payload(record: InterpretedRecord) -> dict[str, object]:
    """Serialize an interpreted record into a JSON-safe payload.

    Args:
        record: Any aspect record.

    Returns:
        Dictionary payload with issues and lineage last.
    """
    payload: dict[str, object] = {}
    for record_field in fields(record):
        if record_field.name == "issues":
            continue
        payload[record_field.name] = _to_json_value(getattr(record, record_field.name))
    payload["issues"] = [
        {"issue_type": issue.issue_type.name, "remark": issue.remark}
        for issue in record.issues.issues
    ]
    payload["lineages"] = [
        {"lineage_type": lineage.lineage_type.name, "remark": lineage.remark}
        for lineage in record.issues.lineages
    ]
    return payload


def _to_json_value(value: object) -> object:
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, VocabularyConcept):
        return {"concept": value.concept, "lineage": list(value.lineage)}
    if isinstance(value, EventDate):
        return {"gte": value.gte, "lte": value.lte}
    if isinstance(value, list):
        return [_to_json_value(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _to_json_value(item) for key, item in value.items()}
    return value
