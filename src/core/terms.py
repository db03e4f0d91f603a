"""Controlled vocabulary terms.

This module defines the Darwin Core, Dublin Core and GBIF terms that
verbatim records are keyed by. Terms are immutable values; the lookup
table is built once at import and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass

DWC_NAMESPACE = "http://rs.tdwg.org/dwc/terms/"
DC_NAMESPACE = "http://purl.org/dc/terms/"
GBIF_NAMESPACE = "http://rs.gbif.org/terms/1.0/"


@dataclass(frozen=True)
class Term:
    """One controlled vocabulary field identifier.

    Attributes:
        prefix: Short namespace prefix, empty for unknown terms.
        namespace: Namespace URI, empty for unknown terms.
        simple_name: Unqualified property name.
    """

    prefix: str
    namespace: str
    simple_name: str

    @property
    def qualified_name(self) -> str:
        """Return the namespace-qualified term name."""
        return f"{self.namespace}{self.simple_name}"

    @property
    def prefixed_name(self) -> str:
        """Return the ``prefix:name`` form, or the simple name if unknown."""
        if not self.prefix:
            return self.simple_name
        return f"{self.prefix}:{self.simple_name}"

    def is_known(self) -> bool:
        return bool(self.namespace)


def _dwc(simple_name: str) -> Term:
    return Term(prefix="dwc", namespace=DWC_NAMESPACE, simple_name=simple_name)


def _dc(simple_name: str) -> Term:
    return Term(prefix="dcterms", namespace=DC_NAMESPACE, simple_name=simple_name)


def _gbif(simple_name: str) -> Term:
    return Term(prefix="gbif", namespace=GBIF_NAMESPACE, simple_name=simple_name)


# Record-level
OCCURRENCE_ID = _dwc("occurrenceID")
CATALOG_NUMBER = _dwc("catalogNumber")
COLLECTION_CODE = _dwc("collectionCode")
INSTITUTION_CODE = _dwc("institutionCode")
BASIS_OF_RECORD = _dwc("basisOfRecord")
DATASET_ID = _dwc("datasetID")
DATASET_NAME = _dwc("datasetName")
LICENSE = _dc("license")
REFERENCES = _dc("references")
MODIFIED = _dc("modified")

# Occurrence
RECORDED_BY = _dwc("recordedBy")
INDIVIDUAL_COUNT = _dwc("individualCount")
ORGANISM_QUANTITY = _dwc("organismQuantity")
ORGANISM_QUANTITY_TYPE = _dwc("organismQuantityType")
SEX = _dwc("sex")
LIFE_STAGE = _dwc("lifeStage")
ESTABLISHMENT_MEANS = _dwc("establishmentMeans")
DEGREE_OF_ESTABLISHMENT = _dwc("degreeOfEstablishment")
PATHWAY = _dwc("pathway")
TYPE_STATUS = _dwc("typeStatus")
OCCURRENCE_REMARKS = _dwc("occurrenceRemarks")
ASSOCIATED_MEDIA = _dwc("associatedMedia")

# Event
EVENT_ID = _dwc("eventID")
PARENT_EVENT_ID = _dwc("parentEventID")
EVENT_TYPE = _gbif("eventType")
EVENT_DATE = _dwc("eventDate")
YEAR = _dwc("year")
MONTH = _dwc("month")
DAY = _dwc("day")
START_DAY_OF_YEAR = _dwc("startDayOfYear")
END_DAY_OF_YEAR = _dwc("endDayOfYear")
SAMPLING_PROTOCOL = _dwc("samplingProtocol")
SAMPLE_SIZE_VALUE = _dwc("sampleSizeValue")
SAMPLE_SIZE_UNIT = _dwc("sampleSizeUnit")

# Location
CONTINENT = _dwc("continent")
COUNTRY = _dwc("country")
COUNTRY_CODE = _dwc("countryCode")
STATE_PROVINCE = _dwc("stateProvince")
LOCALITY = _dwc("locality")
WATER_BODY = _dwc("waterBody")
DECIMAL_LATITUDE = _dwc("decimalLatitude")
DECIMAL_LONGITUDE = _dwc("decimalLongitude")
COORDINATE_UNCERTAINTY_IN_METERS = _dwc("coordinateUncertaintyInMeters")
MINIMUM_ELEVATION_IN_METERS = _dwc("minimumElevationInMeters")
MAXIMUM_ELEVATION_IN_METERS = _dwc("maximumElevationInMeters")

# Identification and taxon
DATE_IDENTIFIED = _dwc("dateIdentified")
SCIENTIFIC_NAME = _dwc("scientificName")
TAXON_RANK = _dwc("taxonRank")
KINGDOM = _dwc("kingdom")
PHYLUM = _dwc("phylum")
CLASS = _dwc("class")
ORDER = _dwc("order")
FAMILY = _dwc("family")
GENUS = _dwc("genus")
SPECIFIC_EPITHET = _dwc("specificEpithet")
VERNACULAR_NAME = _dwc("vernacularName")

KNOWN_TERMS: tuple[Term, ...] = tuple(
    value for value in dict(globals()).values() if isinstance(value, Term)
)

_TERMS_BY_NAME: dict[str, Term] = {}
for _term in KNOWN_TERMS:
    _TERMS_BY_NAME[_term.qualified_name.lower()] = _term
    _TERMS_BY_NAME[_term.prefixed_name.lower()] = _term
    _TERMS_BY_NAME.setdefault(_term.simple_name.lower(), _term)


def term_for_name(name: str) -> Term:
    """Resolve a term from its simple, prefixed or qualified name.

    Args:
        name: Term name as found in a verbatim source or configuration.

    Returns:
        The matching known term, or an unknown term carrying the trimmed
        name when no known term matches.
    """
    normalized_name = name.strip()
    known_term = _TERMS_BY_NAME.get(normalized_name.lower())
    if known_term is not None:
        return known_term
    return Term(prefix="", namespace="", simple_name=normalized_name)
