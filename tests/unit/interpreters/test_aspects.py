"""Unit tests for aspect chain dispatch."""

from __future__ import annotations

import pytest

from core.records import (
    BasicRecord,
    EventCoreRecord,
    LocationRecord,
    MetadataRecord,
    MultimediaRecord,
    RecordAspect,
    TaxonRecord,
    TemporalRecord,
    VerbatimRecord,
)
from core.terms import ASSOCIATED_MEDIA
from interpreters.aspects import AspectServices, build_chain, build_chains
from lookups.metadata_store import DatasetMetadata

_EXPECTED_TARGETS = {
    RecordAspect.BASIC: BasicRecord,
    RecordAspect.LOCATION: LocationRecord,
    RecordAspect.TEMPORAL: TemporalRecord,
    RecordAspect.TAXON: TaxonRecord,
    RecordAspect.EVENT: EventCoreRecord,
    RecordAspect.METADATA: MetadataRecord,
    RecordAspect.MULTIMEDIA: MultimediaRecord,
}


@pytest.mark.parametrize("aspect", list(RecordAspect))
def test_build_chain_targets_aspect_record(aspect: RecordAspect) -> None:
    """Every aspect should dispatch to a chain building its own record type."""
    services = AspectServices(metadata=DatasetMetadata.empty("DS1"))
    verbatim = VerbatimRecord(
        id="a1", core_terms={ASSOCIATED_MEDIA.qualified_name: "https://example.org/a.jpg"}
    )

    result = build_chain(aspect, services).run(verbatim)

    assert isinstance(result.target, _EXPECTED_TARGETS[aspect])
    assert result.target.id == "a1"


def test_build_chains_keeps_request_order() -> None:
    """Chains come back keyed in the requested order."""
    aspects = (RecordAspect.TAXON, RecordAspect.BASIC)

    chains = build_chains(aspects, AspectServices())

    assert tuple(chains) == aspects
