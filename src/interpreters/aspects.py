"""Aspect chain dispatch.

This module selects the interpretation chain for a ``RecordAspect``.
Dispatch is an explicit if-chain over the enum; adding an aspect means
adding a branch here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from core.errors import BiotraceInterpretationError
from core.records import RecordAspect, VerbatimRecord
from interpretation.chain import InterpretationChain
from interpreters.basic import build_basic_chain
from interpreters.event import build_event_chain
from interpreters.location import build_location_chain
from interpreters.metadata import build_metadata_chain
from interpreters.multimedia import build_multimedia_chain
from interpreters.taxon import build_taxon_chain
from interpreters.temporal import build_temporal_chain
from interpreters.vocabulary import VocabularySupport
from lookups.metadata_store import DatasetMetadata


@dataclass(frozen=True)
class AspectServices:
    """Read-only collaborators the aspect chains are built from.

    Attributes:
        vocabulary: Vocabulary capability for concept-backed fields.
        metadata: Attribution for the dataset being interpreted, if known.
    """

    vocabulary: VocabularySupport = field(default_factory=VocabularySupport.disabled)
    metadata: DatasetMetadata | None = None


def build_chain(
    aspect: RecordAspect,
    services: AspectServices,
) -> InterpretationChain[VerbatimRecord, Any]:
    """Build the chain for one aspect.

    Args:
        aspect: Aspect to build.
        services: Shared collaborators for this worker.

    Returns:
        Chain producing that aspect's interpreted record.

    Raises:
        BiotraceInterpretationError: If the aspect has no chain.
    """
    if aspect is RecordAspect.BASIC:
        return build_basic_chain(services.vocabulary)
    if aspect is RecordAspect.LOCATION:
        return build_location_chain()
    if aspect is RecordAspect.TEMPORAL:
        return build_temporal_chain()
    if aspect is RecordAspect.TAXON:
        return build_taxon_chain()
    if aspect is RecordAspect.EVENT:
        return build_event_chain(services.vocabulary)
    if aspect is RecordAspect.METADATA:
        return build_metadata_chain(services.metadata)
    if aspect is RecordAspect.MULTIMEDIA:
        return build_multimedia_chain()
    raise BiotraceInterpretationError(
        f"No interpretation chain for aspect {aspect!r}. "
        f"Use one of: {', '.join(item.value for item in RecordAspect)}."
    )


def build_chains(
    aspects: tuple[RecordAspect, ...],
    services: AspectServices,
) -> dict[RecordAspect, InterpretationChain[VerbatimRecord, Any]]:
    """Build one chain per requested aspect, keeping request order."""
    return {aspect: build_chain(aspect, services) for aspect in aspects}
