"""Metadata aspect interpretation.

This module attaches dataset attribution from the metadata store to
each record of that dataset.
"""

from __future__ import annotations

from core.records import MetadataRecord, VerbatimRecord
from interpretation.chain import InterpretationChain, Step, apply_field_result
from interpretation.trace import Interpretation
from interpreters.license import interpret_license
from lookups.metadata_store import DatasetMetadata


def attribution_step(metadata: DatasetMetadata) -> Step[VerbatimRecord, MetadataRecord]:
    def step(source: VerbatimRecord, target: MetadataRecord) -> Interpretation[None]:
        target.dataset_id = metadata.dataset_id
        target.dataset_title = metadata.title
        target.publisher = metadata.publisher
        if metadata.license is None:
            return Interpretation.of(None)
        return apply_field_result(target, "license", interpret_license(metadata.license))

    return step


def build_metadata_chain(
    metadata: DatasetMetadata | None,
) -> InterpretationChain[VerbatimRecord, MetadataRecord]:
    """Build the chain populating ``MetadataRecord``.

    Without dataset metadata the aspect does not apply.
    """
    chain = InterpretationChain.to(MetadataRecord.empty).when(lambda _: metadata is not None)
    if metadata is None:
        return chain
    return chain.via(attribution_step(metadata))
