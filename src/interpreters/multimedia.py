"""Multimedia interpretation.

This module extracts media URIs from ``dwc:associatedMedia``. Each
rejected entry is dropped with its own issue.
"""

from __future__ import annotations

from core.records import MultimediaRecord, VerbatimRecord
from core.terms import ASSOCIATED_MEDIA
from interpretation.chain import InterpretationChain
from interpretation.issues import IssueType
from interpretation.result import Ok
from interpretation.trace import Interpretation
from interpreters.parsers import parse_uri, split_list


def interpret_associated_media(
    source: VerbatimRecord,
    target: MultimediaRecord,
) -> Interpretation[None]:
    interpretation: Interpretation[None] = Interpretation.of(None)
    raw_value = source.value(ASSOCIATED_MEDIA)
    if raw_value is None:
        return interpretation
    for entry in split_list(raw_value):
        parsed = parse_uri(entry, IssueType.MULTIMEDIA_URI_INVALID, "media URI")
        if isinstance(parsed, Ok):
            target.media.append(parsed.value)
            continue
        for lineage in parsed.lineages:
            target.issues.add_lineage(lineage)
        for issue in parsed.issues:
            interpretation = interpretation.with_issue("media", issue)
    return interpretation


def _has_associated_media(source: VerbatimRecord) -> bool:
    return source.value(ASSOCIATED_MEDIA) is not None


def build_multimedia_chain() -> InterpretationChain[VerbatimRecord, MultimediaRecord]:
    """Build the chain populating ``MultimediaRecord``."""
    return (
        InterpretationChain.to(MultimediaRecord.empty)
        .when(_has_associated_media)
        .via(interpret_associated_media)
    )
