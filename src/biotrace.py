"""Public SDK surface for Biotrace.

This module provides a stable import path for library users.
It re-exports the interpretation runner, jobs and typed models.
"""

from __future__ import annotations

from core.config import BiotraceConfig
from core.records import RecordAspect, VerbatimRecord
from identity.minting import UuidRecord, mint_identifiers
from identity.unique_key import UniqueKeyConfig, generate_unique_key
from interpretation.chain import InterpretationChain
from interpretation.trace import Interpretation, Trace
from interpreters.aspects import AspectServices, build_chain
from interpreters.vocabulary import UnmatchedPolicy, VocabularySupport
from pipeline.interpretation_runner import (
    InterpretationOptions,
    InterpretationRunner,
    RecordOutcome,
)
from pipeline.jobs import run_interpretation_job, run_unique_key_job

__all__ = [
    "AspectServices",
    "BiotraceConfig",
    "Interpretation",
    "InterpretationChain",
    "InterpretationOptions",
    "InterpretationRunner",
    "RecordAspect",
    "RecordOutcome",
    "Trace",
    "UniqueKeyConfig",
    "UnmatchedPolicy",
    "UuidRecord",
    "VerbatimRecord",
    "VocabularySupport",
    "build_chain",
    "generate_unique_key",
    "mint_identifiers",
    "run_interpretation_job",
    "run_unique_key_job",
]
