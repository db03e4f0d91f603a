"""File-to-file interpretation jobs.

This module wires the verbatim reader, the interpretation runner, the
identity minting and the record writers into the two batch jobs exposed
on the command line.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.config import BiotraceConfig
from core.constants import IDENTIFIERS_FILE_NAME
from core.errors import BiotraceConfigError
from core.logging_config import get_logger
from core.records import InterpretedRecord, RecordAspect
from identity.minting import mint_identifiers, read_known_identifiers, write_known_identifiers
from identity.unique_key import UniqueKeyConfig
from ingest.record_writer import write_aspect_records, write_unique_keys
from ingest.verbatim_reader import read_verbatim_records
from lookups.metadata_store import YamlMetadataStore
from pipeline.interpretation_runner import InterpretationOptions, InterpretationRunner

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class InterpretationJobResult:
    """Files and counts produced by an interpretation job.

    Attributes:
        output_paths: Written file per aspect.
        unique_keys_path: Written unique key file, if keys were requested.
        record_count: Records interpreted successfully.
        issue_counts: Issue totals by issue type.
    """

    output_paths: dict[RecordAspect, Path]
    unique_keys_path: Path | None
    record_count: int
    issue_counts: dict[str, int]


def run_interpretation_job(
    source_path: Path,
    output_dir: Path,
    options: InterpretationOptions,
    config: BiotraceConfig,
) -> InterpretationJobResult:
    """Interpret a verbatim JSONL source into per-aspect JSONL files.

    Args:
        source_path: Verbatim JSONL file or directory.
        output_dir: Directory receiving ``<aspect>.jsonl`` files.
        options: Interpretation options.
        config: Runtime configuration.

    Returns:
        Written paths and run counts.

    Raises:
        BiotraceError: If reading, lookups, writing or a record under the
            ``fail`` policy fails.
    """
    verbatim_records = read_verbatim_records(source_path)
    with InterpretationRunner(options, config) as runner:
        outcomes = runner.run(verbatim_records)
        issue_counts = runner.issue_counter.snapshot()
    output_paths: dict[RecordAspect, Path] = {}
    for aspect in options.aspects:
        aspect_records: list[InterpretedRecord] = [
            outcome.records[aspect] for outcome in outcomes if aspect in outcome.records
        ]
        output_paths[aspect] = write_aspect_records(output_dir, aspect, aspect_records)
    unique_keys_path = None
    if options.with_unique_keys:
        unique_keys_path = write_unique_keys(
            output_dir,
            [
                (outcome.record_id, outcome.unique_key)
                for outcome in outcomes
                if outcome.unique_key
            ],
        )
    return InterpretationJobResult(
        output_paths=output_paths,
        unique_keys_path=unique_keys_path,
        record_count=len(outcomes),
        issue_counts=issue_counts,
    )


def run_unique_key_job(
    source_path: Path,
    output_dir: Path,
    dataset_id: str,
    config: BiotraceConfig,
    identifiers_path: Path | None = None,
) -> Path:
    """Mint identifiers for a verbatim source against known identifiers.

    Args:
        source_path: Verbatim JSONL file or directory.
        output_dir: Directory receiving ``unique_keys.jsonl``.
        dataset_id: Dataset whose unique key configuration applies.
        config: Runtime configuration; needs a metadata path.
        identifiers_path: Known identifier CSV, read and then rewritten.
            Defaults to ``identifiers.csv`` in ``output_dir``.

    Returns:
        Path of the rewritten identifier CSV.

    Raises:
        BiotraceConfigError: If no metadata store is configured.
        BiotraceUniqueKeyError: If keys cannot be built in strict mode.
    """
    if config.metadata_path is None:
        raise BiotraceConfigError(
            "Unique key minting requires dataset metadata. "
            "Set BIOTRACE_METADATA_PATH or pass --metadata-path."
        )
    with YamlMetadataStore(config.metadata_path) as metadata_store:
        key_config = UniqueKeyConfig.from_metadata(
            metadata_store.get(dataset_id),
            strict=config.strict_unique_keys,
            delimiter=config.key_delimiter,
        )
    csv_path = identifiers_path or output_dir / IDENTIFIERS_FILE_NAME
    known = read_known_identifiers(csv_path)
    minted = mint_identifiers(read_verbatim_records(source_path), key_config, known)
    write_unique_keys(output_dir, [(identifier.id, identifier.unique_key) for identifier in minted])
    write_known_identifiers(csv_path, [*known.values(), *minted])
    _LOGGER.info(
        "unique_key_job_completed",
        dataset_id=dataset_id,
        known_count=len(known),
        minted_count=len(minted),
        identifiers_path=str(csv_path),
    )
    return csv_path
