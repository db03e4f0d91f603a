"""Interpreted record writers.

This module persists interpreted records as one JSONL file per aspect
and unique key rows as ``unique_keys.jsonl``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Sequence

from core.constants import ASPECT_FILE_SUFFIX, UNIQUE_KEYS_FILE_NAME
from core.errors import BiotraceIngestError
from core.records import InterpretedRecord, RecordAspect, record_to_payload


def aspect_output_path(output_dir: Path, aspect: RecordAspect) -> Path:
    return output_dir / f"{aspect.value}{ASPECT_FILE_SUFFIX}"


def write_aspect_records(
    output_dir: Path,
    aspect: RecordAspect,
    records: Sequence[InterpretedRecord],
) -> Path:
    """Write interpreted records of one aspect to JSONL.

    Args:
        output_dir: Output directory, created if missing.
        aspect: Aspect the records belong to.
        records: Records to serialize.

    Returns:
        Path of the written file.

    Raises:
        BiotraceIngestError: If the file cannot be written.
    """
    output_path = aspect_output_path(output_dir, aspect)
    lines = [json.dumps(record_to_payload(record), sort_keys=True) for record in records]
    _write_lines(output_path, lines)
    return output_path


def write_unique_keys(output_dir: Path, keys: Iterable[tuple[str, str]]) -> Path:
    """Write ``(record id, unique key)`` rows to ``unique_keys.jsonl``."""
    output_path = output_dir / UNIQUE_KEYS_FILE_NAME
    lines = [
        json.dumps({"id": record_id, "unique_key": unique_key}, sort_keys=True)
        for record_id, unique_key in keys
    ]
    _write_lines(output_path, lines)
    return output_path


def _write_lines(output_path: Path, lines: list[str]) -> None:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    except OSError as error:
        raise BiotraceIngestError(
            f"Failed to write {output_path}: {error}. "
            "Check that the output directory is writable."
        ) from error
