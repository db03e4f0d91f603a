"""Verbatim record readers.

This module loads verbatim records from JSONL files. Each line holds one
record as ``{"id": ..., "coreTerms": {...}}``; term keys may be simple,
prefixed or qualified names and are normalized to qualified names.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from core.constants import ASPECT_FILE_SUFFIX, VERBATIM_ID_FIELD, VERBATIM_TERMS_FIELD
from core.errors import BiotraceIngestError
from core.records import VerbatimRecord
from core.terms import term_for_name


def read_verbatim_records(source_path: Path) -> list[VerbatimRecord]:
    """Load verbatim records from a JSONL file or a directory of them.

    Args:
        source_path: Input file, or directory searched recursively.

    Returns:
        Records in file order, files sorted by path.

    Raises:
        BiotraceIngestError: If the path is missing or a line is invalid.
    """
    return list(iter_verbatim_records(source_path))


def iter_verbatim_records(source_path: Path) -> Iterator[VerbatimRecord]:
    if not source_path.exists():
        raise BiotraceIngestError(
            f"Failed to read verbatim records at {source_path}: path does not exist. "
            "Provide an existing JSONL file or directory."
        )
    if source_path.is_file():
        yield from _read_jsonl_records(source_path)
        return
    for file_path in sorted(source_path.rglob(f"*{ASPECT_FILE_SUFFIX}")):
        if file_path.is_file():
            yield from _read_jsonl_records(file_path)


def _read_jsonl_records(file_path: Path) -> Iterator[VerbatimRecord]:
    with file_path.open(encoding="utf-8") as jsonl_file:
        for line_number, line in enumerate(jsonl_file, 1):
            if not line.strip():
                continue
            yield _parse_jsonl_line(file_path, line, line_number)


def _parse_jsonl_line(file_path: Path, line: str, line_number: int) -> VerbatimRecord:
    """Parse and validate one verbatim JSONL row.

    Raises:
        BiotraceIngestError: If the line is not a valid verbatim record.
    """
    location = f"{file_path}:{line_number}"
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise BiotraceIngestError(
            f"Failed to parse verbatim record at {location}: {error.msg}. "
            "Fix the JSON syntax and retry."
        ) from error
    if not isinstance(payload, dict):
        raise BiotraceIngestError(
            f"Invalid verbatim record at {location}: expected a JSON object per line."
        )
    record_id = payload.get(VERBATIM_ID_FIELD)
    if not isinstance(record_id, (str, int)) or not str(record_id).strip():
        raise BiotraceIngestError(
            f"Invalid verbatim record at {location}: expected non-empty field "
            f"'{VERBATIM_ID_FIELD}'. Add a record identifier and retry."
        )
    raw_terms = payload.get(VERBATIM_TERMS_FIELD, {})
    if not isinstance(raw_terms, dict):
        raise BiotraceIngestError(
            f"Invalid verbatim record at {location}: field '{VERBATIM_TERMS_FIELD}' "
            "must be an object of term names to values."
        )
    return VerbatimRecord(
        id=str(record_id).strip(),
        core_terms=_normalize_terms(raw_terms, location),
    )


def _normalize_terms(raw_terms: dict[str, Any], location: str) -> dict[str, str]:
    core_terms: dict[str, str] = {}
    for name, value in raw_terms.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            raise BiotraceIngestError(
                f"Invalid verbatim record at {location}: term '{name}' must hold a "
                "string value, not a nested structure."
            )
        core_terms[term_for_name(str(name)).qualified_name] = str(value)
    return core_terms
