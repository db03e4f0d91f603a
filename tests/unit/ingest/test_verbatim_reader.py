"""Unit tests for verbatim record reading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.errors import BiotraceIngestError
from core.terms import COUNTRY, INDIVIDUAL_COUNT, LOCALITY
from ingest.verbatim_reader import read_verbatim_records


def _write_jsonl(path: Path, rows: list[object]) -> Path:
    path.write_text("\n".join(json.dumps(row) for row in rows) + "\n", encoding="utf-8")
    return path


def test_reader_normalizes_term_names(tmp_path: Path) -> None:
    """Simple, prefixed and qualified names map to qualified keys."""
    source = _write_jsonl(
        tmp_path / "records.jsonl",
        [
            {
                "id": "r1",
                "coreTerms": {
                    "country": "Peru",
                    "dwc:locality": "La Paz",
                    "http://rs.tdwg.org/dwc/terms/individualCount": 3,
                    "sex": None,
                },
            }
        ],
    )

    records = read_verbatim_records(source)

    assert len(records) == 1 and records[0].id == "r1"
    assert records[0].core_terms == {
        COUNTRY.qualified_name: "Peru",
        LOCALITY.qualified_name: "La Paz",
        INDIVIDUAL_COUNT.qualified_name: "3",
    }


def test_reader_collects_directory_files_in_order(tmp_path: Path) -> None:
    """Directories are read recursively in sorted path order."""
    (tmp_path / "b").mkdir()
    _write_jsonl(tmp_path / "a.jsonl", [{"id": "first", "coreTerms": {}}])
    _write_jsonl(tmp_path / "b" / "c.jsonl", [{"id": "second", "coreTerms": {}}])
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    records = read_verbatim_records(tmp_path)

    assert [record.id for record in records] == ["first", "second"]


def test_reader_reports_file_and_line_for_bad_json(tmp_path: Path) -> None:
    """Malformed lines name their location."""
    source = tmp_path / "bad.jsonl"
    source.write_text('{"id": "r1", "coreTerms": {}}\n{oops\n', encoding="utf-8")

    with pytest.raises(BiotraceIngestError) as error_info:
        read_verbatim_records(source)

    assert f"{source}:2" in str(error_info.value)


def test_reader_requires_record_id(tmp_path: Path) -> None:
    """Rows without an identifier are rejected."""
    source = _write_jsonl(tmp_path / "no_id.jsonl", [{"coreTerms": {"country": "Peru"}}])

    with pytest.raises(BiotraceIngestError):
        read_verbatim_records(source)


def test_reader_rejects_nested_term_values(tmp_path: Path) -> None:
    """Term values must be scalars."""
    source = _write_jsonl(
        tmp_path / "nested.jsonl", [{"id": "r1", "coreTerms": {"country": {"name": "Peru"}}}]
    )

    with pytest.raises(BiotraceIngestError):
        read_verbatim_records(source)


def test_reader_fails_for_missing_path(tmp_path: Path) -> None:
    """Missing sources are reported."""
    with pytest.raises(BiotraceIngestError):
        read_verbatim_records(tmp_path / "does-not-exist")
