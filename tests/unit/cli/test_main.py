"""Unit tests for CLI command handling."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cli.main import build_parser, main


def _write_source(path: Path) -> Path:
    rows = [
        {"id": "r1", "coreTerms": {"catalogNumber": "A-1", "continent": "Europe"}},
        {"id": "r2", "coreTerms": {"catalogNumber": "B-2", "continent": "Atlantis"}},
    ]
    path.write_text("".join(json.dumps(row) + "\n" for row in rows), encoding="utf-8")
    return path


def test_cli_interpret_prints_outputs_and_issue_counts(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], vocabulary_path: Path
) -> None:
    """CLI interpret should write the requested aspects and report issues."""
    source = _write_source(tmp_path / "verbatim.jsonl")
    output_dir = tmp_path / "out"

    exit_code = main(
        [
            "--vocabulary-path",
            str(vocabulary_path),
            "--workers",
            "2",
            "interpret",
            str(source),
            "--dataset",
            "DS1",
            "--output-dir",
            str(output_dir),
            "--aspect",
            "location",
        ]
    )
    output_lines = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert f"location={output_dir / 'location.jsonl'}" in output_lines
    assert "records=2" in output_lines and "issue.PARSE_ERROR=1" in output_lines
    assert not (output_dir / "basic.jsonl").exists()


def test_cli_unique_keys_writes_identifier_csv(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], metadata_path: Path
) -> None:
    """CLI unique-keys should print the identifier file path."""
    source = _write_source(tmp_path / "verbatim.jsonl")
    output_dir = tmp_path / "out"

    exit_code = main(
        [
            "--metadata-path",
            str(metadata_path),
            "unique-keys",
            str(source),
            "--dataset",
            "DS1",
            "--output-dir",
            str(output_dir),
        ]
    )
    printed_path = Path(capsys.readouterr().out.strip())

    assert exit_code == 0 and printed_path == output_dir / "identifiers.csv"
    assert printed_path.read_text(encoding="utf-8").count("DS1|") == 2


def test_cli_reports_configuration_errors(tmp_path: Path) -> None:
    """Biotrace errors should exit with status 1 instead of a traceback."""
    source = _write_source(tmp_path / "verbatim.jsonl")

    with pytest.raises(SystemExit) as exit_info:
        main(["unique-keys", str(source), "--dataset", "DS1", "--output-dir", str(tmp_path)])

    assert exit_info.value.code == 1


def test_parser_rejects_unknown_aspect() -> None:
    """Aspect choices are limited to known aspects."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(
            ["interpret", "in.jsonl", "--dataset", "DS1", "--output-dir", "out", "--aspect", "dna"]
        )
