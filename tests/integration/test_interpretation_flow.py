"""Integration tests for the interpretation workflow."""

from __future__ import annotations

import json
from pathlib import Path

from core.config import BiotraceConfig
from core.records import RecordAspect
from identity.minting import read_known_identifiers
from pipeline.interpretation_runner import InterpretationOptions
from pipeline.jobs import run_interpretation_job, run_unique_key_job


def test_interpret_and_mint_flow(tmp_path: Path, vocabulary_path: Path, metadata_path: Path) -> None:
    """End-to-end flow should interpret every aspect and mint stable identities."""
    source = tmp_path / "verbatim.jsonl"
    rows = [
        {
            "id": "occ-1",
            "coreTerms": {
                "catalogNumber": "MHN-001",
                "basisOfRecord": "PreservedSpecimen",
                "lifeStage": "imago",
                "eventDate": "2004-05-12",
                "scientificName": "Puma concolor",
                "decimalLatitude": "-13.5",
                "decimalLongitude": "-71.9",
                "associatedMedia": "https://example.org/puma.jpg",
            },
        },
        {
            "id": "occ-2",
            "coreTerms": {
                "catalogNumber": "MHN-002",
                "eventDate": "2004-13-01",
                "country": "Bolivia",
            },
        },
    ]
    source.write_text("".join(json.dumps(row) + "\n" for row in rows), encoding="utf-8")
    config = BiotraceConfig(
        vocabulary_path=vocabulary_path,
        metadata_path=metadata_path,
        worker_count=4,
        key_delimiter="|",
        strict_unique_keys=True,
    )
    options = InterpretationOptions(dataset_id="DS1", with_unique_keys=True)

    result = run_interpretation_job(source, tmp_path / "out", options, config)
    csv_path = run_unique_key_job(source, tmp_path / "out", "DS1", config)

    temporal_rows = [
        json.loads(line)
        for line in result.output_paths[RecordAspect.TEMPORAL].read_text().splitlines()
    ]
    basic_row = json.loads(result.output_paths[RecordAspect.BASIC].read_text().splitlines()[0])
    media_rows = result.output_paths[RecordAspect.MULTIMEDIA].read_text().splitlines()
    known = read_known_identifiers(csv_path)
    assert result.record_count == 2
    assert temporal_rows[0]["year"] == 2004 and temporal_rows[1]["event_date"] is None
    assert temporal_rows[1]["issues"][0]["issue_type"] == "RECORDED_DATE_INVALID"
    assert basic_row["life_stage"] == {"concept": "Adult", "lineage": ["Organism", "Adult"]}
    assert len(media_rows) == 1
    assert set(known) == {"DS1|MHN-001|Peru", "DS1|MHN-002|Bolivia"}
