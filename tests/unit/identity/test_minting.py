"""Unit tests for UUID minting."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import BiotraceIngestError
from core.records import VerbatimRecord
from core.terms import CATALOG_NUMBER
from identity.minting import (
    UuidRecord,
    mint_identifiers,
    read_known_identifiers,
    write_known_identifiers,
)
from identity.unique_key import UniqueKeyConfig


def _record(record_id: str, catalog_number: str) -> VerbatimRecord:
    return VerbatimRecord(id=record_id, core_terms={CATALOG_NUMBER.qualified_name: catalog_number})


def _config(strict: bool = True) -> UniqueKeyConfig:
    return UniqueKeyConfig(dataset_id="DS1", unique_terms=(CATALOG_NUMBER,), strict=strict)


def test_known_keys_keep_their_uuid_and_first_loaded() -> None:
    """Previously issued keys are reused verbatim."""
    known = {
        "DS1|A-1": UuidRecord(id="", unique_key="DS1|A-1", uuid="uuid-a", first_loaded=1000)
    }

    minted = mint_identifiers([_record("r1", "A-1"), _record("r2", "B-2")], _config(), known)

    assert minted[0] == UuidRecord(id="r1", unique_key="DS1|A-1", uuid="uuid-a", first_loaded=1000)
    assert minted[1].unique_key == "DS1|B-2" and minted[1].uuid != "uuid-a"


def test_duplicate_keys_in_batch_share_uuid() -> None:
    """Records with the same key get the same identity."""
    minted = mint_identifiers([_record("r1", "A-1"), _record("r2", " A-1 ")], _config())

    assert minted[0].uuid == minted[1].uuid
    assert [identifier.id for identifier in minted] == ["r1", "r2"]


def test_lenient_mode_skips_records_without_key() -> None:
    """Empty keys get no identity in lenient mode."""
    minted = mint_identifiers([_record("r1", " "), _record("r2", "B-2")], _config(strict=False))

    assert [identifier.id for identifier in minted] == ["r2"]


def test_null_literal_records_do_not_share_an_identity() -> None:
    """Records keyed only by "null" values are skipped rather than merged."""
    records = [_record("r1", "null"), _record("r2", "NULL"), _record("r3", "B-2")]

    minted = mint_identifiers(records, _config(strict=False))

    assert [identifier.id for identifier in minted] == ["r3"]


def test_identifier_csv_round_trip(tmp_path: Path) -> None:
    """Written identifiers load back keyed by unique key."""
    csv_path = tmp_path / "ids" / "identifiers.csv"
    identifiers = [
        UuidRecord(id="r2", unique_key="DS1|B-2", uuid="uuid-b", first_loaded=2000),
        UuidRecord(id="r1", unique_key="DS1|A-1", uuid="uuid-a", first_loaded=1000),
    ]

    write_known_identifiers(csv_path, identifiers)
    known = read_known_identifiers(csv_path)

    assert csv_path.read_text(encoding="utf-8").splitlines()[0] == "uuid,unique_key,first_loaded"
    assert known["DS1|A-1"].uuid == "uuid-a" and known["DS1|B-2"].first_loaded == 2000


def test_missing_identifier_file_means_no_known_identifiers(tmp_path: Path) -> None:
    """A first run starts with no identifiers."""
    assert read_known_identifiers(tmp_path / "absent.csv") == {}


def test_malformed_identifier_row_fails(tmp_path: Path) -> None:
    """Rows without an integer first_loaded are rejected."""
    csv_path = tmp_path / "identifiers.csv"
    csv_path.write_text("uuid,unique_key,first_loaded\nuuid-a,DS1|A-1,yesterday\n", encoding="utf-8")

    with pytest.raises(BiotraceIngestError):
        read_known_identifiers(csv_path)
