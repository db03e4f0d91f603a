"""UUID minting against previously issued identifiers.

This module assigns a stable UUID to each unique key. A key seen in an
earlier run keeps its UUID and first-loaded time; a new key gets a fresh
UUID. Known identifiers persist as CSV rows of
``uuid,unique_key,first_loaded``.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
import time
from typing import Iterable, Mapping
import uuid

from core.errors import BiotraceIngestError
from core.logging_config import get_logger
from core.records import VerbatimRecord
from identity.unique_key import UniqueKeyConfig

_LOGGER = get_logger(__name__)
_CSV_COLUMNS = ("uuid", "unique_key", "first_loaded")


@dataclass(frozen=True)
class UuidRecord:
    """Identity assigned to one verbatim record.

    Attributes:
        id: Verbatim record identifier.
        unique_key: Composite unique key.
        uuid: Stable identifier for the unique key.
        first_loaded: Epoch milliseconds when the key was first seen.
    """

    id: str
    unique_key: str
    uuid: str
    first_loaded: int


def mint_identifiers(
    records: Iterable[VerbatimRecord],
    key_config: UniqueKeyConfig,
    known: Mapping[str, UuidRecord] | None = None,
) -> list[UuidRecord]:
    """Assign UUIDs to records by unique key.

    Records whose key is empty (lenient mode) get no identity and are
    left out of the result. Duplicate keys within ``records`` share one
    UUID.

    Args:
        records: Verbatim records to identify.
        key_config: Unique key settings for the dataset.
        known: Previously issued identities keyed by unique key.

    Returns:
        One ``UuidRecord`` per record with a non-empty key, in input order.

    Raises:
        BiotraceUniqueKeyError: In strict mode when a key cannot be built.
    """
    issued: dict[str, UuidRecord] = dict(known or {})
    seen_in_batch: set[str] = set()
    minted: list[UuidRecord] = []
    duplicate_count = 0
    skipped_count = 0
    for record in records:
        unique_key = key_config.key_for(record)
        if not unique_key:
            skipped_count += 1
            continue
        if unique_key in seen_in_batch:
            duplicate_count += 1
            _LOGGER.warning(
                "unique_key_duplicate",
                dataset_id=key_config.dataset_id,
                record_id=record.id,
                unique_key=unique_key,
            )
        seen_in_batch.add(unique_key)
        previous = issued.get(unique_key)
        if previous is None:
            previous = UuidRecord(
                id=record.id,
                unique_key=unique_key,
                uuid=str(uuid.uuid4()),
                first_loaded=int(time.time() * 1000),
            )
            issued[unique_key] = previous
        minted.append(
            UuidRecord(
                id=record.id,
                unique_key=unique_key,
                uuid=previous.uuid,
                first_loaded=previous.first_loaded,
            )
        )
    _LOGGER.info(
        "identifiers_minted",
        dataset_id=key_config.dataset_id,
        minted_count=len(minted),
        duplicate_count=duplicate_count,
        skipped_count=skipped_count,
    )
    return minted


def read_known_identifiers(csv_path: Path) -> dict[str, UuidRecord]:
    """Load previously issued identities keyed by unique key.

    A missing file means no identities were issued yet.

    Raises:
        BiotraceIngestError: If a row is malformed.
    """
    if not csv_path.exists():
        return {}
    known: dict[str, UuidRecord] = {}
    with csv_path.open(encoding="utf-8", newline="") as csv_file:
        for line_number, row in enumerate(csv.DictReader(csv_file), 2):
            known_record = _parse_identifier_row(csv_path, row, line_number)
            known[known_record.unique_key] = known_record
    return known


def _parse_identifier_row(csv_path: Path, row: dict[str, str], line_number: int) -> UuidRecord:
    uuid_value = (row.get("uuid") or "").strip()
    unique_key = row.get("unique_key") or ""
    first_loaded = (row.get("first_loaded") or "").strip()
    if not uuid_value or not unique_key or not first_loaded.isdigit():
        raise BiotraceIngestError(
            f"Invalid identifier row at {csv_path}:{line_number}: expected columns "
            f"{','.join(_CSV_COLUMNS)} with an integer first_loaded. Fix or remove the row."
        )
    return UuidRecord(
        id="",
        unique_key=unique_key,
        uuid=uuid_value,
        first_loaded=int(first_loaded),
    )


def write_known_identifiers(csv_path: Path, identifiers: Iterable[UuidRecord]) -> None:
    """Write issued identities, one row per unique key, sorted by key."""
    by_key = {identifier.unique_key: identifier for identifier in identifiers}
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    with csv_path.open("w", encoding="utf-8", newline="") as csv_file:
        writer = csv.writer(csv_file)
        writer.writerow(_CSV_COLUMNS)
        for unique_key in sorted(by_key):
            identifier = by_key[unique_key]
            writer.writerow([identifier.uuid, identifier.unique_key, identifier.first_loaded])
