"""Unit tests for the YAML metadata store."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import BiotraceLookupError
from lookups.metadata_store import DatasetMetadata, YamlMetadataStore


def test_get_returns_configured_dataset(metadata_path: Path) -> None:
    """Configured datasets expose attribution and key settings."""
    with YamlMetadataStore(metadata_path) as store:
        metadata = store.get("DS1")

    assert metadata.title == "Peruvian Plant Survey"
    assert metadata.unique_terms == ("catalogNumber", "dwc:country")
    assert metadata.strip_spaces is False
    assert dict(metadata.default_values) == {"country": "Peru"}


def test_unknown_dataset_gets_empty_metadata(metadata_path: Path) -> None:
    """Unknown datasets are not an error."""
    store = YamlMetadataStore(metadata_path)

    assert store.get("DS404") == DatasetMetadata.empty("DS404")


def test_closed_store_refuses_reads(metadata_path: Path) -> None:
    """Reads after close fail loudly."""
    store = YamlMetadataStore(metadata_path)
    store.close()

    assert store.closed
    with pytest.raises(BiotraceLookupError):
        store.get("DS1")


def test_malformed_store_fails(tmp_path: Path) -> None:
    """Invalid YAML shapes are fatal."""
    metadata_path = tmp_path / "metadata.yaml"
    metadata_path.write_text("datasets:\n  DS1:\n    unique_key:\n      strip_spaces: maybe\n")

    with pytest.raises(BiotraceLookupError):
        YamlMetadataStore(metadata_path)
