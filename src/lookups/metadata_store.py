"""Dataset attribution metadata store.

This module serves per-dataset attribution and unique-key configuration
from a YAML file loaded once per worker. Unknown datasets get empty
metadata; an unreadable store is fatal.

YAML layout::

    datasets:
      dr603:
        title: Australian Museum Mammals
        publisher: Australian Museum
        license: CC-BY 4.0
        unique_key:
          terms: [institutionCode, collectionCode, catalogNumber]
          strip_spaces: false
        default_values:
          institutionCode: AM
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from core.errors import BiotraceLookupError
from core.logging_config import get_logger
from lookups.yaml_payload import (
    expect_mapping,
    expect_sequence,
    expect_string,
    load_yaml_mapping,
    optional_string,
)

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class DatasetMetadata:
    """Attribution and identity configuration for one dataset.

    Attributes:
        dataset_id: Dataset identifier.
        title: Dataset title.
        publisher: Publishing organisation.
        license: Verbatim dataset licence.
        unique_terms: Ordered term names forming the record unique key.
        strip_spaces: Remove all whitespace from unique key values.
        default_values: Fallback values keyed by term simple name.
    """

    dataset_id: str
    title: str | None = None
    publisher: str | None = None
    license: str | None = None
    unique_terms: tuple[str, ...] = ()
    strip_spaces: bool = False
    default_values: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def empty(cls, dataset_id: str) -> "DatasetMetadata":
        return cls(dataset_id=dataset_id)


class YamlMetadataStore:
    """Key-value metadata store keyed by dataset id."""

    def __init__(self, metadata_path: Path) -> None:
        root_mapping = load_yaml_mapping(metadata_path, "metadata store")
        datasets_mapping = expect_mapping(root_mapping.get("datasets", {}), "datasets")
        self._metadata = {
            dataset_id: _parse_dataset(dataset_id, payload)
            for dataset_id, payload in datasets_mapping.items()
        }
        self._closed = False

    def get(self, dataset_id: str) -> DatasetMetadata:
        """Return metadata for ``dataset_id``.

        Args:
            dataset_id: Dataset identifier.

        Returns:
            Stored metadata, or empty metadata for unknown datasets.

        Raises:
            BiotraceLookupError: If the store was already closed.
        """
        if self._closed:
            raise BiotraceLookupError(
                "Metadata store is closed. Acquire a new store for this worker."
            )
        metadata = self._metadata.get(dataset_id.strip())
        if metadata is None:
            _LOGGER.warning("dataset_metadata_missing", dataset_id=dataset_id)
            return DatasetMetadata.empty(dataset_id)
        return metadata

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "YamlMetadataStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _parse_dataset(dataset_id: str, payload: object) -> DatasetMetadata:
    context = f"datasets.{dataset_id}"
    dataset_mapping = expect_mapping(payload or {}, context)
    unique_key_mapping = expect_mapping(
        dataset_mapping.get("unique_key") or {}, f"{context}.unique_key"
    )
    unique_terms = tuple(
        expect_string(term_name, f"{context}.unique_key.terms")
        for term_name in expect_sequence(
            unique_key_mapping.get("terms"), f"{context}.unique_key.terms"
        )
    )
    strip_spaces = unique_key_mapping.get("strip_spaces", False)
    if not isinstance(strip_spaces, bool):
        raise BiotraceLookupError(
            f"Invalid {context}.unique_key: field 'strip_spaces' must be true or false."
        )
    default_values_mapping = expect_mapping(
        dataset_mapping.get("default_values") or {}, f"{context}.default_values"
    )
    default_values = {
        term_name: str(value)
        for term_name, value in default_values_mapping.items()
        if value is not None
    }
    return DatasetMetadata(
        dataset_id=dataset_id,
        title=optional_string(dataset_mapping, "title", context),
        publisher=optional_string(dataset_mapping, "publisher", context),
        license=optional_string(dataset_mapping, "license", context),
        unique_terms=unique_terms,
        strip_spaces=strip_spaces,
        default_values=default_values,
    )
