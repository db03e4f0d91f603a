"""Deterministic unique key generation.

This module builds the composite identity string used to correlate a
record across repeated pipeline runs. The key is a pure function of its
inputs: the dataset id, the ordered term list, the record values, the
configured defaults and the whitespace policy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Mapping, Sequence

from core.constants import DEFAULT_KEY_DELIMITER, DEFAULT_STRICT_UNIQUE_KEYS
from core.errors import BiotraceUniqueKeyError
from core.logging_config import get_logger
from core.records import VerbatimRecord
from core.terms import Term, term_for_name
from lookups.metadata_store import DatasetMetadata

_LOGGER = get_logger(__name__)
_WHITESPACE_PATTERN = re.compile(r"\s+")


def generate_unique_key(
    dataset_id: str,
    record: VerbatimRecord,
    unique_terms: Sequence[Term],
    default_values: Mapping[str, str] | None = None,
    strip_spaces: bool = False,
    strict: bool = DEFAULT_STRICT_UNIQUE_KEYS,
    delimiter: str = DEFAULT_KEY_DELIMITER,
) -> str:
    """Build the unique key for one record.

    Missing, blank and literal ``"null"`` values fall back to the configured
    default for their term; terms with neither are left out of the key.

    Args:
        dataset_id: Dataset the record belongs to; always the first key part.
        record: Verbatim record supplying the values.
        unique_terms: Terms forming the key, in key order.
        default_values: Fallback values keyed by term simple name.
        strip_spaces: Remove all whitespace instead of trimming the ends.
        strict: Fail instead of returning ``""`` when every value is blank.
        delimiter: Separator between key parts.

    Returns:
        ``dataset_id`` and the non-blank values joined by ``delimiter``, or
        ``""`` in lenient mode when every value is blank.

    Raises:
        BiotraceUniqueKeyError: In strict mode when every value is blank.
    """
    defaults = default_values or {}
    key_parts: list[str] = []
    for term in unique_terms:
        value = record.value(term)
        if value is None:
            value = defaults.get(term.simple_name)
        if value is None or not value.strip():
            continue
        if strip_spaces:
            key_parts.append(_WHITESPACE_PATTERN.sub("", value))
        else:
            key_parts.append(value.strip())
    if key_parts:
        return delimiter.join([dataset_id, *key_parts])
    term_names = ",".join(term.simple_name for term in unique_terms)
    if strict:
        raise BiotraceUniqueKeyError(
            f"Unable to build unique key for record {record.id} in dataset {dataset_id}: "
            f"all unique terms [{term_names}] are empty. Populate at least one of them "
            "or configure a default value."
        )
    _LOGGER.warning(
        "unique_key_empty",
        dataset_id=dataset_id,
        record_id=record.id,
        unique_terms=term_names,
    )
    return ""


@dataclass(frozen=True)
class UniqueKeyConfig:
    """Unique key settings for one dataset.

    Attributes:
        dataset_id: Dataset identifier.
        unique_terms: Terms forming the key, in key order.
        default_values: Fallback values keyed by term simple name.
        strip_spaces: Remove all whitespace from values.
        strict: Fail when every value is blank.
        delimiter: Separator between key parts.
    """

    dataset_id: str
    unique_terms: tuple[Term, ...]
    default_values: Mapping[str, str] = field(default_factory=dict)
    strip_spaces: bool = False
    strict: bool = DEFAULT_STRICT_UNIQUE_KEYS
    delimiter: str = DEFAULT_KEY_DELIMITER

    @classmethod
    def from_metadata(
        cls,
        metadata: DatasetMetadata,
        strict: bool = DEFAULT_STRICT_UNIQUE_KEYS,
        delimiter: str = DEFAULT_KEY_DELIMITER,
    ) -> "UniqueKeyConfig":
        """Build key settings from dataset attribution metadata.

        Raises:
            BiotraceUniqueKeyError: If the dataset configures no unique terms.
        """
        if not metadata.unique_terms:
            raise BiotraceUniqueKeyError(
                f"No unique terms configured for dataset {metadata.dataset_id}. "
                "Add unique_key.terms to the dataset entry in the metadata store."
            )
        unique_terms = tuple(term_for_name(name) for name in metadata.unique_terms)
        _LOGGER.info(
            "unique_key_config_loaded",
            dataset_id=metadata.dataset_id,
            unique_terms=",".join(term.simple_name for term in unique_terms),
            strip_spaces=metadata.strip_spaces,
            default_values=",".join(
                f"{name}={value}" for name, value in metadata.default_values.items()
            ),
        )
        return cls(
            dataset_id=metadata.dataset_id,
            unique_terms=unique_terms,
            default_values=dict(metadata.default_values),
            strip_spaces=metadata.strip_spaces,
            strict=strict,
            delimiter=delimiter,
        )

    def key_for(self, record: VerbatimRecord) -> str:
        """Generate the unique key for ``record`` under these settings."""
        return generate_unique_key(
            self.dataset_id,
            record,
            self.unique_terms,
            default_values=self.default_values,
            strip_spaces=self.strip_spaces,
            strict=self.strict,
            delimiter=self.delimiter,
        )
