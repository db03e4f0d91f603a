"""Runtime configuration model for Biotrace.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_KEY_DELIMITER,
    DEFAULT_STRICT_UNIQUE_KEYS,
    DEFAULT_WORKER_COUNT,
)
from core.errors import BiotraceConfigError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class BiotraceConfig:
    """Validated runtime configuration.

    Attributes:
        vocabulary_path: Optional YAML vocabulary file; vocabulary
            enrichment is disabled when unset.
        metadata_path: Optional YAML attribution metadata file.
        worker_count: Number of interpretation worker threads.
        key_delimiter: Delimiter joining unique key parts.
        strict_unique_keys: Fail records whose unique terms are all empty.
    """

    vocabulary_path: Path | None
    metadata_path: Path | None
    worker_count: int
    key_delimiter: str
    strict_unique_keys: bool

    @classmethod
    def from_env(cls) -> "BiotraceConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            BiotraceConfigError: If environment values are invalid.
        """
        worker_value = os.getenv("BIOTRACE_WORKERS", str(DEFAULT_WORKER_COUNT))
        strict_value = os.getenv(
            "BIOTRACE_STRICT_UNIQUE_KEYS", str(DEFAULT_STRICT_UNIQUE_KEYS)
        )
        return cls(
            vocabulary_path=_optional_path(os.getenv("BIOTRACE_VOCABULARY_PATH")),
            metadata_path=_optional_path(os.getenv("BIOTRACE_METADATA_PATH")),
            worker_count=_parse_worker_count(worker_value),
            key_delimiter=_parse_delimiter(
                os.getenv("BIOTRACE_KEY_DELIMITER", DEFAULT_KEY_DELIMITER)
            ),
            strict_unique_keys=_parse_bool("BIOTRACE_STRICT_UNIQUE_KEYS", strict_value),
        )


def _optional_path(raw_value: str | None) -> Path | None:
    if raw_value is None or not raw_value.strip():
        return None
    return Path(raw_value.strip()).expanduser().resolve()


def _parse_worker_count(raw_value: str) -> int:
    """Parse the worker count environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive worker count.

    Raises:
        BiotraceConfigError: If value is not a positive integer.
    """
    try:
        worker_count = int(raw_value)
    except ValueError as error:
        raise BiotraceConfigError(
            "Invalid BIOTRACE_WORKERS value: "
            f"expected integer, got '{raw_value}'. "
            "Set BIOTRACE_WORKERS to a positive number."
        ) from error
    if worker_count < 1:
        raise BiotraceConfigError(
            f"Invalid BIOTRACE_WORKERS value {worker_count}: must be at least 1."
        )
    return worker_count


def _parse_delimiter(raw_value: str) -> str:
    if not raw_value:
        raise BiotraceConfigError(
            "Invalid BIOTRACE_KEY_DELIMITER value: delimiter must not be empty."
        )
    return raw_value


def _parse_bool(variable_name: str, raw_value: str) -> bool:
    normalized_value = raw_value.strip().lower()
    if normalized_value in _TRUE_VALUES:
        return True
    if normalized_value in _FALSE_VALUES:
        return False
    raise BiotraceConfigError(
        f"Invalid {variable_name} value '{raw_value}': expected true or false."
    )
