"""YAML loading for lookup files.

This module reads and shape-checks the YAML documents behind the
file-backed vocabulary service and metadata store.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

import yaml

from core.errors import BiotraceLookupError


def load_yaml_mapping(file_path: Path, context: str) -> Mapping[str, object]:
    """Load a YAML file whose root must be a mapping.

    Args:
        file_path: YAML file path.
        context: Human-readable name of the file for error messages.

    Returns:
        Root mapping of the document.

    Raises:
        BiotraceLookupError: If the file is missing, unreadable or malformed.
    """
    resolved_path = file_path.expanduser().resolve()
    if not resolved_path.exists():
        raise BiotraceLookupError(
            f"{context} file does not exist at {resolved_path}. "
            "Provide a valid YAML file path."
        )
    try:
        payload = yaml.safe_load(resolved_path.read_text(encoding="utf-8"))
    except OSError as error:
        raise BiotraceLookupError(
            f"Failed to read {context} at {resolved_path}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise BiotraceLookupError(
            f"Failed to parse {context} at {resolved_path}: {error}. Fix YAML syntax and retry."
        ) from error
    return expect_mapping(payload, context)


def expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping: dict[str, object] = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise BiotraceLookupError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise BiotraceLookupError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def expect_sequence(value: object, context: str) -> Sequence[object]:
    if value is None:
        return ()
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise BiotraceLookupError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def expect_string(value: object, context: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    raise BiotraceLookupError(f"Invalid {context}: expected non-empty string.")


def optional_string(mapping: Mapping[str, object], field_name: str, context: str) -> str | None:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return None
    if isinstance(raw_value, (str, int, float)) and not isinstance(raw_value, bool):
        normalized_value = str(raw_value).strip()
        return normalized_value if normalized_value else None
    raise BiotraceLookupError(f"Invalid {context}: field '{field_name}' must be a string.")
