"""Core constants used across Biotrace modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_WORKER_COUNT = 4
DEFAULT_KEY_DELIMITER = "|"
DEFAULT_STRICT_UNIQUE_KEYS = True
UNLIKELY_YEAR_FLOOR = 1600
MAX_DAY_OF_YEAR = 366
VERBATIM_ID_FIELD = "id"
VERBATIM_TERMS_FIELD = "coreTerms"
UNIQUE_KEYS_FILE_NAME = "unique_keys.jsonl"
IDENTIFIERS_FILE_NAME = "identifiers.csv"
ASPECT_FILE_SUFFIX = ".jsonl"
LIST_VALUE_DELIMITERS = ("|", ";")
ERROR_POLICY_SKIP = "skip"
ERROR_POLICY_FAIL = "fail"
SUPPORTED_ERROR_POLICIES = (ERROR_POLICY_SKIP, ERROR_POLICY_FAIL)
