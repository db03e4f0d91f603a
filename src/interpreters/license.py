"""Licence interpretation.

This module maps verbatim licence statements onto the closed set of
Creative Commons licences accepted for occurrence data.
"""

from __future__ import annotations

import re
from enum import Enum

from interpretation.issues import IssueType
from interpretation.result import FieldResult, Ok, failed_to_null
from interpreters.parsers import normalize_key


class License(Enum):
    """Accepted licences and their legal code URLs."""

    CC0_1_0 = "http://creativecommons.org/publicdomain/zero/1.0/legalcode"
    CC_BY_4_0 = "http://creativecommons.org/licenses/by/4.0/legalcode"
    CC_BY_NC_4_0 = "http://creativecommons.org/licenses/by-nc/4.0/legalcode"


_UNSUPPORTED_MARKERS = ("bysa", "bynd", "byncsa", "byncnd", "sharealike", "noderiv")
_CC0_MARKERS = ("cc0", "publicdomainzero")
_CC_BY_NC_PATTERN = re.compile(
    r"(?:ccbync|licensesbync|creativecommonsattributionnoncommercial)(\d{0,2})"
)
_CC_BY_PATTERN = re.compile(r"(?:ccby|licensesby|creativecommonsattribution)(\d{0,2})")
# Version digits after normalization; unversioned statements mean the current one.
_SUPPORTED_VERSIONS = ("", "4", "40")


def parse_license(raw_value: str) -> License | None:
    """Return the licence named by a statement, title, code or URL."""
    key = normalize_key(raw_value)
    if not key or any(marker in key for marker in _UNSUPPORTED_MARKERS):
        return None
    if any(marker in key for marker in _CC0_MARKERS):
        return License.CC0_1_0
    for pattern, license_value in (
        (_CC_BY_NC_PATTERN, License.CC_BY_NC_4_0),
        (_CC_BY_PATTERN, License.CC_BY_4_0),
    ):
        match = pattern.search(key)
        if match:
            return license_value if match.group(1) in _SUPPORTED_VERSIONS else None
    return None


def interpret_license(raw_value: str) -> FieldResult[str]:
    license_value = parse_license(raw_value)
    if license_value is not None:
        return Ok(license_value.name)
    return failed_to_null(
        IssueType.LICENSE_INVALID,
        f"Could not parse licence because '{raw_value.strip()}' is not a supported licence",
        "Unsupported licence, setting it to null",
    )
