"""Biotrace exception hierarchy.

This module defines the fatal error channel. Data-quality problems are
recorded as issues on interpreted records and never raised; these types
cover configuration, lookup and identity failures only.
"""

from __future__ import annotations


class BiotraceError(Exception):
    """Base exception for all Biotrace failures."""


class BiotraceConfigError(BiotraceError):
    """Raised for invalid runtime configuration."""


class BiotraceIngestError(BiotraceError):
    """Raised for verbatim source parsing and output failures."""


class BiotraceLookupError(BiotraceError):
    """Raised when a vocabulary or metadata lookup cannot be served."""


class BiotraceUniqueKeyError(BiotraceError):
    """Raised when a record identity key cannot be built."""


class BiotraceInterpretationError(BiotraceError):
    """Raised for misconfigured interpretation chains."""
