"""ephemstore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each codec and ingest layer raises a specific error type for debuggability.
"""

from __future__ import annotations


class EphemError(Exception):
    """Base exception for all ephemstore failures."""


class EphemInvalidArgumentError(EphemError):
    """Raised for missing or empty required input."""


class EphemIOError(EphemError):
    """Raised when a file or stream cannot be opened, fully written, or fully read."""


class EphemFormatError(EphemError):
    """Raised for structurally invalid encoded input."""


class EphemMemoryError(EphemError):
    """Raised when decode cannot allocate storage for declared counts."""


class EphemConfigError(EphemError):
    """Raised for invalid runtime configuration or request specs."""


class EphemSourceError(EphemError):
    """Raised when the external ephemeris source cannot be executed."""
