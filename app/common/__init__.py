"""Shared building blocks for the report packages."""

from .exceptions import (
    DuplicateFacilityError,
    MalformedTreeError,
    ReportingError,
    StructuralMismatchError,
)

__all__ = [
    "ReportingError",
    "MalformedTreeError",
    "StructuralMismatchError",
    "DuplicateFacilityError",
]
