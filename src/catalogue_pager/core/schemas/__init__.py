"""
Schemas Package

JSON schema definitions and validation utilities.
"""

from .validator import (
    validate_catalogue,
    ValidationError,
    CATALOGUE_SCHEMA_VERSION,
)

__all__ = [
    "validate_catalogue",
    "ValidationError",
    "CATALOGUE_SCHEMA_VERSION",
]
