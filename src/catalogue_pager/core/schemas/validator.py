"""
Schema Validation Utilities

Validates catalogue files (items, overrides and settings in one JSON
document) before they are deserialised.

Structural checks run through jsonschema against
`catalogue.schema.json`; the cross-field check that override keys fit the
item list is done here because JSON Schema cannot express it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
CATALOGUE_SCHEMA_VERSION = 1


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_catalogue(data: dict[str, Any]) -> None:
    """
    Validate a catalogue document.

    Args:
        data: Parsed JSON document

    Raises:
        ValidationError: If the document is malformed, has the wrong
            schema version, or its overrides address missing items
    """
    if not isinstance(data, dict):
        raise ValidationError("Catalogue must be a JSON object", path="")

    version = data.get("schema_version")
    if version != CATALOGUE_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported catalogue schema version: {version} "
            f"(expected {CATALOGUE_SCHEMA_VERSION})",
            path="schema_version",
        )

    schema = _load_schema("catalogue")
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        first = errors[0]
        raise ValidationError(
            f"Schema validation failed: {first.message}",
            path=".".join(str(p) for p in first.absolute_path),
            errors=[e.message for e in errors],
        )

    _validate_override_range(data)


def _validate_override_range(data: dict[str, Any]) -> None:
    """Every override key must index an existing item."""
    item_count = len(data.get("items", []))
    for kind, mapping in (data.get("overrides") or {}).items():
        stray = sorted(int(k) for k in mapping if int(k) >= item_count)
        if stray:
            raise ValidationError(
                f"{kind} overrides reference missing items {stray} "
                f"({item_count} items)",
                path=f"overrides.{kind}",
            )
