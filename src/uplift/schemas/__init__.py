"""Uplift JSON Schema definitions and validation utilities.

Schemas:
    - config.schema.json: Run configuration (strict mode, commands, paths)
    - versions.schema.json: Framework version knowledge base

Usage:
    from uplift.schemas import validate_config

    with open("uplift.json") as f:
        data = json.load(f)
    validate_config(data)  # Raises jsonschema.ValidationError if invalid
"""

from __future__ import annotations

import json
from importlib.resources import files
from typing import Any

import jsonschema


def _load_schema(name: str) -> dict[str, Any]:
    """Load a JSON schema from the schemas package.

    Args:
        name: Schema filename (e.g., 'config.schema.json')

    Returns:
        Parsed JSON schema as a dictionary
    """
    schema_text = files("uplift.schemas").joinpath(name).read_text()
    result: dict[str, Any] = json.loads(schema_text)
    return result


def get_config_schema() -> dict[str, Any]:
    return _load_schema("config.schema.json")


def get_versions_schema() -> dict[str, Any]:
    return _load_schema("versions.schema.json")


def validate_config(data: dict[str, Any]) -> None:
    """Validate a run configuration against the schema.

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_config_schema())


def validate_versions(data: dict[str, Any]) -> None:
    """Validate a knowledge-base document against the schema.

    Raises:
        jsonschema.ValidationError: If validation fails
    """
    jsonschema.validate(data, get_versions_schema())


__all__ = [
    "get_config_schema",
    "get_versions_schema",
    "validate_config",
    "validate_versions",
]
