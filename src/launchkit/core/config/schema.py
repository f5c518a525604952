"""JSON Schema validation for merged settings.

Schemas are stored as YAML (JSON Schema expressed in YAML) under
``launchkit.data/schemas``.
"""
from __future__ import annotations

from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft202012Validator

from launchkit.core.exceptions import SchemaValidationError
from launchkit.core.utils.io import read_yaml
from launchkit.data import get_data_path

CONFIG_SCHEMA = "config/config.schema.yaml"


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema by relative name (``.yaml`` appended if missing)."""
    if not schema_name.lower().endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.yaml"
    path = get_data_path("schemas", schema_name)
    schema = read_yaml(path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validation_errors(payload: Dict[str, Any], schema_name: str = CONFIG_SCHEMA) -> List[str]:
    """Return readable validation errors for ``payload`` (empty if valid)."""
    validator = Draft202012Validator(load_schema(schema_name))
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            errors.append(f"{'.'.join(str(p) for p in error.path)}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(payload: Dict[str, Any], schema_name: str = CONFIG_SCHEMA) -> None:
    """Validate ``payload`` against a bundled schema.

    Raises:
        SchemaValidationError: If validation fails.
    """
    try:
        jsonschema.validate(instance=payload, schema=load_schema(schema_name))
    except jsonschema.ValidationError as exc:
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': {exc.message}",
            context={"errors": validation_errors(payload, schema_name)},
        ) from exc


__all__ = ["CONFIG_SCHEMA", "load_schema", "validation_errors", "validate_payload"]
