"""Shared schema validation utilities.

layerbind validates its YAML inputs (binder config, bindings fragments,
hierarchical data markers) using JSON Schema. Schemas are stored as YAML
files under ``layerbind.data/schemas/`` and loaded in a single, consistent way.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft202012Validator

from layerbind.core.exceptions import LayerbindError
from layerbind.core.utils.io import read_yaml
from layerbind.data import get_data_path


class SchemaValidationError(LayerbindError, ValueError):
    """Raised when schema validation fails."""

    def __init__(self, message: str = "", *, context: Dict[str, Any] | None = None) -> None:
        LayerbindError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


@lru_cache(maxsize=16)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict.

    Automatically appends ``.schema.yaml`` if no extension is present.

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.schema.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def schema_errors(payload: Any, schema_name: str) -> List[str]:
    """Validate a payload and return list of error messages (empty if valid).

    Useful for collecting every problem with a file instead of stopping at
    the first one.
    """
    validator = Draft202012Validator(load_schema(schema_name))
    errors: List[str] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


def validate_payload(payload: Any, schema_name: str, *, source: str | None = None) -> None:
    """Validate a payload against a bundled JSON schema.

    Args:
        payload: Data to validate.
        schema_name: Name of schema to validate against (e.g. ``"hiera"``).
        source: Optional origin of the payload (file path), used in messages.

    Raises:
        SchemaValidationError: If validation fails.
    """
    schema = load_schema(schema_name)
    try:
        jsonschema.validate(instance=payload, schema=schema, cls=Draft202012Validator)
    except jsonschema.ValidationError as exc:
        where = f" ({source})" if source else ""
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}'{where}: {exc.message}",
            context={"schema": schema_name, "source": source, "errors": schema_errors(payload, schema_name)},
        ) from exc


__all__ = ["SchemaValidationError", "load_schema", "schema_errors", "validate_payload"]
