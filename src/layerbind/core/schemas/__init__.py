"""JSON-Schema validation for layerbind YAML inputs."""
from __future__ import annotations

from .validation import SchemaValidationError, load_schema, schema_errors, validate_payload

__all__ = ["SchemaValidationError", "load_schema", "schema_errors", "validate_payload"]
