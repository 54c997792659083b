"""Expression rendering for category values and data paths.

Expressions are Jinja2 templates evaluated against the composition
variables (facts). Two forms are supported:
- A lone placeholder ``"{{ name }}"`` or ``"{{ a.b.c }}"`` returns the raw
  variable value (not coerced to str), so callers can type-check it
- Anything else is rendered as text; undefined variables render empty
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from jinja2 import Environment, TemplateError

_FULL_VAR_RE = re.compile(r"^\{\{\s*([a-zA-Z_][a-zA-Z0-9_]*(?:\.[a-zA-Z0-9_]+)*)\s*\}\}$")

_ENV = Environment(trim_blocks=True, lstrip_blocks=True, autoescape=False)


class ExpressionError(ValueError):
    """Raised when an expression is not a valid template."""


def lookup_variable(variables: Mapping[str, Any], dotted: str) -> Any:
    """Resolve ``a.b.c`` through nested mappings; missing keys yield ``""``."""
    current: Any = variables
    for part in dotted.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return ""
    return current


def render_template_text(text: str, context: Mapping[str, Any]) -> str:
    """Render ``text`` with Jinja2 against ``context``."""
    try:
        return _ENV.from_string(text).render(**dict(context))
    except TemplateError as exc:
        raise ExpressionError(f"Cannot evaluate expression {text!r}: {exc}") from exc


def render_template_value(value: str, context: Mapping[str, Any]) -> Any:
    """Render a single expression with context substitution.

    Supports:
    - Full variable replacement: ``"{{ var }}"`` returns context[var] (not coerced to str)
    - Inline rendering for larger strings (coerces values to strings)
    """
    full_match = _FULL_VAR_RE.fullmatch(value.strip())
    if full_match:
        return lookup_variable(context, full_match.group(1))

    return render_template_text(value, context)


__all__ = [
    "ExpressionError",
    "lookup_variable",
    "render_template_text",
    "render_template_value",
]
