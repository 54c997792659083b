"""Text helpers: template rendering for binder expressions."""
from __future__ import annotations

from .templates import (
    ExpressionError,
    lookup_variable,
    render_template_text,
    render_template_value,
)

__all__ = [
    "ExpressionError",
    "lookup_variable",
    "render_template_text",
    "render_template_value",
]
