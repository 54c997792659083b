"""Category evaluation.

Turns the configured categorization rules into ``EffectiveCategories``.
Results are never cached: category values depend on the variables of the
call that asks for them.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, Tuple

from layerbind.core.exceptions import CategoryEvaluationError, CategoryTypeError
from layerbind.core.utils.text import ExpressionError, render_template_value

from .model import Category, EffectiveCategories

logger = logging.getLogger(__name__)


def evaluate_expression(expression: str, variables: Mapping[str, Any]) -> Any:
    """Evaluate a string expression; the result type is not checked here."""
    try:
        return render_template_value(expression, variables)
    except ExpressionError as exc:
        raise CategoryEvaluationError(str(exc), context={"expression": expression}) from exc


def evaluate_category(name: str, expression: str, variables: Mapping[str, Any]) -> Category:
    value = evaluate_expression(expression, variables)
    if not isinstance(value, str):
        actual = type(value).__name__
        raise CategoryTypeError(
            f"Categorization value must be a string, category {name} evaluation resulted in a: '{actual}'",
            category=name,
            actual_type=actual,
        )
    # category values are always in lower case
    return Category(name, value.lower())


def evaluate_categories(
    categorization: Sequence[Tuple[str, str]], variables: Mapping[str, Any]
) -> EffectiveCategories:
    """Evaluate ``(name, expression)`` pairs in declaration order."""
    categories = tuple(evaluate_category(name, expr, variables) for name, expr in categorization)
    logger.debug("Effective categories: %s", ", ".join(f"{c.categorization}={c.value}" for c in categories))
    return EffectiveCategories(categories)


__all__ = ["evaluate_expression", "evaluate_category", "evaluate_categories"]
