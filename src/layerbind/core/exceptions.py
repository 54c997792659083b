from __future__ import annotations

from typing import Any, Dict, Mapping


class LayerbindError(Exception):
    """Base exception for layerbind."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class BinderError(LayerbindError):
    """Raised when composing layered bindings fails."""


class UnknownSchemeError(BinderError, ValueError):
    """Raised when a bindings reference uses a scheme with no registered handler."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        BinderError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class MalformedReferenceError(BinderError, ValueError):
    """Raised when a reference has neither a name nor a wildcard where one is required."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        BinderError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class BindingsNotFoundError(BinderError, LookupError):
    """Raised when a required reference resolves to no loadable bindings."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        BinderError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class CategoryTypeError(BinderError, TypeError):
    """Raised when a category expression evaluates to something other than a string."""

    def __init__(
        self,
        message: str,
        *,
        category: str | None = None,
        actual_type: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if category:
            ctx["category"] = category
        if actual_type:
            ctx["actual_type"] = actual_type
        BinderError.__init__(self, message, context=ctx)
        TypeError.__init__(self, message)


class CategoryEvaluationError(BinderError):
    """Raised when a category or path expression cannot be evaluated."""


class HieraConfigError(BinderError):
    """Raised when a hierarchical data source has an invalid marker file."""


class BinderConfigError(LayerbindError, ValueError):
    """Raised when the binder configuration (layers/categories) is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        LayerbindError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "LayerbindError",
    "BinderError",
    "UnknownSchemeError",
    "MalformedReferenceError",
    "BindingsNotFoundError",
    "CategoryTypeError",
    "CategoryEvaluationError",
    "HieraConfigError",
    "BinderConfigError",
]
