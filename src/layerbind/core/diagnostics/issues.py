"""Issue catalogue for binder diagnostics."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Issue:
    """A kind of finding, with a message template formatted from details."""

    code: str
    message: str
    severity: Severity = Severity.ERROR

    def format(self, details: Mapping[str, Any]) -> str:
        try:
            return self.message.format(**details)
        except (KeyError, IndexError):
            return self.message


MISSING_CATEGORY_PRECEDENCE = Issue(
    code="MISSING_CATEGORY_PRECEDENCE",
    message="Category '{categorization}' has no precedence in the binder categorization",
    severity=Severity.WARNING,
)

PRECEDENCE_MISMATCH_IN_CONTRIBUTION = Issue(
    code="PRECEDENCE_MISMATCH_IN_CONTRIBUTION",
    message="Category '{categorization}' is out of precedence order in contribution '{contribution}'",
)

HIERA_CONFIG_INVALID = Issue(
    code="HIERA_CONFIG_INVALID",
    message="Invalid hierarchical data configuration: {reason}",
)


__all__ = [
    "Severity",
    "Issue",
    "MISSING_CATEGORY_PRECEDENCE",
    "PRECEDENCE_MISMATCH_IN_CONTRIBUTION",
    "HIERA_CONFIG_INVALID",
]
