"""Diagnostics acceptor.

Collects non-fatal findings reported while composing. Layers may be resolved
on worker threads, so ``accept`` is lock-protected.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .issues import Issue, Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """A single accepted finding."""

    issue: Issue
    location: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def severity(self) -> Severity:
        return self.issue.severity

    @property
    def message(self) -> str:
        return self.issue.format(self.details)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.issue.code,
            "severity": self.severity.value,
            "location": self.location,
            "message": self.message,
            "details": dict(self.details),
        }


class Acceptor:
    """Accumulates diagnostics for the caller to inspect after composition."""

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []
        self._lock = threading.Lock()

    def accept(self, issue: Issue, location: Any, details: Mapping[str, Any] | None = None) -> Diagnostic:
        diagnostic = Diagnostic(issue=issue, location=str(location), details=dict(details or {}))
        with self._lock:
            self._diagnostics.append(diagnostic)
        level = logging.ERROR if issue.severity is Severity.ERROR else logging.WARNING
        logger.log(level, "%s at %s: %s", issue.code, diagnostic.location, diagnostic.message)
        return diagnostic

    @property
    def diagnostics(self) -> List[Diagnostic]:
        with self._lock:
            return list(self._diagnostics)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    def has_errors(self) -> bool:
        return bool(self.errors)

    def of_issue(self, issue: Issue) -> List[Diagnostic]:
        """Return diagnostics recorded for ``issue``, in acceptance order."""
        return [d for d in self.diagnostics if d.issue.code == issue.code]

    def __len__(self) -> int:
        with self._lock:
            return len(self._diagnostics)


__all__ = ["Acceptor", "Diagnostic"]
