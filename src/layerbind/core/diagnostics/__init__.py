"""Non-fatal findings produced while composing bindings.

Issues are declared once in ``issues`` and reported through an
``Acceptor``; callers inspect the acceptor after composition.
"""
from __future__ import annotations

from .acceptor import Acceptor, Diagnostic
from .issues import (
    HIERA_CONFIG_INVALID,
    MISSING_CATEGORY_PRECEDENCE,
    PRECEDENCE_MISMATCH_IN_CONTRIBUTION,
    Issue,
    Severity,
)

__all__ = [
    "Acceptor",
    "Diagnostic",
    "Issue",
    "Severity",
    "MISSING_CATEGORY_PRECEDENCE",
    "PRECEDENCE_MISMATCH_IN_CONTRIBUTION",
    "HIERA_CONFIG_INVALID",
]
