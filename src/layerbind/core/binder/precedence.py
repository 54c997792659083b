"""Category precedence checking across contributions.

A contribution's effective categories must appear in the global
categorization and be listed in strictly increasing precedence index
(highest precedence first, as in the binder config). Findings are reported
to the acceptor; the check never raises.

Ordering is checked within each contribution only. Two contributions of the
same layer that disagree with each other are not compared.
"""
from __future__ import annotations

from typing import Dict, Iterable, Sequence

from layerbind.core.diagnostics import (
    MISSING_CATEGORY_PRECEDENCE,
    PRECEDENCE_MISMATCH_IN_CONTRIBUTION,
    Acceptor,
)

from .model import ContributedBindings


def category_precedence(categorization: Sequence[str]) -> Dict[str, int]:
    """Map category name to its global precedence index."""
    precedence: Dict[str, int] = {}
    for index, name in enumerate(categorization):
        precedence.setdefault(name, index)
    return precedence


def check_contribution_precedence(
    categorization: Sequence[str],
    contributions: Iterable[ContributedBindings],
    acceptor: Acceptor,
) -> int:
    """Report category ordering problems; returns the number of findings."""
    precedence = category_precedence(categorization)
    found = 0
    for contribution in contributions:
        # no opinion: accepts whatever the global precedence is
        effective = contribution.effective_categories
        if not effective:
            continue
        previous = -1
        for category in effective:
            details = {"categorization": category.categorization, "contribution": contribution.name}
            location = f"{contribution.name}#{category.categorization}"
            index = precedence.get(category.categorization)
            if index is None:
                acceptor.accept(MISSING_CATEGORY_PRECEDENCE, location, details)
                found += 1
                continue
            if index <= previous:
                acceptor.accept(PRECEDENCE_MISMATCH_IN_CONTRIBUTION, location, details)
                found += 1
                continue
            previous = index
    return found


__all__ = ["category_precedence", "check_contribution_precedence"]
