"""Utility helpers for layerbind core.

- io/: YAML reading and parsing
- merge: deep dictionary merge for layered settings
- text/: template rendering for category and path expressions
"""
from __future__ import annotations

from .merge import deep_merge, merge_arrays

__all__ = ["deep_merge", "merge_arrays"]
