"""Canonical deep merge utilities.

Used to layer engine settings (bundled defaults, confdir overrides,
environment overrides). Array merging supports override semantics:
  - Default: replace array entirely
  - Prefix with "+": append to existing array
  - Prefix with "=": explicit replace (same as default)
"""
from __future__ import annotations

from typing import Any, Dict, List


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries without mutating inputs.

    Args:
        base: Base dictionary (lower priority)
        override: Override dictionary (higher priority)

    Returns:
        New merged dictionary

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        if key in result:
            if isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            elif isinstance(result[key], list) and isinstance(value, list):
                result[key] = merge_arrays(result[key], value)
            else:
                result[key] = value
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge arrays with override semantics.

    Example:
        >>> merge_arrays(["modules"], ["+", "vendor"])
        ['modules', 'vendor']
        >>> merge_arrays(["modules"], ["=", "site"])
        ['site']
    """
    if not override:
        return base
    first = override[0]
    if isinstance(first, str):
        if first.startswith("+"):
            return [*base, *override[1:]]
        if first == "=":
            return list(override[1:])
    return list(override)


__all__ = ["deep_merge", "merge_arrays"]
