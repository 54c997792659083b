"""I/O utilities for layerbind.

YAML read/dump helpers shared by the config loaders, the fragment
loader and the hierarchical data provider.
"""
from __future__ import annotations

from .yaml import (
    dump_yaml_string,
    read_yaml,
    resolve_yaml_path,
)

__all__ = [
    "read_yaml",
    "dump_yaml_string",
    "resolve_yaml_path",
]
