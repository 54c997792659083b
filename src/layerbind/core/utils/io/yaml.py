"""YAML I/O utilities with advisory read locks."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any, Optional

import yaml

YAML_SUFFIXES = (".yaml", ".yml")


def read_yaml(
    path: Path, default: Any = None, raise_on_error: bool = False
) -> Any:
    """Read YAML with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Args:
        path: YAML file path to read
        default: Value to return if file missing or invalid (default: None)
        raise_on_error: If True, propagate exceptions instead of returning default.

    Returns:
        Any: Parsed YAML data, or default if error

    Examples:
        >>> config = read_yaml(Path("binder_config.yaml"), default={})
        >>> assert isinstance(config, dict)
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            data = yaml.safe_load(f)
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def dump_yaml_string(data: Any, sort_keys: bool = True) -> str:
    """Dump data to a block-style YAML string."""
    return yaml.safe_dump(
        data,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
    )


def resolve_yaml_path(base: Path) -> Optional[Path]:
    """Return the existing ``base.yaml`` or ``base.yml`` file, if any.

    ``.yaml`` is preferred when both exist. ``base`` is given without a suffix.
    """
    for ext in YAML_SUFFIXES:
        candidate = base.parent / f"{base.name}{ext}"
        if candidate.is_file():
            return candidate
    return None


__all__ = [
    "YAML_SUFFIXES",
    "read_yaml",
    "dump_yaml_string",
    "resolve_yaml_path",
]
