"""Shared CLI utilities."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from layerbind.core.config import ConfigManager
from layerbind.core.log_config import configure_logging
from layerbind.core.utils.io import read_yaml


def get_confdir(args: argparse.Namespace) -> Path:
    raw = getattr(args, "confdir", None)
    return Path(raw).expanduser().resolve() if raw else Path.cwd().resolve()


def load_settings(args: argparse.Namespace) -> ConfigManager:
    """Load settings for the confdir and configure logging from them."""
    settings = ConfigManager(get_confdir(args))
    level = "INFO" if getattr(args, "verbose", False) else settings.get("logging.level", "WARNING")
    log_file = settings.get("logging.file")
    configure_logging(level=level, log_file=Path(log_file) if log_file else None)
    return settings


def _set_dotted(target: Dict[str, Any], key: str, value: Any) -> None:
    parts = [p for p in key.split(".") if p]
    if not parts:
        raise ValueError(f"Invalid variable name: '{key}'")
    cur = target
    for part in parts[:-1]:
        nxt = cur.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[part] = nxt
        cur = nxt
    cur[parts[-1]] = value


def load_variables(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect variables from --facts (YAML mapping) and --var KEY=VALUE."""
    variables: Dict[str, Any] = {}
    facts = getattr(args, "facts", None)
    if facts:
        data = read_yaml(Path(facts), default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ValueError(f"Facts file must contain a mapping: {facts}")
        variables.update(data)
    for item in getattr(args, "variables", None) or []:
        key, sep, value = str(item).partition("=")
        if not sep:
            raise ValueError(f"Expected KEY=VALUE, got '{item}'")
        _set_dotted(variables, key.strip(), value)
    return variables


def get_modulepath(args: argparse.Namespace) -> Optional[List[Path]]:
    entries = getattr(args, "modulepath", None)
    if not entries:
        return None
    return [Path(e).expanduser().resolve() for e in entries]


__all__ = ["get_confdir", "load_settings", "load_variables", "get_modulepath"]
