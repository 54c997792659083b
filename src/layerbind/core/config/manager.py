"""
layerbind engine settings (YAML-only).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from layerbind.core.schemas import validate_payload
from layerbind.core.utils.io import read_yaml, resolve_yaml_path
from layerbind.core.utils.merge import deep_merge
from layerbind.data import get_data_path

# Module logger (warnings are user-visible via CLI log config).
logger = logging.getLogger(__name__)

ENV_PREFIX = "LAYERBIND_"
SETTINGS_NAME = "layerbind"

EnvPath = List[Union[str, int, object]]


class ConfigManager:
    """Load, merge, and validate engine settings.

    Settings sources (highest to lowest priority):
    1. Environment variables: LAYERBIND_<section>__<key>
    2. Confdir settings: <confdir>/layerbind.yaml
    3. Bundled defaults: layerbind.data/config/defaults.yaml

    The merged result is computed once per instance.
    """

    ARRAY_APPEND_MARKER = object()

    def __init__(self, confdir: Optional[Path] = None, *, env: Optional[Mapping[str, str]] = None) -> None:
        self.confdir = Path(confdir).resolve() if confdir else Path.cwd().resolve()
        self.env = dict(os.environ if env is None else env)
        self.core_config_path = get_data_path("config", "defaults.yaml")
        self._config: Optional[Dict[str, Any]] = None

    @property
    def settings_path(self) -> Optional[Path]:
        return resolve_yaml_path(self.confdir / SETTINGS_NAME)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        data = read_yaml(path, default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a mapping: {path}")
        return data

    # ========== Environment Overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> EnvPath:
        segs = raw.split("__") if "__" in raw else raw.split("_")
        processed: EnvPath = []
        for seg in segs:
            if seg == "":
                raise ValueError(f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.")
            if seg.isdigit():
                processed.append(int(seg))
            elif seg.upper() == "APPEND":
                processed.append(self.ARRAY_APPEND_MARKER)
            else:
                # Lowercase; existing keys are matched case-insensitively.
                processed.append(seg.lower())
        return processed

    def _iter_env_overrides(self) -> Iterator[Tuple[EnvPath, Any]]:
        for key in sorted(self.env):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                raise ValueError(f"Malformed {ENV_PREFIX}* key")
            yield self._parse_env_key(raw), self._coerce_type(self.env[key])

    def _set_nested(self, root: Dict[str, Any], path: EnvPath, value: Any) -> None:
        cur: Any = root
        for i, part in enumerate(path[:-1]):
            nxt = path[i + 1]
            if isinstance(part, int) or part is self.ARRAY_APPEND_MARKER:
                raise ValueError("Invalid path: list index/APPEND may only appear at leaf")
            if not isinstance(cur, dict):
                raise ValueError("Path traverses non-dict container")
            key_candidates = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            key_to_use = key_candidates.get(str(part).lower(), part)
            if key_to_use not in cur:
                cur[key_to_use] = [] if (isinstance(nxt, int) or nxt is self.ARRAY_APPEND_MARKER) else {}
            cur = cur[key_to_use]

        leaf = path[-1]
        if leaf is self.ARRAY_APPEND_MARKER:
            if not isinstance(cur, list):
                raise ValueError("APPEND requires list")
            cur.append(value)
        elif isinstance(leaf, int):
            if not isinstance(cur, list):
                raise ValueError("Index assignment requires list")
            while len(cur) <= leaf:
                cur.append(None)
            cur[leaf] = value
        else:
            if not isinstance(cur, dict):
                raise ValueError("Key assignment requires dict")
            lower_map = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            cur[lower_map.get(str(leaf).lower(), leaf)] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            self._set_nested(cfg, path, typed_value)

    # ========== Loading ==========

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Merge defaults, confdir settings and environment overrides."""
        if self._config is None:
            cfg = self.load_yaml(self.core_config_path)
            settings_path = self.settings_path
            if settings_path is not None:
                logger.debug("Merging settings from %s", settings_path)
                cfg = deep_merge(cfg, self.load_yaml(settings_path))
            self.apply_env_overrides(cfg)
            if validate:
                validate_payload(cfg, "settings", source=str(settings_path or self.core_config_path))
            self._config = cfg
        return self._config

    # ========== Accessor Methods ==========

    def get_all(self) -> Dict[str, Any]:
        """Get full merged settings."""
        return self.load_config()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a settings value by dot-notation key.

        Example:
            >>> manager.get('composition.maxWorkers')
            4
            >>> manager.get('nonexistent.key', 'fallback')
            'fallback'
        """
        current: Any = self.load_config()
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "ENV_PREFIX"]
