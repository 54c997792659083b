"""Loading bindings fragments from YAML files.

A qualified name ``a::b::c`` is looked up relative to a root directory as
``<root>/<bindings_dir>/a/b/c.yaml`` (``.yml`` also accepted). Fragment
files look like::

    bindings:
      ntp::servers: [0.pool.ntp.org]
    categorized:
      - when: {osfamily: redhat}
        bindings:
          ntp::package: ntp

Every ``load`` parses the file afresh, so the caller owns the result.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional

from layerbind.core.schemas import validate_payload
from layerbind.core.utils.io import read_yaml, resolve_yaml_path

from .model import BindingGroup, Bindings, Category

logger = logging.getLogger(__name__)

NAME_SEPARATOR = "::"


def split_name(fqn: str) -> List[str]:
    """Split a qualified name, dropping a leading ``::``."""
    parts = fqn.split(NAME_SEPARATOR)
    if parts and parts[0] == "":
        parts = parts[1:]
    return parts


class BindingsLoader:
    """Fragment loader: probes for and loads bindings by qualified name."""

    def __init__(self, bindings_dir: str = "bindings") -> None:
        self.bindings_dir = bindings_dir

    def _base_path(self, root: Path, fqn: str) -> Optional[Path]:
        parts = split_name(fqn)
        if not parts or any(not p or p in {".", ".."} for p in parts):
            return None
        return Path(root, self.bindings_dir, *parts)

    def find(self, root: Optional[Path], fqn: str) -> Optional[Path]:
        """Return the fragment file for ``fqn`` under ``root``, if it exists."""
        if root is None:
            return None
        base = self._base_path(Path(root), fqn)
        if base is None:
            return None
        return resolve_yaml_path(base)

    def loadable(self, root: Optional[Path], fqn: str) -> bool:
        """Existence probe; does not parse the file."""
        return self.find(root, fqn) is not None

    def load(self, root: Optional[Path], fqn: str) -> Optional[Bindings]:
        """Load the fragment for ``fqn``; ``None`` when there is none."""
        path = self.find(root, fqn)
        if path is None:
            return None
        logger.debug("Loading bindings '%s' from %s", fqn, path)
        data = read_yaml(path, default={}, raise_on_error=True)
        return parse_bindings(NAME_SEPARATOR.join(split_name(fqn)), data, source=str(path))


def parse_bindings(name: str, data: Any, *, source: Optional[str] = None) -> Bindings:
    """Build a ``Bindings`` fragment from parsed YAML, validating its shape."""
    validate_payload(data, "bindings", source=source)
    groups: List[BindingGroup] = []
    if data.get("bindings"):
        groups.append(BindingGroup(values=dict(data["bindings"])))
    for entry in data.get("categorized") or []:
        categories = tuple(
            Category(str(cat), str(value).lower()) for cat, value in entry["when"].items()
        )
        groups.append(BindingGroup(values=dict(entry["bindings"]), categories=categories))
    return Bindings(name=name, groups=groups)


__all__ = ["BindingsLoader", "parse_bindings", "split_name", "NAME_SEPARATOR"]
