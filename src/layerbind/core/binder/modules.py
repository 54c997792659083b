"""Module discovery and the per-composition module index."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Protocol, Sequence, runtime_checkable

logger = logging.getLogger(__name__)

MODULE_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")


@dataclass(frozen=True)
class Module:
    """A module visible to the current environment."""

    name: str
    path: Path


@runtime_checkable
class ModuleProvider(Protocol):
    """Enumerates the modules visible to a composition."""

    def modules(self) -> Iterable[Module]:
        ...


class ModulePathProvider:
    """Discover modules as sub-directories of modulepath entries.

    Directories are scanned in order; when two entries define the same module
    name, the first one wins.
    """

    def __init__(self, modulepath: Sequence[Path]) -> None:
        self.modulepath = [Path(p) for p in modulepath]

    def modules(self) -> List[Module]:
        found: Dict[str, Module] = {}
        for entry in self.modulepath:
            if not entry.is_dir():
                logger.debug("Skipping missing modulepath entry %s", entry)
                continue
            for child in sorted(entry.iterdir()):
                if not child.is_dir():
                    continue
                if not MODULE_NAME_RE.match(child.name):
                    logger.debug("Ignoring directory with invalid module name: %s", child)
                    continue
                if child.name in found:
                    logger.debug("Module '%s' at %s shadowed by %s", child.name, child, found[child.name].path)
                    continue
                found[child.name] = Module(name=child.name, path=child.resolve())
        return list(found.values())


class ModuleIndex(Mapping[str, Module]):
    """Read-only ``name -> Module`` mapping, built once per composition."""

    def __init__(self, modules: Iterable[Module]) -> None:
        by_name: Dict[str, Module] = {}
        for mod in modules:
            by_name.setdefault(mod.name, mod)
        self._modules = MappingProxyType(by_name)

    @classmethod
    def build(cls, provider: ModuleProvider) -> "ModuleIndex":
        index = cls(provider.modules())
        logger.debug("Module index: %s", ", ".join(index) or "(empty)")
        return index

    def __getitem__(self, name: str) -> Module:
        return self._modules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)


__all__ = ["Module", "ModuleProvider", "ModulePathProvider", "ModuleIndex", "MODULE_NAME_RE"]
