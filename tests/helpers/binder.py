"""Fake collaborators for binder tests."""
from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from layerbind.core.binder import BindingsLoader, CompositionContext, Module
from layerbind.core.binder.model import Bindings, NamedLayer


class StaticModuleProvider:
    """Module provider backed by an explicit ``name -> path`` mapping."""

    def __init__(self, modules: Mapping[str, Path]) -> None:
        self._modules = [Module(name=name, path=Path(path)) for name, path in modules.items()]
        self.calls = 0

    def modules(self) -> List[Module]:
        self.calls += 1
        return list(self._modules)


class RecordingLoader(BindingsLoader):
    """Loader that records every ``load`` so tests can assert what was read."""

    def __init__(self, bindings_dir: str = "bindings") -> None:
        super().__init__(bindings_dir)
        self.loaded: List[Tuple[Optional[Path], str]] = []
        self._lock = threading.Lock()

    def load(self, root: Optional[Path], fqn: str) -> Optional[Bindings]:
        with self._lock:
            self.loaded.append((root, fqn))
        return super().load(root, fqn)

    def loaded_names(self) -> List[str]:
        return [fqn for _, fqn in self.loaded]


class StaticSystemBindings:
    """System bindings provider returning empty named layers."""

    def final_contribution(self) -> NamedLayer:
        return NamedLayer.of("final", [Bindings(name="system::final")])

    def default_contribution(self) -> NamedLayer:
        return NamedLayer.of("default", [Bindings(name="system::default")])


def make_context(
    confdir: Path,
    modules: Optional[Mapping[str, Path]] = None,
    variables: Optional[Dict[str, Any]] = None,
    *,
    loader: Optional[BindingsLoader] = None,
) -> CompositionContext:
    return CompositionContext(
        confdir=Path(confdir),
        module_provider=StaticModuleProvider(modules or {}),
        variables=dict(variables or {}),
        loader=loader or RecordingLoader(),
    )


def fragment_names(layer: NamedLayer) -> List[str]:
    return [b.name for b in layer.bindings]


def names_by_layer(layers: Sequence[NamedLayer]) -> Dict[str, List[str]]:
    return {layer.name: fragment_names(layer) for layer in layers}


__all__ = [
    "StaticModuleProvider",
    "RecordingLoader",
    "StaticSystemBindings",
    "make_context",
    "fragment_names",
    "names_by_layer",
]
