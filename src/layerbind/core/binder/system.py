"""System bindings: the fixed layers that bound every composition.

``final`` sits above all configured layers (nothing can override it) and
``default`` sits below them (everything can override it). The bundled
bindings live in ``layerbind.data/system/``.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from layerbind.core.utils.io import read_yaml
from layerbind.data import get_data_path

from .loader import parse_bindings
from .model import Bindings, NamedLayer

FINAL_LAYER = "final"
DEFAULT_LAYER = "default"


@runtime_checkable
class SystemBindingsProvider(Protocol):
    def final_contribution(self) -> NamedLayer:
        ...

    def default_contribution(self) -> NamedLayer:
        ...


class SystemBindings:
    """System bindings read from YAML files (bundled ones unless given)."""

    def __init__(self, final_path: Optional[Path] = None, default_path: Optional[Path] = None) -> None:
        self.final_path = final_path or get_data_path("system", "final.yaml")
        self.default_path = default_path or get_data_path("system", "default.yaml")

    def _layer(self, name: str, path: Path) -> NamedLayer:
        data = read_yaml(path, default={}, raise_on_error=True)
        bindings: Bindings = parse_bindings(f"system::{name}", data, source=str(path))
        # Parsed per call, so each layered result owns its system fragments.
        return NamedLayer.of(name, [bindings])

    def final_contribution(self) -> NamedLayer:
        return self._layer(FINAL_LAYER, self.final_path)

    def default_contribution(self) -> NamedLayer:
        return self._layer(DEFAULT_LAYER, self.default_path)


__all__ = ["FINAL_LAYER", "DEFAULT_LAYER", "SystemBindingsProvider", "SystemBindings"]
