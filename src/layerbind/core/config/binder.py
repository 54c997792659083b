"""Binder configuration: layering and categorization.

Read from ``<confdir>/binder_config.yaml`` (or ``.yml``); the bundled
``layerbind.data/config/binder_config.yaml`` is used when the confdir has
none. Layers are listed highest precedence first; so are categories.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from layerbind.core.exceptions import BinderConfigError
from layerbind.core.schemas import schema_errors
from layerbind.core.utils.io import read_yaml, resolve_yaml_path
from layerbind.data import get_data_path

logger = logging.getLogger(__name__)

BINDER_CONFIG_NAME = "binder_config"


def _as_references(raw: Any) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    return tuple(str(item) for item in raw)


@dataclass(frozen=True)
class LayerSpec:
    """A configured layer: include and exclude bindings references."""

    name: str
    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> "LayerSpec":
        return cls(
            name=str(item["name"]).strip(),
            include=_as_references(item.get("include")),
            exclude=_as_references(item.get("exclude")),
        )


@dataclass(frozen=True)
class BinderConfig:
    """Parsed binder configuration."""

    layers: Tuple[LayerSpec, ...]
    categorization: Tuple[Tuple[str, str], ...]
    source: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Any, *, source: Optional[Path] = None) -> "BinderConfig":
        where = str(source) if source else "<binder config>"
        errors = schema_errors(data, "binder-config")
        if errors:
            raise BinderConfigError(
                f"Invalid binder configuration in {where}: " + "; ".join(errors),
                context={"source": where, "errors": errors},
            )

        layers = tuple(LayerSpec.from_dict(item) for item in data.get("layers") or [])
        categorization = tuple(
            (str(item["name"]).strip(), str(item["value"])) for item in data.get("categories") or []
        )

        problems: List[str] = []
        for kind, names in (
            ("layer", [layer.name for layer in layers]),
            ("category", [name for name, _ in categorization]),
        ):
            seen = set()
            for name in names:
                if name in seen:
                    problems.append(f"duplicate {kind} name '{name}'")
                seen.add(name)
        if problems:
            raise BinderConfigError(
                f"Invalid binder configuration in {where}: " + "; ".join(problems),
                context={"source": where, "errors": problems},
            )

        return cls(layers=layers, categorization=categorization, source=source)

    @classmethod
    def load(cls, confdir: Optional[Path] = None) -> "BinderConfig":
        """Load from ``confdir``, falling back to the bundled default."""
        path = None
        if confdir is not None:
            path = resolve_yaml_path(Path(confdir) / BINDER_CONFIG_NAME)
        if path is None:
            path = get_data_path("config", f"{BINDER_CONFIG_NAME}.yaml")
            logger.debug("No binder config in %s; using bundled default", confdir)
        # Fail closed: configuration must never silently ignore invalid YAML.
        data = read_yaml(path, default={}, raise_on_error=True)
        return cls.from_dict(data, source=path)

    def layer_names(self) -> List[str]:
        return [layer.name for layer in self.layers]

    def category_names(self) -> List[str]:
        return [name for name, _ in self.categorization]


__all__ = ["BINDER_CONFIG_NAME", "LayerSpec", "BinderConfig"]
