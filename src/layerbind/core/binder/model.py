"""Bindings model: categories, fragments, contributions and layers.

The engine treats a fragment (``Bindings``) as opaque; it only moves
fragments between contributions and layers and copies them on load.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Category:
    """A categorization name with an evaluated, lower-cased value."""

    categorization: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"categorization": self.categorization, "value": self.value}


@dataclass(frozen=True)
class EffectiveCategories:
    """Ordered categories, highest precedence first."""

    categories: Tuple[Category, ...] = ()

    @classmethod
    def of(cls, pairs: Iterable[Tuple[str, str]]) -> "EffectiveCategories":
        return cls(tuple(Category(name, str(value).lower()) for name, value in pairs))

    def names(self) -> List[str]:
        return [c.categorization for c in self.categories]

    def as_dict(self) -> Dict[str, str]:
        return {c.categorization: c.value for c in self.categories}

    def __iter__(self):
        return iter(self.categories)

    def __len__(self) -> int:
        return len(self.categories)


def _copy_value(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy_value(v) for v in value]
    if isinstance(value, tuple):
        return tuple(_copy_value(v) for v in value)
    if isinstance(value, set):
        return {_copy_value(v) for v in value}
    return value


@dataclass
class BindingGroup:
    """Key/value bindings that apply when all ``categories`` match.

    An empty ``categories`` tuple means the group applies unconditionally.
    """

    values: Dict[str, Any] = field(default_factory=dict)
    categories: Tuple[Category, ...] = ()

    def copy(self) -> "BindingGroup":
        return BindingGroup(values=_copy_value(self.values), categories=self.categories)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"bindings": _copy_value(self.values)}
        if self.categories:
            data["when"] = {c.categorization: c.value for c in self.categories}
        return data


@dataclass
class Bindings:
    """A named bindings fragment (one loaded source)."""

    name: str
    groups: List[BindingGroup] = field(default_factory=list)

    def copy(self) -> "Bindings":
        """Return an independent value copy; no mutable state is shared."""
        return Bindings(name=self.name, groups=[g.copy() for g in self.groups])

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "groups": [g.to_dict() for g in self.groups]}


@dataclass
class ContributedBindings:
    """Bindings contributed by one resolved reference.

    ``effective_categories`` is ``None`` when the contribution has no opinion
    about categorization.
    """

    name: str
    bindings: Bindings
    effective_categories: Optional[EffectiveCategories] = None


@dataclass(frozen=True)
class NamedLayer:
    """A named layer holding fragments only (contribution metadata dropped)."""

    name: str
    bindings: Tuple[Bindings, ...] = ()

    @classmethod
    def of(cls, name: str, bindings: Sequence[Bindings]) -> "NamedLayer":
        return cls(name=name, bindings=tuple(bindings))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "bindings": [b.to_dict() for b in self.bindings]}


@dataclass(frozen=True)
class LayeredBindings:
    """Composition result, highest precedence layer first."""

    layers: Tuple[NamedLayer, ...] = ()

    def layer_names(self) -> List[str]:
        return [layer.name for layer in self.layers]

    def layer(self, name: str) -> Optional[NamedLayer]:
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"layers": [layer.to_dict() for layer in self.layers]}


__all__ = [
    "Category",
    "EffectiveCategories",
    "BindingGroup",
    "Bindings",
    "ContributedBindings",
    "NamedLayer",
    "LayeredBindings",
]
