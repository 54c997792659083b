"""Explicit composition context.

The caller builds one ``CompositionContext`` and passes it to
``BindingsComposer.compose``. Nothing is looked up from global state: the
confdir, the visible modules, the fact variables and the fragment loader all
come from here. ``ResolutionScope`` is the per-call state handed to scheme
handlers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence

from layerbind.core.diagnostics import Acceptor

from .loader import BindingsLoader
from .modules import ModuleIndex, ModulePathProvider, ModuleProvider

if TYPE_CHECKING:
    from layerbind.core.config import ConfigManager


@dataclass
class CompositionContext:
    """Everything a composition call needs from its environment.

    Attributes:
        confdir: Configuration root (binder config, confdir bindings and data)
        module_provider: Source of the modules visible to this call
        variables: Fact variables used to evaluate category and path expressions
        loader: Fragment loader for module/confdir bindings
        marker_file: File that marks a hierarchical data source root
    """

    confdir: Path
    module_provider: ModuleProvider
    variables: Dict[str, Any] = field(default_factory=dict)
    loader: BindingsLoader = field(default_factory=BindingsLoader)
    marker_file: str = "hiera.yaml"

    @classmethod
    def from_settings(
        cls,
        settings: "ConfigManager",
        *,
        variables: Optional[Mapping[str, Any]] = None,
        modulepath: Optional[Sequence[Path]] = None,
    ) -> "CompositionContext":
        """Build a context from engine settings (``modules.path``, ``composition.*``)."""
        confdir = settings.confdir
        if modulepath is None:
            modulepath = [
                p if p.is_absolute() else confdir / p
                for p in (Path(str(entry)) for entry in settings.get("modules.path", []) or [])
            ]
        return cls(
            confdir=confdir,
            module_provider=ModulePathProvider(modulepath),
            variables=dict(variables or {}),
            loader=BindingsLoader(bindings_dir=settings.get("composition.bindingsDir", "bindings")),
            marker_file=settings.get("composition.markerFile", "hiera.yaml"),
        )


@dataclass(frozen=True)
class ResolutionScope:
    """Per-composition state shared (read-only) by all scheme handlers."""

    context: CompositionContext
    modules: ModuleIndex
    acceptor: Acceptor

    @property
    def confdir(self) -> Path:
        return self.context.confdir

    @property
    def loader(self) -> BindingsLoader:
        return self.context.loader

    @property
    def variables(self) -> Dict[str, Any]:
        return self.context.variables


__all__ = ["CompositionContext", "ResolutionScope"]
