"""Layered bindings composition.

Composes the layers named in a binder configuration into one ordered
``LayeredBindings`` structure:

    final (system) → configured layers, in declared order → default (system)

Each configured layer includes and excludes bindings references:

    module:/*::default           default bindings of every module
    module-hiera:/*/             hierarchical data at every module root
    confdir:/site?optional       confdir bindings, skipped when missing
    confdir-hiera:/              hierarchical data at the confdir root

Usage:
    from layerbind.core.binder import BindingsComposer, CompositionContext
    from layerbind.core.config import BinderConfig

    composer = BindingsComposer(BinderConfig.load(confdir))
    layered = composer.compose(context)
"""

from .composer import BindingsComposer, assemble_layers
from .context import CompositionContext, ResolutionScope
from .hiera import HieraBindingsProvider
from .loader import BindingsLoader
from .model import (
    BindingGroup,
    Bindings,
    Category,
    ContributedBindings,
    EffectiveCategories,
    LayeredBindings,
    NamedLayer,
)
from .modules import Module, ModuleIndex, ModulePathProvider, ModuleProvider
from .schemes import BindingsProviderScheme, SchemeRegistry
from .system import DEFAULT_LAYER, FINAL_LAYER, SystemBindings
from .uri import BindingsURI

__all__ = [
    "BindingsComposer",
    "assemble_layers",
    "CompositionContext",
    "ResolutionScope",
    "HieraBindingsProvider",
    "BindingsLoader",
    "BindingGroup",
    "Bindings",
    "Category",
    "ContributedBindings",
    "EffectiveCategories",
    "LayeredBindings",
    "NamedLayer",
    "Module",
    "ModuleIndex",
    "ModulePathProvider",
    "ModuleProvider",
    "BindingsProviderScheme",
    "SchemeRegistry",
    "DEFAULT_LAYER",
    "FINAL_LAYER",
    "SystemBindings",
    "BindingsURI",
]
