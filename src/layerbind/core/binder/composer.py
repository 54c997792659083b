"""Bindings composition.

``BindingsComposer`` is directed by a ``BinderConfig`` that says how the
result is layered and what each layer includes and excludes. One
``compose`` call:

1. builds the module index and the scheme handlers for the call
2. resolves every configured layer into contributions
3. checks category precedence across all contributions
4. wraps the layers between the ``final`` and ``default`` system layers

Nothing is cached between calls.
"""
from __future__ import annotations

import concurrent.futures
import logging
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Sequence, Type

from layerbind.core.config.binder import BinderConfig, LayerSpec
from layerbind.core.diagnostics import Acceptor

from .categories import evaluate_categories
from .context import CompositionContext, ResolutionScope
from .model import ContributedBindings, EffectiveCategories, LayeredBindings, NamedLayer
from .modules import ModuleIndex
from .precedence import check_contribution_precedence
from .resolver import LayerResolver
from .schemes import BindingsProviderScheme, SchemeRegistry
from .system import SystemBindings, SystemBindingsProvider

if TYPE_CHECKING:
    from layerbind.core.config import ConfigManager

logger = logging.getLogger(__name__)


def assemble_layers(
    configured: Sequence[NamedLayer], system: SystemBindingsProvider
) -> LayeredBindings:
    """Return ``[final, *configured, default]``.

    The order is fixed: final bindings cannot be overridden by anything
    configured, and default bindings can always be.
    """
    return LayeredBindings(
        layers=(system.final_contribution(), *configured, system.default_contribution())
    )


class BindingsComposer:
    """Composes layered bindings from a binder configuration.

    Usage:
        composer = BindingsComposer(BinderConfig.load(confdir))
        layered = composer.compose(context)
        for diagnostic in composer.acceptor.diagnostics:
            print(diagnostic.message)
    """

    def __init__(
        self,
        config: BinderConfig,
        *,
        acceptor: Optional[Acceptor] = None,
        system_bindings: Optional[SystemBindingsProvider] = None,
        scheme_handlers: Optional[Mapping[str, Type[BindingsProviderScheme]]] = None,
        parallel: bool = False,
        max_workers: int = 4,
    ) -> None:
        self.config = config
        self.acceptor = acceptor if acceptor is not None else Acceptor()
        self.system_bindings = system_bindings or SystemBindings()
        self.scheme_handlers = dict(scheme_handlers or {})
        self.parallel = parallel
        self.max_workers = max_workers

    @classmethod
    def from_settings(cls, settings: "ConfigManager", **kwargs: Any) -> "BindingsComposer":
        """Create a composer for ``settings.confdir`` honouring ``composition.*`` settings."""
        kwargs.setdefault("parallel", bool(settings.get("composition.parallel", False)))
        kwargs.setdefault("max_workers", int(settings.get("composition.maxWorkers", 4)))
        return cls(BinderConfig.load(settings.confdir), **kwargs)

    def compose(self, context: CompositionContext) -> LayeredBindings:
        """Compose the layered bindings for ``context``.

        Raises:
            UnknownSchemeError: a reference uses an unregistered scheme
            MalformedReferenceError: a reference lacks a name or wildcard
            BindingsNotFoundError: a required reference has nothing to load
        """
        scope = ResolutionScope(
            context=context,
            modules=ModuleIndex.build(context.module_provider),
            acceptor=self.acceptor,
        )
        resolver = LayerResolver(SchemeRegistry.build(scope, self.scheme_handlers))

        per_layer = self._resolve_layers(resolver, self.config.layers)

        contributions: List[ContributedBindings] = [c for contribs in per_layer for c in contribs]
        check_contribution_precedence(self.config.category_names(), contributions, self.acceptor)

        configured = [
            NamedLayer.of(spec.name, [c.bindings for c in contribs])
            for spec, contribs in zip(self.config.layers, per_layer)
        ]
        layered = assemble_layers(configured, self.system_bindings)
        logger.info(
            "Composed %d layer(s) from %d contribution(s): %s",
            len(layered.layers),
            len(contributions),
            ", ".join(layered.layer_names()),
        )
        return layered

    def _resolve_layers(
        self, resolver: LayerResolver, layers: Sequence[LayerSpec]
    ) -> List[List[ContributedBindings]]:
        """Resolve layers, returning results in declared order."""
        if not self.parallel or len(layers) < 2:
            return [resolver.resolve(layer) for layer in layers]

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(resolver.resolve, layer) for layer in layers]
            return [future.result() for future in futures]

    def effective_categories(self, context: CompositionContext) -> EffectiveCategories:
        """Evaluate the configured categorization for ``context`` (not cached).

        Raises:
            CategoryTypeError: a category expression did not yield a string
        """
        return evaluate_categories(self.config.categorization, context.variables)


__all__ = ["BindingsComposer", "assemble_layers"]
