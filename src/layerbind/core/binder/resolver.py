"""Per-layer resource-set resolution.

Include and exclude references are expanded independently, so an exclude
wildcard removes what an include wildcard (or an explicit include) added.
The effective set is ``included - excluded`` by normalized reference.
"""
from __future__ import annotations

import logging
from typing import Iterable, List

from layerbind.core.config.binder import LayerSpec

from .model import ContributedBindings
from .schemes import SchemeRegistry
from .uri import BindingsURI, parse_references, subtract_references

logger = logging.getLogger(__name__)


class LayerResolver:
    """Resolves a layer specification into its contributions."""

    def __init__(self, registry: SchemeRegistry) -> None:
        self.registry = registry

    def expand_included(self, uris: Iterable[BindingsURI]) -> List[BindingsURI]:
        result: List[BindingsURI] = []
        for uri in uris:
            result.extend(self.registry.handler_for(uri).expand_included(uri))
        return result

    def expand_excluded(self, uris: Iterable[BindingsURI]) -> List[BindingsURI]:
        result: List[BindingsURI] = []
        for uri in uris:
            result.extend(self.registry.handler_for(uri).expand_excluded(uri))
        return result

    def effective_references(self, layer: LayerSpec) -> List[BindingsURI]:
        """Compute the layer's effective reference set (first-seen include order)."""
        included = self.expand_included(parse_references(layer.include))
        excluded = self.expand_excluded(parse_references(layer.exclude))
        effective = subtract_references(included, excluded)
        logger.debug(
            "Layer '%s': %d included, %d excluded, %d effective",
            layer.name,
            len(included),
            len(excluded),
            len(effective),
        )
        return effective

    def resolve(self, layer: LayerSpec) -> List[ContributedBindings]:
        """Load one contribution per effective reference."""
        contributions: List[ContributedBindings] = []
        for uri in self.effective_references(layer):
            contribution = self.registry.handler_for(uri).contributed_bindings(uri)
            logger.info("Layer '%s': loaded %s", layer.name, uri)
            contributions.append(contribution)
        return contributions


__all__ = ["LayerResolver"]
