"""Bindings provider schemes.

Each scheme knows how to expand a (possibly wildcarded or optional)
reference into concrete references, and how to load the contribution behind
a concrete reference:

- ``module:/<module-or-*>/<name>``   bindings fragment shipped by a module
- ``confdir:/<name>``                bindings fragment under the confdir
- ``module-hiera:/<module-or-*>/<sub-path>``  hierarchical data in a module
- ``confdir-hiera:/<sub-path>``      hierarchical data under the confdir

Handlers are created per composition and bound to its ``ResolutionScope``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Type

from layerbind.core.exceptions import BindingsNotFoundError, MalformedReferenceError, UnknownSchemeError

from .context import ResolutionScope
from .hiera import HieraBindingsProvider
from .loader import NAME_SEPARATOR, split_name
from .model import ContributedBindings
from .uri import WILDCARD, BindingsURI

logger = logging.getLogger(__name__)


def _no_name(uri: BindingsURI) -> MalformedReferenceError:
    return MalformedReferenceError(
        f"Bad bindings uri, the {uri} has neither module name or wildcard '{WILDCARD}' in its first path position",
        context={"uri": str(uri)},
    )


class BindingsProviderScheme(ABC):
    """Base class for scheme handlers."""

    scheme: str = ""

    def __init__(self, scope: ResolutionScope) -> None:
        self.scope = scope

    def is_optional(self, uri: BindingsURI) -> bool:
        """Whether ``uri`` may silently resolve to nothing."""
        return uri.is_optional

    def reference(self, path: str) -> BindingsURI:
        return BindingsURI.build(self.scheme, path)

    @abstractmethod
    def expand_included(self, uri: BindingsURI) -> List[BindingsURI]:
        """Expand an include reference into concrete references."""

    @abstractmethod
    def expand_excluded(self, uri: BindingsURI) -> List[BindingsURI]:
        """Expand an exclude reference into concrete (normalized) references."""

    @abstractmethod
    def contributed_bindings(self, uri: BindingsURI) -> ContributedBindings:
        """Load the contribution behind a concrete reference."""


class SymbolicScheme(BindingsProviderScheme):
    """Shared behaviour of ``module:`` and ``confdir:``.

    The path names a fully qualified fragment; the two schemes differ only
    in which root directory a name is loaded from.
    """

    def fqn_from_path(self, uri: BindingsURI) -> Tuple[List[str], str]:
        """Split the path into name parts.

        Path segments and ``::`` both separate name parts, so ``/bar/foo``,
        ``/bar::foo`` and ``/::bar::foo`` all name ``bar::foo``.
        """
        segments = uri.segments()
        if not segments or not segments[0]:
            raise MalformedReferenceError(
                f"{self.scheme.capitalize()} scheme binding reference has no name: {uri}",
                context={"uri": str(uri)},
            )
        parts = split_name(NAME_SEPARATOR.join(segments))
        if not parts or not parts[0]:
            raise _no_name(uri)
        return parts, NAME_SEPARATOR.join(parts)

    @abstractmethod
    def root_for(self, parts: List[str]) -> Optional[Path]:
        """Directory the fragment named by ``parts`` is loaded from."""

    def contributed_bindings(self, uri: BindingsURI) -> ContributedBindings:
        parts, fqn = self.fqn_from_path(uri)
        bindings = self.scope.loader.load(self.root_for(parts), fqn)
        if bindings is None:
            raise BindingsNotFoundError(
                f"Cannot load bindings '{uri}' - no bindings found.",
                context={"uri": str(uri), "name": fqn},
            )
        # Symbolic bindings have no opinion about categorization.
        return ContributedBindings(name=fqn, bindings=bindings.copy(), effective_categories=None)


class ModuleScheme(SymbolicScheme):
    scheme = "module"

    def root_for(self, parts: List[str]) -> Optional[Path]:
        mod = self.scope.modules.get(parts[0])
        return mod.path if mod else None

    def expand_included(self, uri: BindingsURI) -> List[BindingsURI]:
        parts, fqn = self.fqn_from_path(uri)
        loader = self.scope.loader
        result: List[BindingsURI] = []
        if parts[0] == WILDCARD:
            # one reference per module that has the named fragment
            for mod_name, mod in self.scope.modules.items():
                expanded = NAME_SEPARATOR.join([mod_name, *parts[1:]])
                if loader.loadable(mod.path, expanded):
                    result.append(self.reference(expanded))
        elif self.is_optional(uri):
            if loader.loadable(self.root_for(parts), fqn):
                result.append(self.reference(fqn))
        else:
            # assume it exists; it may still be excluded before loading
            result.append(self.reference(fqn))
        return result

    def expand_excluded(self, uri: BindingsURI) -> List[BindingsURI]:
        parts, fqn = self.fqn_from_path(uri)
        if parts[0] == WILDCARD:
            return [
                self.reference(NAME_SEPARATOR.join([mod_name, *parts[1:]]))
                for mod_name in self.scope.modules
            ]
        return [self.reference(fqn)]


class ConfdirScheme(SymbolicScheme):
    scheme = "confdir"

    def root_for(self, parts: List[str]) -> Optional[Path]:
        return self.scope.confdir

    def _name(self, uri: BindingsURI) -> Tuple[bool, str]:
        parts, fqn = self.fqn_from_path(uri)
        if parts[0] != WILDCARD:
            return False, fqn
        rest = NAME_SEPARATOR.join(parts[1:])
        if not rest:
            raise _no_name(uri)
        return True, rest

    def expand_included(self, uri: BindingsURI) -> List[BindingsURI]:
        wildcard, name = self._name(uri)
        if wildcard or self.is_optional(uri):
            if self.scope.loader.loadable(self.scope.confdir, name):
                return [self.reference(name)]
            return []
        return [self.reference(name)]

    def expand_excluded(self, uri: BindingsURI) -> List[BindingsURI]:
        return [self.reference(self._name(uri)[1])]


class HieraScheme(BindingsProviderScheme):
    """Shared behaviour of the hierarchical data schemes."""

    def has_marker(self, directory: Optional[Path]) -> bool:
        return directory is not None and (directory / self.scope.context.marker_file).is_file()

    def provider(self, uri: BindingsURI, directory: Path) -> HieraBindingsProvider:
        return HieraBindingsProvider(
            str(uri),
            directory,
            self.scope.acceptor,
            marker_file=self.scope.context.marker_file,
        )


class ModuleHieraScheme(HieraScheme):
    """Hierarchical data relative to a module root.

    ``module-hiera:/*`` selects the root data source of every module that has
    one; ``module-hiera:/foo/bar`` selects ``<foo root>/bar``.
    """

    scheme = "module-hiera"

    def _split(self, uri: BindingsURI) -> Tuple[str, List[str]]:
        segments = uri.segments()
        if not segments or not segments[0]:
            raise _no_name(uri)
        return segments[0], segments[1:]

    def _directory(self, module_name: str, sub_path: List[str]) -> Optional[Path]:
        mod = self.scope.modules.get(module_name)
        return mod.path.joinpath(*sub_path) if mod else None

    def _reference(self, module_name: str, sub_path: List[str]) -> BindingsURI:
        return self.reference("/".join([module_name, *sub_path]))

    def expand_included(self, uri: BindingsURI) -> List[BindingsURI]:
        first, sub_path = self._split(uri)
        if first == WILDCARD:
            return [
                self._reference(name, sub_path)
                for name in self.scope.modules
                if self.has_marker(self._directory(name, sub_path))
            ]
        if self.is_optional(uri):
            if self.has_marker(self._directory(first, sub_path)):
                return [self._reference(first, sub_path)]
            return []
        return [self._reference(first, sub_path)]

    def expand_excluded(self, uri: BindingsURI) -> List[BindingsURI]:
        first, sub_path = self._split(uri)
        if first == WILDCARD:
            return [self._reference(name, sub_path) for name in self.scope.modules]
        return [self._reference(first, sub_path)]

    def contributed_bindings(self, uri: BindingsURI) -> ContributedBindings:
        first, sub_path = self._split(uri)
        directory = self._directory(first, sub_path)
        if directory is None:
            raise BindingsNotFoundError(
                f"Cannot load bindings '{uri}' - no module named '{first}'.",
                context={"uri": str(uri), "module": first},
            )
        return self.provider(uri, directory).load(self.scope.variables)


class ConfdirHieraScheme(HieraScheme):
    """Hierarchical data relative to the confdir (``confdir-hiera:/`` is its root)."""

    scheme = "confdir-hiera"

    def _sub_path(self, uri: BindingsURI) -> Tuple[bool, List[str]]:
        segments = uri.segments()
        if segments and segments[0] == WILDCARD:
            return True, segments[1:]
        return False, segments

    def _directory(self, sub_path: List[str]) -> Path:
        return self.scope.confdir.joinpath(*sub_path)

    def expand_included(self, uri: BindingsURI) -> List[BindingsURI]:
        wildcard, sub_path = self._sub_path(uri)
        if wildcard or self.is_optional(uri):
            if self.has_marker(self._directory(sub_path)):
                return [self.reference("/".join(sub_path))]
            return []
        return [self.reference("/".join(sub_path))]

    def expand_excluded(self, uri: BindingsURI) -> List[BindingsURI]:
        return [self.reference("/".join(self._sub_path(uri)[1]))]

    def contributed_bindings(self, uri: BindingsURI) -> ContributedBindings:
        return self.provider(uri, self._directory(self._sub_path(uri)[1])).load(self.scope.variables)


DEFAULT_SCHEMES: Dict[str, Type[BindingsProviderScheme]] = {
    ModuleHieraScheme.scheme: ModuleHieraScheme,
    ConfdirHieraScheme.scheme: ConfdirHieraScheme,
    ModuleScheme.scheme: ModuleScheme,
    ConfdirScheme.scheme: ConfdirScheme,
}


class SchemeRegistry:
    """Maps scheme names to handler instances for one composition."""

    def __init__(self, handlers: Mapping[str, BindingsProviderScheme]) -> None:
        self._handlers = dict(handlers)

    @classmethod
    def build(
        cls,
        scope: ResolutionScope,
        extra: Optional[Mapping[str, Type[BindingsProviderScheme]]] = None,
    ) -> "SchemeRegistry":
        classes = {**DEFAULT_SCHEMES, **(extra or {})}
        return cls({name: handler_cls(scope) for name, handler_cls in classes.items()})

    def schemes(self) -> List[str]:
        return sorted(self._handlers)

    def handler_for(self, uri: BindingsURI) -> BindingsProviderScheme:
        handler = self._handlers.get(uri.scheme)
        if handler is None:
            raise UnknownSchemeError(
                f"Unknown bindings provider scheme: '{uri.scheme}'",
                context={"uri": str(uri), "known": self.schemes()},
            )
        return handler


__all__ = [
    "BindingsProviderScheme",
    "SymbolicScheme",
    "ModuleScheme",
    "ConfdirScheme",
    "HieraScheme",
    "ModuleHieraScheme",
    "ConfdirHieraScheme",
    "DEFAULT_SCHEMES",
    "SchemeRegistry",
]
