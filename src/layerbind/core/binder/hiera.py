"""Hierarchical data provider.

A hierarchical data source is a directory holding a marker file
(``hiera.yaml`` by default)::

    version: 2
    hierarchy:
      - category: node
        value: "{{ fqdn }}"
        path: "nodes/{{ fqdn }}"
      - category: common
        value: "true"
        path: common

Each level names a category, the expression for its value, and a data file
(relative to the source directory, without suffix). Levels are listed
highest precedence first and become the contribution's effective
categories; data files that do not exist are skipped. A level path that
renders an empty component (an undefined fact) selects no data, and one
that leaves the source directory is an invalid configuration.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping, NoReturn, Optional

import yaml

from layerbind.core.diagnostics import HIERA_CONFIG_INVALID, Acceptor
from layerbind.core.exceptions import BindingsNotFoundError, HieraConfigError
from layerbind.core.schemas import schema_errors
from layerbind.core.utils.io import read_yaml, resolve_yaml_path

from .categories import evaluate_category, evaluate_expression
from .model import BindingGroup, Bindings, Category, ContributedBindings, EffectiveCategories

logger = logging.getLogger(__name__)


class HieraBindingsProvider:
    """Loads one hierarchical data source into a contribution."""

    def __init__(
        self,
        source_id: str,
        path: Path,
        acceptor: Acceptor,
        *,
        marker_file: str = "hiera.yaml",
    ) -> None:
        self.source_id = source_id
        self.path = Path(path)
        self.acceptor = acceptor
        self.marker_file = marker_file

    @property
    def marker_path(self) -> Path:
        return self.path / self.marker_file

    def _invalid(self, reason: str) -> NoReturn:
        self.acceptor.accept(HIERA_CONFIG_INVALID, self.marker_path, {"reason": reason})
        raise HieraConfigError(
            f"Invalid hierarchical data source '{self.source_id}': {reason}",
            context={"source": self.source_id, "path": str(self.marker_path)},
        )

    def _read_config(self) -> Mapping[str, Any]:
        if not self.marker_path.is_file():
            raise BindingsNotFoundError(
                f"Cannot load bindings '{self.source_id}' - no {self.marker_file} in {self.path}",
                context={"source": self.source_id, "path": str(self.path)},
            )
        try:
            data = read_yaml(self.marker_path, default={}, raise_on_error=True)
        except yaml.YAMLError as exc:
            self._invalid(f"unparsable YAML: {exc}")
        errors = schema_errors(data, "hiera")
        if errors:
            self._invalid("; ".join(errors))
        return data

    def _data_parts(self, relative: str) -> Optional[List[str]]:
        """Split an evaluated level path; ``None`` when a component rendered empty."""
        parts = relative.split("/")
        if relative.startswith("/") or any(p in {".", ".."} for p in parts):
            self._invalid(f"data path '{relative}' must stay inside {self.path}")
        if any(not p for p in parts):
            return None
        return parts

    def load(self, variables: Mapping[str, Any]) -> ContributedBindings:
        config = self._read_config()
        categories: List[Category] = []
        groups: List[BindingGroup] = []
        for level in config["hierarchy"]:
            category = evaluate_category(level["category"], level["value"], variables)
            categories.append(category)

            relative = str(evaluate_expression(level["path"], variables))
            parts = self._data_parts(relative)
            data_file = resolve_yaml_path(self.path.joinpath(*parts)) if parts else None
            if data_file is None:
                logger.debug("No data for %s=%s in %s", category.categorization, category.value, self.path)
                continue
            values = read_yaml(data_file, default={}, raise_on_error=True)
            if not isinstance(values, dict):
                self._invalid(f"data file {data_file} must contain a mapping")
            groups.append(BindingGroup(values=values, categories=(category,)))

        logger.debug("Loaded %d data file(s) for '%s'", len(groups), self.source_id)
        return ContributedBindings(
            name=self.source_id,
            bindings=Bindings(name=self.source_id, groups=groups),
            effective_categories=EffectiveCategories(tuple(categories)),
        )


__all__ = ["HieraBindingsProvider"]
