"""Tests for binder configuration loading."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from helpers.io_utils import write_binder_config, write_text
from layerbind.core.config import BinderConfig, LayerSpec
from layerbind.core.exceptions import BinderConfigError


class TestFromDict:
    def test_parses_layers_and_categories(self) -> None:
        config = BinderConfig.from_dict(
            {
                "version": 1,
                "layers": [
                    {"name": "site", "include": "confdir:/site"},
                    {"name": "modules", "include": ["module:/*::default"], "exclude": ["module:/bad::default"]},
                ],
                "categories": [{"name": "node", "value": "{{ fqdn }}"}, {"name": "common", "value": "true"}],
            }
        )
        assert config.layers == (
            LayerSpec("site", ("confdir:/site",), ()),
            LayerSpec("modules", ("module:/*::default",), ("module:/bad::default",)),
        )
        assert config.layer_names() == ["site", "modules"]
        assert config.category_names() == ["node", "common"]
        assert config.categorization == (("node", "{{ fqdn }}"), ("common", "true"))

    def test_schema_errors_are_collected(self) -> None:
        with pytest.raises(BinderConfigError) as excinfo:
            BinderConfig.from_dict({"layers": [{"include": 3}], "categories": "x"})
        assert len(excinfo.value.context["errors"]) >= 2

    def test_duplicate_layer_names(self) -> None:
        with pytest.raises(BinderConfigError, match="duplicate layer name 'a'"):
            BinderConfig.from_dict({"layers": [{"name": "a"}, {"name": "a"}], "categories": []})

    def test_duplicate_category_names(self) -> None:
        with pytest.raises(BinderConfigError, match="duplicate category name 'node'"):
            BinderConfig.from_dict(
                {
                    "layers": [],
                    "categories": [{"name": "node", "value": "a"}, {"name": "node", "value": "b"}],
                }
            )

    def test_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            BinderConfig.from_dict({"layers": []})


class TestLoad:
    def test_confdir_file_wins(self, tmp_path: Path) -> None:
        path = write_binder_config(tmp_path, [{"name": "only"}])
        config = BinderConfig.load(tmp_path)
        assert config.layer_names() == ["only"]
        assert config.source == path

    def test_yml_suffix(self, tmp_path: Path) -> None:
        write_text(tmp_path / "binder_config.yml", "layers: [{name: x}]\ncategories: []\n")
        assert BinderConfig.load(tmp_path).layer_names() == ["x"]

    def test_falls_back_to_bundled(self, tmp_path: Path) -> None:
        config = BinderConfig.load(tmp_path)
        assert config.layer_names() == ["site", "modules"]
        assert config.category_names() == ["node", "osfamily", "environment", "common"]

    def test_invalid_yaml_is_not_ignored(self, tmp_path: Path) -> None:
        write_text(tmp_path / "binder_config.yaml", "layers: [\n")
        with pytest.raises(yaml.YAMLError):
            BinderConfig.load(tmp_path)
