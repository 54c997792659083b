"""End-to-end tests for BindingsComposer."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pytest

from helpers.binder import StaticSystemBindings, make_context, names_by_layer
from helpers.io_utils import write_binder_config, write_bindings, write_hiera
from layerbind.core.binder import BindingsComposer, CompositionContext, ModulePathProvider
from layerbind.core.binder.composer import assemble_layers
from layerbind.core.binder.model import NamedLayer
from layerbind.core.config import BinderConfig, ConfigManager
from layerbind.core.diagnostics import (
    MISSING_CATEGORY_PRECEDENCE,
    PRECEDENCE_MISMATCH_IN_CONTRIBUTION,
    Acceptor,
)
from layerbind.core.exceptions import (
    BindingsNotFoundError,
    CategoryTypeError,
    MalformedReferenceError,
    UnknownSchemeError,
)


def _config(layers: List[Dict[str, Any]], categories: List[Dict[str, str]] | None = None) -> BinderConfig:
    return BinderConfig.from_dict({"layers": layers, "categories": categories or []})


@pytest.fixture
def modules(tmp_path: Path) -> Dict[str, Path]:
    """Four modules; only ``ntp`` and ``ssh`` ship ``default`` bindings."""
    mods = {}
    for name in ("apache", "ntp", "mysql", "ssh"):
        mods[name] = tmp_path / "modules" / name
        mods[name].mkdir(parents=True)
    write_bindings(mods["ntp"], "ntp::default", {"ntp::servers": ["pool"]})
    write_bindings(mods["ssh"], "ssh::default", {"ssh::port": 22})
    return mods


class TestLayerOrder:
    def test_no_configured_layers(self, tmp_path: Path) -> None:
        composer = BindingsComposer(_config([]))
        layered = composer.compose(make_context(tmp_path))
        assert layered.layer_names() == ["final", "default"]
        assert names_by_layer(layered.layers) == {
            "final": ["system::final"],
            "default": ["system::default"],
        }

    def test_single_layer(self, tmp_path: Path, modules) -> None:
        composer = BindingsComposer(_config([{"name": "modules", "include": "module:/*::default"}]))
        layered = composer.compose(make_context(tmp_path, modules))
        assert layered.layer_names() == ["final", "modules", "default"]

    def test_many_layers_keep_declared_order(self, tmp_path: Path, modules) -> None:
        write_bindings(tmp_path, "site", {"x": 1})
        composer = BindingsComposer(
            _config(
                [
                    {"name": "site", "include": ["confdir:/site"]},
                    {"name": "empty"},
                    {"name": "modules", "include": ["module:/*::default"]},
                ]
            )
        )
        layered = composer.compose(make_context(tmp_path, modules))
        assert names_by_layer(layered.layers) == {
            "final": ["system::final"],
            "site": ["site"],
            "empty": [],
            "modules": ["ntp::default", "ssh::default"],
            "default": ["system::default"],
        }
        assert layered.layer_names() == ["final", "site", "empty", "modules", "default"]

    def test_assemble_layers(self) -> None:
        layered = assemble_layers([NamedLayer.of("a", []), NamedLayer.of("b", [])], StaticSystemBindings())
        assert layered.layer_names() == ["final", "a", "b", "default"]


class TestResolution:
    def test_wildcard_selects_m_of_n_modules(self, tmp_path: Path, modules) -> None:
        composer = BindingsComposer(_config([{"name": "modules", "include": "module:/*::default"}]))
        layer = composer.compose(make_context(tmp_path, modules)).layer("modules")
        assert [b.name for b in layer.bindings] == ["ntp::default", "ssh::default"]

    def test_missing_optional_reference_is_skipped(self, tmp_path: Path) -> None:
        composer = BindingsComposer(_config([{"name": "site", "include": "confdir:/site?optional"}]))
        assert composer.compose(make_context(tmp_path)).layer("site").bindings == ()

    def test_missing_required_reference_fails(self, tmp_path: Path) -> None:
        composer = BindingsComposer(_config([{"name": "site", "include": "confdir:/site"}]))
        with pytest.raises(BindingsNotFoundError, match="Cannot load bindings 'confdir:/site'"):
            composer.compose(make_context(tmp_path))

    def test_unknown_scheme_fails(self, tmp_path: Path) -> None:
        composer = BindingsComposer(_config([{"name": "x", "include": "ftp:/site"}]))
        with pytest.raises(UnknownSchemeError):
            composer.compose(make_context(tmp_path))

    def test_malformed_reference_fails(self, tmp_path: Path) -> None:
        composer = BindingsComposer(_config([{"name": "x", "include": "module:/"}]))
        with pytest.raises(MalformedReferenceError):
            composer.compose(make_context(tmp_path))

    def test_module_index_is_built_once_per_call(self, tmp_path: Path, modules) -> None:
        context = make_context(tmp_path, modules)
        composer = BindingsComposer(
            _config(
                [
                    {"name": "one", "include": "module:/*::default"},
                    {"name": "two", "include": "module:/*::default"},
                ]
            )
        )
        composer.compose(context)
        assert context.module_provider.calls == 1
        composer.compose(context)
        assert context.module_provider.calls == 2


class TestDeterminism:
    def test_repeated_composition_is_equal(self, tmp_path: Path, modules) -> None:
        composer = BindingsComposer(_config([{"name": "modules", "include": "module:/*::default"}]))
        first = composer.compose(make_context(tmp_path, modules))
        second = composer.compose(make_context(tmp_path, modules))
        assert first.to_dict() == second.to_dict()

    def test_results_do_not_share_fragments(self, tmp_path: Path, modules) -> None:
        composer = BindingsComposer(_config([{"name": "modules", "include": "module:/ntp::default"}]))
        first = composer.compose(make_context(tmp_path, modules))
        first.layer("modules").bindings[0].groups[0].values["ntp::servers"].append("other")
        first.layer("default").bindings[0].groups[0].values.clear()

        second = composer.compose(make_context(tmp_path, modules))
        assert second.layer("modules").bindings[0].groups[0].values == {"ntp::servers": ["pool"]}
        assert second.layer("default").bindings[0].groups[0].values

    def test_parallel_resolution_matches_sequential(self, tmp_path: Path, modules) -> None:
        write_bindings(tmp_path, "site", {"x": 1})
        layers = [
            {"name": "site", "include": "confdir:/site"},
            {"name": "modules", "include": "module:/*::default"},
            {"name": "ntp", "include": "module:/ntp::default"},
            {"name": "rest", "include": "module:/*::default", "exclude": "module:/ntp::default"},
        ]
        sequential = BindingsComposer(_config(layers)).compose(make_context(tmp_path, modules))
        parallel = BindingsComposer(_config(layers), parallel=True, max_workers=3).compose(
            make_context(tmp_path, modules)
        )
        assert parallel.to_dict() == sequential.to_dict()
        assert parallel.layer_names() == ["final", "site", "modules", "ntp", "rest", "default"]


class TestCategoryPrecedence:
    def test_region_os_mismatch_is_reported_but_not_fatal(self, tmp_path: Path) -> None:
        write_hiera(
            tmp_path,
            [
                {"category": "os", "value": "{{ os }}", "path": "os/{{ os }}"},
                {"category": "region", "value": "{{ region }}", "path": "regions/{{ region }}"},
            ],
        )
        acceptor = Acceptor()
        composer = BindingsComposer(
            _config(
                [{"name": "site", "include": "confdir-hiera:/"}],
                [{"name": "region", "value": "{{ region }}"}, {"name": "os", "value": "{{ os }}"}],
            ),
            acceptor=acceptor,
        )
        layered = composer.compose(make_context(tmp_path, variables={"os": "debian", "region": "eu"}))

        assert layered.layer_names() == ["final", "site", "default"]
        [diagnostic] = acceptor.diagnostics
        assert diagnostic.issue is PRECEDENCE_MISMATCH_IN_CONTRIBUTION
        assert diagnostic.details["categorization"] == "region"
        assert diagnostic.details["contribution"] == "confdir-hiera:/"

    def test_caller_supplied_empty_acceptor_collects_diagnostics(self, tmp_path: Path) -> None:
        write_hiera(tmp_path, [{"category": "node", "value": "{{ fqdn }}", "path": "nodes/{{ fqdn }}"}])
        acceptor = Acceptor()
        assert len(acceptor) == 0

        composer = BindingsComposer(
            _config([{"name": "site", "include": "confdir-hiera:/"}], [{"name": "common", "value": "true"}]),
            acceptor=acceptor,
        )
        assert composer.acceptor is acceptor

        composer.compose(make_context(tmp_path, variables={"fqdn": "web01"}))
        assert len(acceptor) == 1
        assert acceptor.of_issue(MISSING_CATEGORY_PRECEDENCE)[0].details["categorization"] == "node"
        assert not acceptor.has_errors()

    def test_hiera_data_lands_in_layer(self, tmp_path: Path, modules) -> None:
        write_hiera(
            modules["apache"],
            [{"category": "common", "value": "true", "path": "common"}],
            {"common": {"apache::port": 80}},
        )
        composer = BindingsComposer(
            _config(
                [{"name": "modules", "include": ["module-hiera:/*/", "module:/*::default"]}],
                [{"name": "common", "value": "true"}],
            )
        )
        layer = composer.compose(make_context(tmp_path, modules)).layer("modules")
        assert [b.name for b in layer.bindings] == ["module-hiera:/apache", "ntp::default", "ssh::default"]
        assert not composer.acceptor.diagnostics


class TestEffectiveCategories:
    def test_evaluated_per_call(self, tmp_path: Path) -> None:
        composer = BindingsComposer(
            _config([], [{"name": "node", "value": "{{ fqdn }}"}, {"name": "common", "value": "true"}])
        )
        first = composer.effective_categories(make_context(tmp_path, variables={"fqdn": "A.example"}))
        second = composer.effective_categories(make_context(tmp_path, variables={"fqdn": "b.example"}))
        assert first.as_dict() == {"node": "a.example", "common": "true"}
        assert second.as_dict() == {"node": "b.example", "common": "true"}

    def test_type_mismatch(self, tmp_path: Path) -> None:
        composer = BindingsComposer(_config([], [{"name": "node", "value": "{{ fqdn }}"}]))
        with pytest.raises(CategoryTypeError, match="category node evaluation resulted in a: 'dict'"):
            composer.effective_categories(make_context(tmp_path, variables={"fqdn": {"a": 1}}))


class TestFromSettings:
    def test_uses_confdir_binder_config_and_modulepath(self, confdir: Path, make_module) -> None:
        make_module("ntp", bindings={"ntp::default": {"ntp::servers": ["pool"]}})
        write_binder_config(
            confdir,
            [{"name": "modules", "include": "module:/*::default"}],
            [{"name": "common", "value": "true"}],
        )
        (confdir / "layerbind.yaml").write_text("composition:\n  parallel: true\n", encoding="utf-8")

        settings = ConfigManager(confdir, env={})
        composer = BindingsComposer.from_settings(settings)
        context = CompositionContext.from_settings(settings)

        assert composer.parallel is True
        assert isinstance(context.module_provider, ModulePathProvider)
        assert names_by_layer(composer.compose(context).layers)["modules"] == ["ntp::default"]

    def test_bundled_binder_config_is_used_without_confdir_file(self, confdir: Path) -> None:
        composer = BindingsComposer.from_settings(ConfigManager(confdir, env={}))
        assert composer.config.layer_names() == ["site", "modules"]
        layered = composer.compose(CompositionContext.from_settings(ConfigManager(confdir, env={})))
        assert layered.layer_names() == ["final", "site", "modules", "default"]
