"""Tests for module discovery and the module index."""
from __future__ import annotations

from pathlib import Path

import pytest

from layerbind.core.binder.modules import Module, ModuleIndex, ModulePathProvider, ModuleProvider


def _mkdirs(base: Path, *names: str) -> None:
    for name in names:
        (base / name).mkdir(parents=True)


class TestModulePathProvider:
    def test_discovers_valid_module_directories(self, tmp_path: Path) -> None:
        _mkdirs(tmp_path, "ntp", "apache", "Bad-Name", "1st")
        (tmp_path / "README.md").write_text("x", encoding="utf-8")

        names = [m.name for m in ModulePathProvider([tmp_path]).modules()]
        assert names == ["apache", "ntp"]

    def test_first_modulepath_entry_wins(self, tmp_path: Path) -> None:
        first, second = tmp_path / "first", tmp_path / "second"
        _mkdirs(first, "ntp")
        _mkdirs(second, "ntp", "ssh")

        modules = {m.name: m.path for m in ModulePathProvider([first, second]).modules()}
        assert modules == {"ntp": (first / "ntp").resolve(), "ssh": (second / "ssh").resolve()}

    def test_missing_entries_are_skipped(self, tmp_path: Path) -> None:
        assert ModulePathProvider([tmp_path / "missing"]).modules() == []

    def test_satisfies_provider_protocol(self, tmp_path: Path) -> None:
        assert isinstance(ModulePathProvider([tmp_path]), ModuleProvider)


class TestModuleIndex:
    def test_mapping_behaviour(self, tmp_path: Path) -> None:
        index = ModuleIndex([Module("a", tmp_path / "a"), Module("b", tmp_path / "b")])
        assert list(index) == ["a", "b"]
        assert len(index) == 2
        assert index["a"].path == tmp_path / "a"
        assert index.get("missing") is None

    def test_duplicate_names_keep_first(self, tmp_path: Path) -> None:
        index = ModuleIndex([Module("a", tmp_path / "one"), Module("a", tmp_path / "two")])
        assert index["a"].path == tmp_path / "one"

    def test_is_read_only(self, tmp_path: Path) -> None:
        index = ModuleIndex([Module("a", tmp_path)])
        with pytest.raises(TypeError):
            index["b"] = Module("b", tmp_path)  # type: ignore[index]
