import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'layerbind' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from layerbind.core.config.manager import ENV_PREFIX
from layerbind.core.log_config import reset_logging_for_tests
from helpers.io_utils import write_bindings, write_hiera


@pytest.fixture(autouse=True)
def _isolate_layerbind_env(monkeypatch):
    """Settings must not depend on the developer's shell or earlier tests."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    reset_logging_for_tests()
    yield
    reset_logging_for_tests()


@pytest.fixture
def confdir(tmp_path: Path) -> Path:
    path = tmp_path / "conf"
    path.mkdir()
    return path


@pytest.fixture
def modules_dir(confdir: Path) -> Path:
    """The default ``modules.path`` entry (``<confdir>/modules``)."""
    path = confdir / "modules"
    path.mkdir()
    return path


@pytest.fixture
def make_module(modules_dir: Path) -> Callable[..., Path]:
    """Factory creating a module directory with optional fragments and hiera data.

    Example:
        make_module("ntp", bindings={"ntp::default": {"ntp::servers": ["a"]}})
    """

    def _make(
        name: str,
        *,
        bindings: Optional[Mapping[str, Mapping[str, Any]]] = None,
        hierarchy: Optional[list] = None,
        data: Optional[Dict[str, Mapping[str, Any]]] = None,
    ) -> Path:
        root = modules_dir / name
        root.mkdir(parents=True, exist_ok=True)
        for fqn, values in (bindings or {}).items():
            write_bindings(root, fqn, values)
        if hierarchy is not None:
            write_hiera(root, hierarchy, data)
        return root

    return _make
