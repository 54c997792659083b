from __future__ import annotations

import json
from pathlib import Path

import pytest

from layerbind.cli._dispatcher import build_parser, discover_domains, discover_root_commands, main


def test_discovers_root_commands_and_domains() -> None:
    assert {"compose", "categories"} <= set(discover_root_commands())
    assert "config" in discover_domains()


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    from layerbind import __version__

    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "usage: layerbind" in capsys.readouterr().out


def test_domain_without_command_prints_domain_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["config"]) == 0
    assert "show" in capsys.readouterr().out


def test_dispatches_to_command(confdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["compose", "--confdir", str(confdir), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [layer["name"] for layer in payload["layers"]] == ["final", "site", "modules", "default"]
