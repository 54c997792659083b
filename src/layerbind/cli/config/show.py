"""
layerbind config show command.

SUMMARY: Show current settings

Displays the merged settings from bundled defaults, confdir overrides and
environment variables. Supports filtering by key.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from layerbind.cli import OutputFormatter, add_confdir_flag, add_json_flag, get_confdir
from layerbind.core.config import ConfigManager
from layerbind.core.exceptions import LayerbindError
from layerbind.core.utils.io import dump_yaml_string

SUMMARY = "Show current settings"


def _nest_key(key: str, value: Any) -> Any:
    """Nest a dot-notation key into a YAML-friendly mapping."""
    out = value
    for part in reversed([p for p in str(key).split(".") if p]):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific settings key to show (e.g., 'composition.parallel')",
    )
    add_json_flag(parser)
    add_confdir_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Show settings - delegates to ConfigManager."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        config_manager = ConfigManager(get_confdir(args))
        if args.key:
            value = config_manager.get(args.key)
            if value is None:
                formatter.text(f"Key not found: {args.key}")
                return 1
            data = _nest_key(args.key, value)
        else:
            data = config_manager.get_all()
    except (LayerbindError, OSError, ValueError) as e:
        formatter.error(e, error_code="config_show_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(data)
    else:
        formatter.text(dump_yaml_string(data).rstrip())
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
