"""
Auto-discovery CLI dispatcher for layerbind.

Scans subfolders for commands and automatically registers them:
- cli/commands/<name>.py  => `layerbind <name>`
- cli/<domain>/<name>.py  => `layerbind <domain> <name>`

A command module exposes SUMMARY, register_args(parser) and main(args).
"""

from __future__ import annotations

import argparse
import importlib
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any


@lru_cache(maxsize=1)
def discover_domains() -> dict[str, Path]:
    """Discover CLI domain subfolders (config, ...)."""
    cli_dir = Path(__file__).parent
    domains = {}
    for item in cli_dir.iterdir():
        if item.name == "commands":
            continue
        if item.is_dir() and not item.name.startswith("_"):
            has_commands = any(
                f.suffix == ".py" and not f.name.startswith("_")
                for f in item.iterdir()
            )
            if has_commands:
                domains[item.name] = item
    return domains


def _import_commands(directory: Path, package: str) -> dict[str, dict[str, Any]]:
    commands: dict[str, dict[str, Any]] = {}
    for item in sorted(directory.glob("*.py")):
        if item.name.startswith("_"):
            continue
        cmd_name = item.stem
        try:
            module = importlib.import_module(f"{package}.{cmd_name}")
        except ImportError as e:
            print(f"Warning: Could not import command {cmd_name}: {e}", file=sys.stderr)
            continue
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", cmd_name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }
    return commands


@lru_cache(maxsize=1)
def discover_root_commands() -> dict[str, dict[str, Any]]:
    """Discover top-level commands under cli/commands (no domain prefix)."""
    commands_dir = Path(__file__).parent / "commands"
    if not commands_dir.exists():
        return {}
    return _import_commands(commands_dir, "layerbind.cli.commands")


@lru_cache(maxsize=16)
def discover_commands(domain: str) -> dict[str, dict[str, Any]]:
    """Discover all commands in a domain subfolder."""
    return _import_commands(Path(__file__).parent / domain, f"layerbind.cli.{domain}")


def _get_version() -> str:
    from layerbind import __version__

    return __version__


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered domains and commands."""
    parser = argparse.ArgumentParser(
        prog="layerbind",
        description="layerbind - layered bindings composition",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="domain",
        title="commands",
        metavar="<command>",
    )

    for cmd_name, cmd_info in sorted(discover_root_commands().items()):
        cmd_parser = subparsers.add_parser(cmd_name.replace("_", "-"), help=cmd_info["summary"])
        if cmd_info["register_args"]:
            cmd_info["register_args"](cmd_parser)
        if cmd_info["main"]:
            cmd_parser.set_defaults(_func=cmd_info["main"])

    for domain_name in sorted(discover_domains().keys()):
        domain_commands = discover_commands(domain_name)
        if not domain_commands:
            continue
        domain_parser = subparsers.add_parser(domain_name, help=f"{domain_name} commands")
        cmd_subparsers = domain_parser.add_subparsers(
            dest="command",
            title="commands",
            metavar="<command>",
        )
        for cmd_name, cmd_info in sorted(domain_commands.items()):
            cmd_parser = cmd_subparsers.add_parser(cmd_name, help=cmd_info["summary"])
            if cmd_info["register_args"]:
                cmd_info["register_args"](cmd_parser)
            if cmd_info["main"]:
                cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the layerbind CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.domain:
        parser.print_help()
        return 0

    func = getattr(args, "_func", None)
    if func is None:
        domain_parser = parser._subparsers._group_actions[0].choices.get(args.domain)
        if domain_parser:
            domain_parser.print_help()
        return 0

    return int(func(args) or 0)


__all__ = ["main", "build_parser", "discover_domains", "discover_commands", "discover_root_commands"]
