"""Common CLI argument registration utilities.

Reusable argument registration functions shared by layerbind commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_confdir_flag(parser: argparse.ArgumentParser) -> None:
    """Add --confdir flag (defaults to the current directory)."""
    parser.add_argument(
        "--confdir",
        type=str,
        help="Configuration directory (default: current directory)",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log progress to stderr",
    )


def add_variables_args(parser: argparse.ArgumentParser) -> None:
    """Add --facts / --var for the variables category expressions see."""
    parser.add_argument(
        "--facts",
        type=str,
        help="YAML file with fact variables",
    )
    parser.add_argument(
        "--var",
        dest="variables",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a variable (dotted keys nest, e.g. os.family=redhat); repeatable",
    )


def add_modulepath_flag(parser: argparse.ArgumentParser) -> None:
    """Add --modulepath (repeatable) overriding the configured modules.path."""
    parser.add_argument(
        "--modulepath",
        action="append",
        metavar="DIR",
        help="Module directory to scan; repeatable (default: settings modules.path)",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Adds: --json, --confdir, --verbose"""
    add_json_flag(parser)
    add_confdir_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_confdir_flag",
    "add_verbose_flag",
    "add_variables_args",
    "add_modulepath_flag",
    "add_standard_flags",
]
