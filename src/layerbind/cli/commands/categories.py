"""
layerbind categories command.

SUMMARY: Show effective categories for the given facts
"""

from __future__ import annotations

import argparse
import sys

from layerbind.cli import (
    OutputFormatter,
    add_standard_flags,
    add_variables_args,
    load_settings,
    load_variables,
)
from layerbind.core.binder import BindingsComposer, CompositionContext
from layerbind.core.exceptions import LayerbindError

SUMMARY = "Show effective categories for the given facts"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_variables_args(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        settings = load_settings(args)
        context = CompositionContext.from_settings(settings, variables=load_variables(args))
        categories = BindingsComposer.from_settings(settings).effective_categories(context)
    except (LayerbindError, OSError, ValueError) as e:
        formatter.error(e, error_code="categories_error")
        return 1

    if formatter.json_mode:
        formatter.json_output({"categories": [c.to_dict() for c in categories]})
    else:
        for category in categories:
            formatter.text(f"{category.categorization}: {category.value}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
