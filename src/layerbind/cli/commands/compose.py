"""
layerbind compose command.

SUMMARY: Compose layered bindings for a confdir

Resolves every configured layer, wraps the result between the system
``final`` and ``default`` layers, and reports diagnostics.
"""

from __future__ import annotations

import argparse
import sys

from layerbind.cli import (
    OutputFormatter,
    add_modulepath_flag,
    add_standard_flags,
    add_variables_args,
    get_modulepath,
    load_settings,
    load_variables,
)
from layerbind.core.binder import BindingsComposer, CompositionContext
from layerbind.core.exceptions import LayerbindError

SUMMARY = "Compose layered bindings for a confdir"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_modulepath_flag(parser)
    add_variables_args(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Compose bindings - delegates to BindingsComposer."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        settings = load_settings(args)
        context = CompositionContext.from_settings(
            settings,
            variables=load_variables(args),
            modulepath=get_modulepath(args),
        )
        composer = BindingsComposer.from_settings(settings)
        layered = composer.compose(context)
    except (LayerbindError, OSError, ValueError) as e:
        formatter.error(e, error_code="compose_error")
        return 1

    diagnostics = composer.acceptor.diagnostics
    failed = composer.acceptor.has_errors()

    if formatter.json_mode:
        formatter.json_output(
            {
                "status": "error" if failed else "success",
                **layered.to_dict(),
                "diagnostics": [d.to_dict() for d in diagnostics],
            }
        )
        return 1 if failed else 0

    formatter.text(f"Layers ({len(layered.layers)}):")
    for layer in layered.layers:
        names = ", ".join(b.name for b in layer.bindings) or "-"
        formatter.text(f"  {layer.name}: {names}")

    if diagnostics:
        formatter.text("")
        formatter.text("Diagnostics:")
        for d in diagnostics:
            formatter.text(f"  [{d.severity.value}] {d.issue.code} at {d.location}: {d.message}")

    return 1 if failed else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
