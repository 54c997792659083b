"""Unified CLI output formatting utilities.

Consistent output for all layerbind CLI commands, in JSON or text mode.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Optional


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Output error result to stderr.

        Errors carrying ``to_json_error`` (layerbind errors) keep their code
        and context in JSON mode.
        """
        msg = message or str(error)
        if self.json_mode:
            to_json = getattr(error, "to_json_error", None)
            output = to_json() if callable(to_json) else {"code": error_code, "message": msg, "context": {}}
            output = {"error": error_code, **output, "message": msg}
            print(format_json(output, self.indent), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(format_json(data, self.indent))

    def text(self, message: str) -> None:
        print(message)


def format_json(data: Any, indent: int = 2) -> str:
    return json.dumps(data, indent=indent, default=str)


__all__ = ["OutputFormatter", "format_json"]
