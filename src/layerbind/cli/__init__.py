"""
layerbind CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (commands/, config/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter, format_json
from ._args import (
    add_json_flag,
    add_confdir_flag,
    add_verbose_flag,
    add_variables_args,
    add_modulepath_flag,
    add_standard_flags,
)
from ._utils import (
    get_confdir,
    load_settings,
    load_variables,
    get_modulepath,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    "format_json",
    # Argument helpers
    "add_json_flag",
    "add_confdir_flag",
    "add_verbose_flag",
    "add_variables_args",
    "add_modulepath_flag",
    "add_standard_flags",
    # Utilities
    "get_confdir",
    "load_settings",
    "load_variables",
    "get_modulepath",
]
