"""Test helper modules for the layerbind test suite.

- io_utils: writers for YAML, bindings fragments, hiera sources and binder configs
- binder: fake collaborators (module provider, recording loader, system bindings)
"""
from __future__ import annotations

from helpers.io_utils import (
    write_yaml,
    write_text,
    write_bindings,
    write_hiera,
    write_binder_config,
)
from helpers.binder import (
    StaticModuleProvider,
    RecordingLoader,
    StaticSystemBindings,
    make_context,
    fragment_names,
    names_by_layer,
)
