"""layerbind configuration.

Two kinds of configuration live here:
- ``BinderConfig``: what to compose (layers and categories), from
  ``<confdir>/binder_config.yaml``
- ``ConfigManager``: how the engine runs (parallelism, directories,
  logging), from bundled defaults, ``<confdir>/layerbind.yaml`` and
  ``LAYERBIND_*`` environment variables

Usage:
    from layerbind.core.config import BinderConfig, ConfigManager

    binder_config = BinderConfig.load(confdir)
    settings = ConfigManager(confdir)
    settings.get("composition.parallel")
"""
from __future__ import annotations

from .binder import BINDER_CONFIG_NAME, BinderConfig, LayerSpec
from .manager import ENV_PREFIX, ConfigManager

__all__ = [
    "BINDER_CONFIG_NAME",
    "BinderConfig",
    "LayerSpec",
    "ConfigManager",
    "ENV_PREFIX",
]
