from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_LAYERBIND_HANDLER: logging.Handler | None = None
_CONFIGURED_TARGET: str | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(*, level: str = "WARNING", log_file: Optional[Path] = None) -> None:
    """Install a single layerbind handler on the ``layerbind`` logger.

    Logs go to ``log_file`` when given, else to stderr (stdout stays clean for
    JSON output). Idempotent per-process: reconfiguring replaces the handler.
    """
    global _LAYERBIND_HANDLER, _CONFIGURED_TARGET

    target = str(Path(log_file).resolve()) if log_file else "<stderr>"
    logger = logging.getLogger("layerbind")
    logger.setLevel(_level_from_name(level))

    if _CONFIGURED_TARGET == target and _LAYERBIND_HANDLER is not None:
        _LAYERBIND_HANDLER.setLevel(_level_from_name(level))
        return

    if _LAYERBIND_HANDLER is not None:
        logger.removeHandler(_LAYERBIND_HANDLER)
        _LAYERBIND_HANDLER.close()
        _LAYERBIND_HANDLER = None

    if log_file:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    _LAYERBIND_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_logging_for_tests() -> None:
    """Test-only: remove the installed handler."""
    global _LAYERBIND_HANDLER, _CONFIGURED_TARGET
    logger = logging.getLogger("layerbind")
    if _LAYERBIND_HANDLER is not None:
        logger.removeHandler(_LAYERBIND_HANDLER)
        _LAYERBIND_HANDLER.close()
    logger.setLevel(logging.NOTSET)
    _LAYERBIND_HANDLER = None
    _CONFIGURED_TARGET = None


__all__ = ["configure_logging", "reset_logging_for_tests"]
