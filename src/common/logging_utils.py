"""Logging helpers shared by the CLI and the version selection modules.

Keeps logger configuration in one place and provides a small structured
context helper for DEBUG traces.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants


class _ContextFormatter(logging.Formatter):
    """Formatter that appends structured context to DEBUG records."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = getattr(record, "context", None)
        if record.levelno <= logging.DEBUG and context:
            pairs = " ".join(f"{k}={v}" for k, v in sorted(context.items()))
            message = f"{message} {pairs}"
        return message


def _level_from_env(default: int = logging.INFO) -> int:
    name = os.environ.get(Constants.ENV_LOG_LEVEL, "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def configure_logging(level: Optional[int] = None) -> None:
    """Configure the root logger once.

    The level comes from the argument, then NODESELECT_LOG_LEVEL, then INFO.
    Calling it again only adjusts the level.
    """
    root = logging.getLogger()
    root.setLevel(level if level is not None else _level_from_env())
    if any(getattr(h, "_nodeselect", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(_ContextFormatter(Constants.LOG_FORMAT))
    handler._nodeselect = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when the logger would emit DEBUG records."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log call.

    None values are dropped so callers can pass optional fields freely.
    """
    context = {k: v for k, v in fields.items() if v is not None}
    return {"context": context}


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 3)
