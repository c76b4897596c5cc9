"""Centralized logging helpers.

``configure_logging`` installs a single stream handler on the root logger;
the remaining helpers keep DEBUG traces cheap when DEBUG is disabled.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from faro.constants import Constants

_HANDLER_NAME = "faro-console"


def _level_from_env(default: int = logging.WARNING) -> int:
    name = os.environ.get(Constants.ENV_LOG_LEVEL, "").strip().upper()
    if not name:
        return default
    value = getattr(logging, name, None)
    return value if isinstance(value, int) else default


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger once.

    Args:
        level: Explicit level name; wins over the FARO_LOG_LEVEL environment variable.
        log_file: Optional path; adds a file handler with timestamps.
    """
    root = logging.getLogger()
    if not any(getattr(h, "name", None) == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)

    if level:
        root.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    else:
        root.setLevel(_level_from_env())

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        root.addHandler(file_handler)
        logging.getLogger(__name__).info("Logging to file: %s", log_file)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted for ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` payload for structured DEBUG records, dropping None values."""
    return {k: v for k, v in fields.items() if v is not None}


class Timer:
    """Context manager measuring elapsed wall time in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: object) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
