"""
Logging setup.

Call `setup_logging()` once at startup (FastAPI lifespan). Modules log through
`logging.getLogger(__name__)` with `event key=value` messages.
"""

from __future__ import annotations

import logging
import os
import sys

_NOISY_HTTP_LOGGERS = ("httpx", "httpcore")


def _parse_level(raw: str, default: int) -> int:
    level = logging.getLevelName((raw or "").strip().upper())
    return level if isinstance(level, int) else default


def log_level() -> int:
    return _parse_level(os.environ.get("LOG_LEVEL", "INFO"), logging.INFO)


def http_log_level() -> int:
    return _parse_level(os.environ.get("LOG_LEVEL_HTTP", "WARNING"), logging.WARNING)


def setup_logging() -> None:
    root = logging.getLogger()
    root.setLevel(log_level())

    # uvicorn usually installs a handler; scripts and tests may not.
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s %(message)s"))
        root.addHandler(handler)

    for name in _NOISY_HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_log_level())
