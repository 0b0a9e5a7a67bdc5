"""Logging setup shared by every cartfox module."""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("cartfox")


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a stream handler to the cartfox logger (idempotent)."""
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)
    if not any(getattr(h, "_cartfox", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._cartfox = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


__all__ = ["LOG_FORMAT", "logger", "setup_logging"]
