"""Environment-driven settings and logging setup."""

from __future__ import annotations

import logging
import math
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER_NAME = "data_alchemist"


def log_level() -> str:
    return os.environ.get("DATA_ALCHEMIST_LOG_LEVEL", "INFO").upper()


def rule_delay_seconds() -> float:
    raw = os.environ.get("DATA_ALCHEMIST_RULE_DELAY_SECONDS", "1.0")
    try:
        value = float(raw)
    except ValueError:
        return 1.0
    if not math.isfinite(value):
        return 1.0
    return max(0.0, value)


def export_stamp_override() -> str | None:
    return os.environ.get("DATA_ALCHEMIST_EXPORT_STAMP") or None


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach one stream handler to the package logger; safe to call repeatedly."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level or log_level())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
