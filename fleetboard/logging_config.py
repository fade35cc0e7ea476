"""
Logging setup — one labeled stream handler on the ``fleetboard`` logger.
"""
from __future__ import annotations

import logging
import sys

ROOT_LOGGER = "fleetboard"

_configured = False


class LabeledFormatter(logging.Formatter):
    """Single-line ``LABEL logger: message`` output."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        line = f"{label} {record.name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure the package logger once; later calls only adjust the level."""
    global _configured
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    if _configured:
        return logger

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True
    return logger


def reset_logging() -> None:
    """Drop handlers and let the next setup_logging() start fresh. Test helper."""
    global _configured
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    _configured = False
