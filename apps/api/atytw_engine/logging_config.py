"""
Logging setup for the ATYTW engine.

Engine modules only attach a ``NullHandler`` and let records propagate, so
the host application decides where they go. ``configure_logging`` is there
for scripts that want the engine's own console output.

Format: [TIMESTAMP] [LEVEL] [MODULE:FUNCTION:LINE] MESSAGE
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from atytw_engine.config import LOG_LEVEL

ROOT_LOGGER_NAME = "atytw_engine"


class StructuredFormatter(logging.Formatter):
    """Single-line formatter, easy to grep."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        location = f"{record.module}:{record.funcName}:{record.lineno}"
        msg = f"[{timestamp}] [{record.levelname:8s}] [{location}] {record.getMessage()}"
        if record.exc_info:
            msg += f"\n{self.formatException(record.exc_info)}"
        return msg


def _level(level: Optional[str]) -> int:
    return getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)


def setup_logger(name: str) -> logging.Logger:
    """
    Get a module logger for the engine.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger that propagates to the host's handlers
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Send engine records to stderr with the structured format.

    Args:
        level: DEBUG, INFO, WARNING, ERROR. Defaults to ATYTW_LOG_LEVEL.

    Returns:
        The package root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(_level(level))

    # Avoid duplicate console handlers on repeated calls
    if any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        return root

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    return root
