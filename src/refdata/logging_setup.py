"""
RefData Logging

The library only creates module loggers; nothing is installed on import.
Applications (and the CLI) call ``configure_logging`` to attach a handler
to the ``refdata`` logger.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from . import config


LOGGER_NAME = "refdata"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Add extra fields if present
        if hasattr(record, "enumeration"):
            log_entry["enumeration"] = record.enumeration
        if hasattr(record, "error_code"):
            log_entry["error_code"] = record.error_code
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """
    Attach a stream handler to the ``refdata`` logger.

    Calling it again replaces the previously installed handler.

    Args:
        level: Level name; defaults to REFDATA_LOG_LEVEL
        fmt: "json" or "text"; defaults to REFDATA_LOG_FORMAT

    Returns:
        The configured logger
    """
    level = (level or config.LOG_LEVEL).upper()
    fmt = (fmt or config.LOG_FORMAT).lower()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level, logging.WARNING))

    for handler in list(logger.handlers):
        if getattr(handler, "_refdata_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    handler._refdata_handler = True
    logger.addHandler(handler)
    return logger
