"""
Structured logging utilities for the SundAI assistant
"""

import json
import logging
import sys
from datetime import datetime
from typing import Optional

from .config import LoggingSettings


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """Install a stdout handler on the package logger.

    Idempotent: a second call only adjusts the level.
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger("sundai")
    logger.setLevel(settings.level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if settings.format == "json":
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
        logger.addHandler(handler)
    return logger


def log_event(logger: logging.Logger, level: int, message: str, **fields) -> None:
    """Log a message with structured fields attached for the JSON formatter"""
    logger.log(level, message, extra={"extra_data": fields})
