import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from conformity_classifier.config import get_settings

PACKAGE_LOGGER_NAME = "conformity_classifier"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        # Exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logger(name: str | None = None) -> logging.Logger:
    """Setup a structured logger for the application.

    Args:
        name: Optional logger name. Defaults to the package name.

    Returns:
        Configured logger instance.
    """
    settings = get_settings()
    logger_name = name or PACKAGE_LOGGER_NAME

    logger = logging.getLogger(logger_name)
    if logger.handlers:
        # Avoid adding multiple handlers if called repeatedly
        return logger

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    return logger
