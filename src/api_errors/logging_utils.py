from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict

# Metadata passed via logger.<level>(..., extra={}) that ends up in the payload.
EXTRA_FIELDS = (
    "event",
    "error_code",
    "http_status",
    "failure_kind",
    "locale",
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "exception_type",
)


class JsonFormatter(logging.Formatter):
    """
    A structured JSON formatter for production-grade logging systems.

    Ensures logs are machine-readable and easy to index in systems such as
    Datadog, Splunk, CloudWatch, and ELK.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in EXTRA_FIELDS:
            if hasattr(record, attr):
                log_payload[attr] = getattr(record, attr)

        # Include exception details when available
        if record.exc_info:
            log_payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_payload, ensure_ascii=False, default=str)


def configure_logger(name: str = "api_errors", level: int | str = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with JSON formatting.

    Prevents duplicate handlers and ensures clean structured logs.
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)

    logger.propagate = False
    return logger
