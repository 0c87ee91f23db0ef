"""
Logging setup for the ReplyDesk API.

Call setup_logging() once at startup; modules then use
``logging.getLogger(__name__)``. LOG_FORMAT selects "text" (development) or
"json" (one object per line for log aggregation).
"""

import json
import logging
import sys
from datetime import datetime, UTC
from typing import Optional

from replydesk.core.settings import settings


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter for production use."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }
        for key in ("correlation_id", "path", "status_code", "duration_ms"):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)
        return json.dumps(log_entry)


_initialized = False


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """Configure the root logger. Safe to call more than once."""
    global _initialized
    logger = logging.getLogger("replydesk")
    if _initialized:
        return logger
    _initialized = True

    level = (level or settings.log_level).upper()
    fmt = fmt or settings.log_format

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
    root_logger.addHandler(handler)

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logger.info(f"Logging configured: level={level}, format={fmt}")
    return logger
