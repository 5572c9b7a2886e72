"""Structured logging utilities."""

import json
import logging
from typing import Any, Dict, List, Optional

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Everything passed through ``extra``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with JSON formatting configured."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def log_request(
    logger: logging.Logger,
    method: str,
    endpoint: str,
    object_name: str,
    entity_id: Optional[str] = None,
) -> None:
    """Log one CRUD call against an entity endpoint."""
    extra: Dict[str, Any] = {
        "stage": "request",
        "method": method,
        "endpoint": endpoint,
        "object": object_name,
    }
    if entity_id:
        extra["entity_id"] = entity_id
    logger.debug(f"{method} {endpoint}", extra=extra)


def log_discovery(
    logger: logging.Logger,
    object_count: int,
    duration_ms: int,
    skipped: Optional[List[str]] = None,
) -> None:
    """Log a metadata discovery run."""
    extra: Dict[str, Any] = {
        "stage": "discovery",
        "object_count": object_count,
        "duration_ms": duration_ms,
    }
    if skipped:
        extra["skipped"] = skipped
    logger.info("Metadata discovered", extra=extra)


def log_codegen(
    logger: logging.Logger,
    object_name: str,
    files: List[str],
) -> None:
    """Log files written for one generated entity."""
    logger.info(
        f"Generated {object_name}",
        extra={
            "stage": "codegen",
            "object": object_name,
            "file_count": len(files),
            "files": files,
        },
    )
