"""
Structured JSON logging configuration.

This module provides:
- JSON-formatted single-line log output
- Request ID propagation via contextvars (set by LoggingMiddleware)
- Session ID propagation via contextvars (set by LoggingMiddleware)
- Document name propagation via contextvars (set by the record pipeline)

Log Structure (JSON):
{
    "timestamp": "2024-01-15T10:30:00.000Z",
    "level": "INFO",
    "logger": "medpanel.services.record_pipeline",
    "message": "Document processed",
    "request_id": "abc12345",
    "session_id": "9f1c2e...",
    "document": "labs-2024.pdf",
    "extra": { ... }
}

Usage:
    from medpanel.core.logging_config import setup_logging

    # At app startup
    setup_logging()

    # Anywhere
    logger.info("Processing batch", extra={"files": 3})
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

# =============================================================================
# LOG CONTEXT
# =============================================================================
# ContextVars are coroutine-safe, so concurrent requests never see each
# other's request_id, session or document name.

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
document_var: ContextVar[Optional[str]] = ContextVar("document", default=None)
session_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID in context for the current request/coroutine."""
    request_id_var.set(request_id)


def clear_request_id() -> None:
    """Clear the request ID (call at end of request)."""
    request_id_var.set(None)


@contextmanager
def session_context(session_id: Optional[str]) -> Iterator[None]:
    """Tag every log record emitted inside the block with the session id."""
    token = session_var.set(session_id)
    try:
        yield
    finally:
        session_var.reset(token)


@contextmanager
def document_context(filename: str) -> Iterator[None]:
    """Tag every log record emitted inside the block with the document name."""
    token = document_var.set(filename)
    try:
        yield
    finally:
        document_var.reset(token)


# =============================================================================
# JSON FORMATTER
# =============================================================================

_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}


class JSONFormatter(logging.Formatter):
    """
    Single-line JSON log formatter.

    All timestamps are UTC. Fields passed via ``extra={...}`` are nested
    under the ``extra`` key.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as single-line JSON."""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        session_id = session_var.get()
        if session_id:
            log_entry["session_id"] = session_id

        document = document_var.get()
        if document:
            log_entry["document"] = document

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry, default=str, ensure_ascii=False)


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    include_uvicorn: bool = True
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; if False, use human-readable format
        include_uvicorn: If True, also route uvicorn loggers through the root handler

    Environment Variables:
        MEDPANEL_LOG_LEVEL: Override the log level
        MEDPANEL_LOG_FORMAT: Override format ("json" or "text")
    """
    level = os.environ.get("MEDPANEL_LOG_LEVEL", level).upper()
    json_format = os.environ.get(
        "MEDPANEL_LOG_FORMAT", "json" if json_format else "text"
    ).lower() == "json"

    handler = logging.StreamHandler(sys.stdout)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    app_logger = logging.getLogger("medpanel")
    app_logger.setLevel(level)
    app_logger.handlers = []
    app_logger.propagate = True

    if include_uvicorn:
        for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
            logger = logging.getLogger(logger_name)
            logger.handlers = []
            logger.propagate = True

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"level": level, "format": "json" if json_format else "text"}
    )
