"""Core logging setup and configuration.

This module wires structured JSON logging with context propagation and
OpenTelemetry correlation while keeping configuration declarative via
``logging.config.dictConfig``.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

from opentelemetry import trace


def _build_reserved_keys() -> Set[str]:
    """Collect standard ``LogRecord`` attributes to avoid duplicating them."""
    record = logging.LogRecord(
        name="sqlcomposer.reserved",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg="",
        args=(),
        exc_info=None,
    )
    reserved = set(record.__dict__.keys())
    reserved.update({"asctime", "message"})
    return reserved


_RESERVED_LOG_RECORD_KEYS = _build_reserved_keys()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class CustomJsonFormatter(logging.Formatter):
    """JSON formatter that enriches log entries with context and trace data."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {}

        for key, value in record.__dict__.items():
            if key not in _RESERVED_LOG_RECORD_KEYS and key not in log_record:
                log_record[key] = value

        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["message"] = record.getMessage()

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record["trace_id"] = format(span_context.trace_id, "032x")
            log_record["span_id"] = format(span_context.span_id, "016x")

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure structured logging backed by ``logging.config.dictConfig``.

    Without an explicit level, ``log_level`` of the loaded settings is used
    and their ``app_env`` becomes the ``environment`` of every record.

    Args:
        level: Base log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    if level is None:
        from sqlcomposer.logging.filters import set_logging_context
        from sqlcomposer.settings import get_settings

        settings = get_settings()
        level = settings.log_level
        set_logging_context(environment=settings.app_env)

    config_dict: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "sqlcomposer_json": {
                "()": "sqlcomposer.logging.logger.CustomJsonFormatter",
            }
        },
        "filters": {
            "sqlcomposer_context": {
                "()": "sqlcomposer.logging.filters.ContextFilter",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level.upper(),
                "formatter": "sqlcomposer_json",
                "filters": ["sqlcomposer_context"],
                "stream": "ext://sys.stdout",
            }
        },
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(config_dict)
