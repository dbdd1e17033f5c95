"""Logging infrastructure for sqlcomposer.

This module provides structured logging with JSON output, context tracking
and OpenTelemetry trace correlation.
"""

from sqlcomposer.logging.filters import ContextFilter
from sqlcomposer.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
]
