"""Shared building blocks used across sqlcomposer."""

from sqlcomposer.common.exceptions import (
    ErrorCode,
    QueryBuilderError,
    configuration_error,
    connection_error,
    invalid_argument_error,
    platform_not_supported_error,
    query_execution_error,
)

__all__ = [
    "ErrorCode",
    "QueryBuilderError",
    "configuration_error",
    "connection_error",
    "invalid_argument_error",
    "platform_not_supported_error",
    "query_execution_error",
]
