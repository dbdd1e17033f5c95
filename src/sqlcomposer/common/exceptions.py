from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for sqlcomposer operations.

    This enum provides categorized error codes that can be used
    to identify error types without creating numerous exception classes.
    Each category has a specific prefix for easy identification.

    Attributes:
        CONFIG_*: Configuration-related errors
        VALIDATION_*: Input validation errors
        CONNECTION_*: Engine and connection errors
        EXECUTION_*: Statement execution errors
        PLATFORM_*: Platform-specific errors
    """
    # Configuration errors
    CONFIG_ERROR = "CONFIG_001"
    CONFIG_MISSING = "CONFIG_002"
    CONFIG_INVALID = "CONFIG_003"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_ARGUMENT = "VALIDATION_002"
    INVALID_IDENTIFIER = "VALIDATION_003"

    # Connection errors
    CONNECTION_ERROR = "CONNECTION_001"

    # Execution errors
    EXECUTION_ERROR = "EXECUTION_001"
    QUERY_EXECUTION_ERROR = "EXECUTION_002"

    # Platform errors
    PLATFORM_ERROR = "PLATFORM_001"
    PLATFORM_NOT_SUPPORTED = "PLATFORM_002"


class QueryBuilderError(Exception):
    """Base exception for all sqlcomposer errors.

    A single exception class categorized by ``error_code`` instead of a
    hierarchy of specific exception classes. Some call sites also carry a
    numeric ``code`` that stays stable across releases so callers can match
    on it.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        code: Optional stable numeric code of the failing call site
        details: Additional error details
        cause: Optional underlying exception
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXECUTION_ERROR,
        code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.code = code
        self.details = details or {}
        self.cause = cause

        # Lazy import to avoid a circular dependency with the logging package
        from sqlcomposer.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "error_number": code,
                "details": self.details,
            },
            exc_info=cause is not None,
        )

    def __str__(self) -> str:
        prefix = f"[{self.error_code.value}]"
        if self.code is not None:
            prefix = f"{prefix}[{self.code}]"
        msg = f"{prefix} {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "code": self.code,
            "details": self.details,
        }

    @classmethod
    def from_error_code(
        cls,
        error_code: ErrorCode,
        message: str,
        **kwargs
    ) -> "QueryBuilderError":
        """Create exception from error code.

        Args:
            error_code: Error code
            message: Error message
            **kwargs: Additional arguments for QueryBuilderError

        Returns:
            QueryBuilderError instance
        """
        return cls(message=message, error_code=error_code, **kwargs)


# Helper functions for common error scenarios
def configuration_error(
    message: str,
    config_key: Optional[str] = None,
    error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
    **kwargs
) -> QueryBuilderError:
    """Create a configuration error.

    Args:
        message: Error message
        config_key: Configuration key that caused the error
        error_code: CONFIG_* code, defaults to CONFIG_ERROR
        **kwargs: Additional error details

    Returns:
        QueryBuilderError with a CONFIG_* code
    """
    details = kwargs.pop("details", None) or {}
    if config_key:
        details["config_key"] = config_key

    return QueryBuilderError(
        message=message,
        error_code=error_code,
        details=details,
        **kwargs
    )


def invalid_argument_error(
    message: str,
    argument: Optional[str] = None,
    value: Any = None,
    code: Optional[int] = None,
    **kwargs
) -> QueryBuilderError:
    """Create an invalid argument error.

    Args:
        message: Error message
        argument: Name of the offending argument
        value: Offending value
        code: Stable numeric code of the call site

    Returns:
        QueryBuilderError with INVALID_ARGUMENT code
    """
    details = kwargs.pop("details", None) or {}
    if argument:
        details["argument"] = argument
    if value is not None:
        details["value"] = str(value)

    return QueryBuilderError(
        message=message,
        error_code=ErrorCode.INVALID_ARGUMENT,
        code=code,
        details=details,
        **kwargs
    )


def platform_not_supported_error(
    message: str,
    platform: Optional[str] = None,
    code: Optional[int] = None,
    **kwargs
) -> QueryBuilderError:
    """Create an error for an operation the database platform lacks."""
    details = kwargs.pop("details", None) or {}
    if platform:
        details["platform"] = platform

    return QueryBuilderError(
        message=message,
        error_code=ErrorCode.PLATFORM_NOT_SUPPORTED,
        code=code,
        details=details,
        **kwargs
    )


def connection_error(
    message: str,
    service: Optional[str] = None,
    **kwargs
) -> QueryBuilderError:
    """Create a connection error.

    Args:
        message: Error message
        service: Database system that failed to connect

    Returns:
        QueryBuilderError with CONNECTION_ERROR code
    """
    details = kwargs.pop("details", None) or {}
    if service:
        details["service"] = service

    return QueryBuilderError(
        message=message,
        error_code=ErrorCode.CONNECTION_ERROR,
        details=details,
        **kwargs
    )


def query_execution_error(
    message: str,
    query: Optional[str] = None,
    **kwargs
) -> QueryBuilderError:
    """Create a query execution error.

    Args:
        message: Error message
        query: SQL statement that failed (truncated to 500 characters)

    Returns:
        QueryBuilderError with QUERY_EXECUTION_ERROR code
    """
    details = kwargs.pop("details", None) or {}
    if query:
        details["query"] = query[:500]

    return QueryBuilderError(
        message=message,
        error_code=ErrorCode.QUERY_EXECUTION_ERROR,
        details=details,
        **kwargs
    )
