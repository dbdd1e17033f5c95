"""Unit tests for the error model."""

import logging

from sqlcomposer.common.exceptions import (
    ErrorCode,
    QueryBuilderError,
    configuration_error,
    invalid_argument_error,
    platform_not_supported_error,
    query_execution_error,
)


class TestQueryBuilderError:

    def test_str_contains_codes(self):
        error = QueryBuilderError("boom", ErrorCode.INVALID_ARGUMENT, code=1461170686)
        assert str(error) == "[VALIDATION_002][1461170686] boom"

    def test_str_contains_cause(self):
        error = QueryBuilderError("boom", cause=ValueError("bad"))
        assert str(error) == "[EXECUTION_001] boom (caused by: ValueError: bad)"

    def test_to_dict(self):
        error = QueryBuilderError("boom", ErrorCode.CONFIG_INVALID, details={"key": "value"})

        assert error.to_dict() == {
            "type": "QueryBuilderError",
            "message": "boom",
            "error_code": "CONFIG_003",
            "error_name": "CONFIG_INVALID",
            "code": None,
            "details": {"key": "value"},
        }

    def test_from_error_code(self):
        error = QueryBuilderError.from_error_code(ErrorCode.PLATFORM_ERROR, "boom", code=7)
        assert error.error_code == ErrorCode.PLATFORM_ERROR
        assert error.code == 7

    def test_error_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="sqlcomposer.common.exceptions"):
            QueryBuilderError("boom", ErrorCode.CONNECTION_ERROR)

        assert caplog.records[-1].getMessage() == "boom"
        assert caplog.records[-1].error_code == "CONNECTION_001"


class TestHelpers:

    def test_configuration_error(self):
        error = configuration_error("bad", config_key="schema_file", error_code=ErrorCode.CONFIG_MISSING)
        assert error.error_code == ErrorCode.CONFIG_MISSING
        assert error.details == {"config_key": "schema_file"}

    def test_invalid_argument_error(self):
        error = invalid_argument_error("bad", argument="value", value=3, code=1459696090)
        assert error.error_code == ErrorCode.INVALID_ARGUMENT
        assert error.code == 1459696090
        assert error.details == {"argument": "value", "value": "3"}

    def test_platform_not_supported_error(self):
        error = platform_not_supported_error("bad", platform="oracle", code=1584637096)
        assert error.error_code == ErrorCode.PLATFORM_NOT_SUPPORTED
        assert error.details == {"platform": "oracle"}

    def test_query_execution_error_truncates_query(self):
        error = query_execution_error("bad", query="x" * 600)
        assert error.error_code == ErrorCode.QUERY_EXECUTION_ERROR
        assert len(error.details["query"]) == 500
