import json
import logging

from sqlcomposer.__version__ import __version__
from sqlcomposer.logging import CustomJsonFormatter
from sqlcomposer.logging.filters import (
    ContextFilter,
    clear_request_context,
    set_logging_context,
    set_request_context,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="sample",
        args=(),
        exc_info=None,
    )


def test_context_filter_respects_static_environment():
    set_logging_context(environment="qa", extra={"region": "us-east"})
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert getattr(record, "environment") == "qa"
        assert getattr(record, "region") == "us-east"
    finally:
        set_logging_context(environment=None, extra=None)


def test_context_filter_uses_request_context():
    set_logging_context(environment=None, extra=None)
    set_request_context(request_id="req-1", user_id="user-7")
    try:
        record = _record()
        assert ContextFilter().filter(record)
        assert record.request_id == "req-1"
        assert record.user_id == "user-7"
    finally:
        clear_request_context()


def test_context_filter_no_config_is_graceful():
    set_logging_context(environment=None, extra=None)
    record = _record()
    assert ContextFilter().filter(record)
    assert not hasattr(record, "environment")
    assert record.request_id is None


def test_context_filter_adds_sdk_version():
    record = _record()
    ContextFilter().filter(record)
    assert record.sdk_name == "sqlcomposer"
    assert record.sdk_version == __version__


def test_json_formatter_includes_extra_fields():
    record = _record()
    record.__dict__["db.platform"] = "sqlite"

    payload = json.loads(CustomJsonFormatter().format(record))

    assert payload["message"] == "sample"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["db.platform"] == "sqlite"
    assert "trace_id" not in payload


def test_setup_logging_installs_json_handler():
    from sqlcomposer.logging import setup_logging

    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    try:
        setup_logging("debug")

        handler = root.handlers[-1]
        assert root.level == logging.DEBUG
        assert isinstance(handler.formatter, CustomJsonFormatter)
        assert any(isinstance(f, ContextFilter) for f in handler.filters)
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)


def test_setup_logging_defaults_to_settings(monkeypatch):
    from sqlcomposer.logging import setup_logging
    from sqlcomposer.settings import _reload_settings

    monkeypatch.setenv("SQLCOMPOSER_LOG_LEVEL", "warning")
    monkeypatch.setenv("SQLCOMPOSER_APP_ENV", "qa")
    _reload_settings()

    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    try:
        setup_logging()

        assert root.level == logging.WARNING
        record = _record()
        ContextFilter().filter(record)
        assert record.environment == "qa"
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
        set_logging_context(environment=None, extra=None)
        monkeypatch.undo()
        _reload_settings()
