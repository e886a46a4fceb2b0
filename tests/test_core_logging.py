"""Tests for the logging helpers with correlation ids."""

import json
import logging
from logging.handlers import RotatingFileHandler
from typing import Any, cast

from pythonjsonlogger import jsonlogger

from psychic_engine.core.logging import (
    CorrelationIdFilter,
    LOG_FILE_PATH,
    LOG_SCHEMA_VERSION,
    PACKAGE_LOGGER_NAME,
    bind_client_ip,
    bind_correlation_id,
    bind_log_user_id,
    configure_logging,
    correlation_id_context,
    get_correlation_id,
    get_intent,
    get_log_user_id,
    get_logger,
    intent_context,
    log_user_id_context,
    reset_client_ip,
    reset_correlation_id,
    reset_log_user_id,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)


def test_correlation_filter_attaches_context():
    """Filter should attach the current exchange metadata onto log records."""
    cid_token = bind_correlation_id("abc123")
    user_token = bind_log_user_id("safe-user")
    ip_token = bind_client_ip("203.0.113.10")
    try:
        record = _record()
        with intent_context("read_mind"):
            assert CorrelationIdFilter().filter(record) is True
        record_any = cast(Any, record)
        assert record_any.correlation_id == "abc123"
        assert record_any.log_user_id == "safe-user"
        assert record_any.client_ip == "203.0.113.10"
        assert record_any.intent == "read_mind"
    finally:
        reset_client_ip(ip_token)
        reset_log_user_id(user_token)
        reset_correlation_id(cid_token)


def test_correlation_filter_defaults_to_dash():
    record = _record()
    CorrelationIdFilter().filter(record)
    assert cast(Any, record).correlation_id == "-"
    assert cast(Any, record).intent == "-"


def test_context_managers_restore_state():
    """Nested contexts restore the original values."""
    with correlation_id_context("ctx"), correlation_id_context("nested"), log_user_id_context(
        "user-a"
    ), intent_context("input.welcome"):
        assert get_correlation_id() == "nested"
        assert get_log_user_id() == "user-a"
        assert get_intent() == "input.welcome"
    assert get_correlation_id() is None
    assert get_log_user_id() is None
    assert get_intent() is None


def test_handlers_live_on_package_logger_once():
    """Module loggers propagate to a single set of package handlers."""
    logger = get_logger("psychic_engine.tests.logging")
    get_logger("psychic_engine.tests.other")
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    assert not logger.handlers
    assert logger.propagate
    rotating = [h for h in package_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(rotating) == 1
    assert rotating[0].baseFilename == str(LOG_FILE_PATH)
    assert all(
        any(isinstance(flt, CorrelationIdFilter) for flt in handler.filters)
        for handler in package_logger.handlers
    )
    assert all(
        isinstance(handler.formatter, jsonlogger.JsonFormatter)
        for handler in package_logger.handlers
    )


def test_formatted_record_uses_short_field_names():
    handler = configure_logging().handlers[0]
    record = _record()
    with correlation_id_context("cid-1"):
        handler.filters[0].filter(record)

    entry = json.loads(cast(logging.Formatter, handler.formatter).format(record))

    assert entry["cid"] == "cid-1"
    assert entry["user"] == "-"
    assert entry["level"] == "INFO"
    assert entry["schema_version"] == LOG_SCHEMA_VERSION
