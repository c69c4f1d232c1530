"""Tests for the structured logging system (ledger_kernel/logging_config.py)."""

import json
import logging
from io import StringIO
from uuid import uuid4

import pytest

from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "ledger_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("aged", extra={"customer_count": 3, "status": "ok"})

        record = _parse_log(stream)
        assert record["customer_count"] == 3
        assert record["status"] == "ok"

    def test_decimal_serialized_as_string(self):
        from decimal import Decimal

        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("diff", extra={"difference": Decimal("5.25")})

        assert _parse_log(stream)["difference"] == "5.25"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="abc-123", report_id="aging-2024-03")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["report_id"] == "aging-2024-03"

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        try:
            raise ValueError("boom")
        except ValueError:
            logger.error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_ledger_exception_code_extracted(self):
        """Ledger exceptions carry a .code attribute and structured fields."""
        from ledger_kernel.exceptions import InvalidCurrencyError

        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        try:
            raise InvalidCurrencyError("XYZ")
        except InvalidCurrencyError:
            logger.error("currency_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "INVALID_CURRENCY"
        assert record["exc_type"] == "InvalidCurrencyError"
        assert record["exc_currency"] == "XYZ"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "client_id" not in record

    def test_uuid_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        uid = uuid4()
        get_logger("test").info("with_uuid", extra={"customer_id": uid})

        assert _parse_log(stream)["customer_id"] == str(uid)


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_set_only_updates_given_fields(self):
        LogContext.set(client_id="tenant-1")
        LogContext.set(actor_id="user-9")
        assert LogContext.get_all() == {"client_id": "tenant-1", "actor_id": "user-9"}

    def test_bind_restores_on_exit(self):
        LogContext.set(correlation_id="outer")
        with LogContext.bind(correlation_id="inner", trace_id="t-1"):
            assert LogContext.get_all()["correlation_id"] == "inner"
        assert LogContext.get_all() == {"correlation_id": "outer"}

    def test_bind_ignores_unknown_fields(self):
        with LogContext.bind(request_path="/aging"):
            assert LogContext.get_all() == {}

    def test_clear(self):
        LogContext.set(correlation_id="x", report_id="y")
        LogContext.clear()
        assert LogContext.get_all() == {}


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_idempotent(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        second, second_stream = _make_handler()
        configure_logging(handler=second)
        get_logger("test").info("once")

        assert len(_parse_all_logs(stream)) == 1
        assert second_stream.getvalue() == ""

    def test_level_filters(self):
        handler, stream = _make_handler()
        configure_logging(level=logging.WARNING, handler=handler)
        logger = get_logger("test")
        logger.info("dropped")
        logger.warning("kept")

        messages = [r["message"] for r in _parse_all_logs(stream)]
        assert messages == ["kept"]

    def test_child_loggers_share_handler(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("engines.aging").info("a")
        get_logger("services.export").info("b")

        loggers = [r["logger"] for r in _parse_all_logs(stream)]
        assert loggers == ["ledger_kernel.engines.aging", "ledger_kernel.services.export"]
