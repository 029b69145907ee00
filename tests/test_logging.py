"""Tests for log record context (request id and store id)."""

import json
import logging
import uuid

import pytest

from shopmetrics.core.logging_config import (
    LogContextFilter,
    request_id_var,
    setup_logging,
    store_id_var,
    store_log_context,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)


class TestStoreLogContext:
    def test_sets_and_resets_store_id(self) -> None:
        store_id = uuid.uuid4()

        with store_log_context(store_id):
            assert store_id_var.get() == str(store_id)

        assert store_id_var.get() == ""

    def test_resets_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with store_log_context("abc"):
                raise RuntimeError("boom")

        assert store_id_var.get() == ""


class TestLogContextFilter:
    def test_injects_context(self) -> None:
        token = request_id_var.set("req-1")
        try:
            with store_log_context("store-1"):
                record = _record()
                assert LogContextFilter().filter(record) is True
        finally:
            request_id_var.reset(token)

        assert record.request_id == "req-1"  # type: ignore[attr-defined]
        assert record.store_id == "store-1"  # type: ignore[attr-defined]

    def test_json_output_carries_store_id(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging()
            handler = root.handlers[0]
            record = _record()
            with store_log_context("store-2"):
                handler.filter(record)
            line = json.loads(handler.format(record))
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        assert line["store_id"] == "store-2"
        assert line["level"] == "INFO"
        assert line["message"] == "hello"
        assert logging.getLogger("httpx").level == logging.WARNING
