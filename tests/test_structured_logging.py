"""Tests for structured JSON logging configuration and output."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from fileops.logging_config import RequestIDFilter, build_json_formatter, configure_json_logging
from fileops.utils.request_context import clear_request_id, set_request_id, tool_context


@pytest.fixture
def json_logger() -> tuple[logging.Logger, StringIO]:
    """Logger writing JSON lines into a buffer through the request ID filter."""
    log_stream = StringIO()
    handler = logging.StreamHandler(log_stream)
    handler.setFormatter(build_json_formatter())
    handler.addFilter(RequestIDFilter())

    logger = logging.getLogger("fileops.test_logger")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    yield logger, log_stream

    logger.removeHandler(handler)
    handler.close()


def _last_record(stream: StringIO) -> dict:
    return json.loads(stream.getvalue().strip().splitlines()[-1])


def test_outputs_json_with_renamed_level(json_logger) -> None:
    """Log lines are JSON objects with level, name, message and timestamp."""
    logger, stream = json_logger

    logger.info("Content search completed", extra={"result_count": 3})

    record = _last_record(stream)
    assert record["message"] == "Content search completed"
    assert record["level"] == "INFO"
    assert record["name"] == "fileops.test_logger"
    assert record["result_count"] == 3
    assert "timestamp" in record


def test_request_id_and_tool_are_attached(json_logger) -> None:
    """Records carry the active request ID and tool name."""
    logger, stream = json_logger

    token = set_request_id("req-42")
    try:
        with tool_context("search_text"):
            logger.info("inside tool")
    finally:
        clear_request_id(token)

    record = _last_record(stream)
    assert record["request_id"] == "req-42"
    assert record["tool"] == "search_text"


def test_defaults_without_context(json_logger) -> None:
    logger, stream = json_logger

    logger.warning("no context")

    record = _last_record(stream)
    assert record["request_id"] == "no-request-id"
    assert record["tool"] is None


def test_configure_json_logging_installs_single_handler() -> None:
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    try:
        configure_json_logging(log_level="debug", use_json=True)
        configure_json_logging(log_level="WARNING", use_json=False)

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in original_handlers:
            root.addHandler(handler)
        root.setLevel(original_level)
