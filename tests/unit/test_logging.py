"""Unit tests for the logging infrastructure."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from social_graph.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    clear_log_context,
    get_lazy_logger,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)


def _record(msg: str = "hello %s", *args: object, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="social_graph.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args or ("world",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _clean_context() -> None:
    clear_log_context()


def test_json_formatter_emits_one_line_with_extras() -> None:
    formatter = JSONFormatter(static={"service": "social-graph-service"})

    line = formatter.format(_record(users=3))
    data = json.loads(line)

    assert "\n" not in line
    assert data["message"] == "hello world"
    assert data["level"] == "INFO"
    assert data["logger"] == "social_graph.test"
    assert data["service"] == "social-graph-service"
    assert data["users"] == 3
    assert data["timestamp"].endswith("Z")
    assert "args" not in data


def test_json_formatter_includes_exception() -> None:
    formatter = JSONFormatter()
    try:
        raise ValueError("bad")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()

    data = json.loads(formatter.format(record))

    assert "ValueError: bad" in data["exception"]


def test_context_filter_copies_log_context() -> None:
    set_log_context(request_id="req-1", operation="users")
    record = _record()

    assert ContextInjectingFilter().filter(record) is True
    assert record.request_id == "req-1"
    assert record.operation == "users"


def test_context_filter_does_not_overwrite_record_fields() -> None:
    set_log_context(request_id="from-context")
    record = _record(request_id="explicit")

    ContextInjectingFilter().filter(record)

    assert record.request_id == "explicit"


def test_remove_from_log_context() -> None:
    set_log_context(request_id="req-1", operation="users")
    remove_from_log_context("operation")

    assert get_log_context() == {"request_id": "req-1"}


def test_lazy_logger_skips_disabled_levels() -> None:
    logger = get_lazy_logger("social_graph.tests.lazy")
    logger.logger.setLevel(logging.INFO)
    calls: list[int] = []

    def expensive() -> str:
        calls.append(1)
        return "computed"

    logger.debug(expensive)

    assert calls == []


def test_lazy_logger_evaluates_enabled_levels(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_lazy_logger("social_graph.tests.lazy")

    with caplog.at_level(logging.DEBUG, logger="social_graph.tests.lazy"):
        logger.debug(lambda: "computed message")

    assert caplog.records[-1].getMessage() == "computed message"
