"""Tests for the JSON log formatter."""

import json
import logging
import sys

from filedrop.core.logging import JsonLogFormatter, request_id_context


def make_record(msg="hello", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="filedrop.test",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_format_basic_fields():
    entry = json.loads(JsonLogFormatter().format(make_record()))

    assert entry["message"] == "hello"
    assert entry["severity"] == "INFO"
    assert entry["logger"] == "filedrop.test"
    assert entry["timestamp"].endswith("Z")
    assert "request_id" not in entry


def test_format_includes_extra_fields():
    record = make_record(storage_key="1_a.txt", size_bytes=42)

    entry = json.loads(JsonLogFormatter().format(record))

    assert entry["storage_key"] == "1_a.txt"
    assert entry["size_bytes"] == 42


def test_format_includes_request_id():
    token = request_id_context.set("req-abc")
    try:
        entry = json.loads(JsonLogFormatter().format(make_record()))
    finally:
        request_id_context.reset(token)

    assert entry["request_id"] == "req-abc"


def test_format_exception_on_one_line():
    try:
        raise ValueError("broken")
    except ValueError:
        record = make_record("failed", level=logging.ERROR, exc_info=sys.exc_info())

    output = JsonLogFormatter().format(record)

    assert "\n" not in output
    entry = json.loads(output)
    assert entry["severity"] == "ERROR"
    assert entry["exception_type"] == "ValueError"
    assert entry["exception_message"] == "broken"
    assert "Traceback" in entry["exception"]
