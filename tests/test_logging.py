"""Tests for JSON logging."""

import json
import logging
from io import StringIO

import pytest

from node_assistant.log import (HANDLER_NAME, JsonLineFormatter, get_logger,
                                setup_logging)


@pytest.fixture
def captured():
    logger = get_logger("node_assistant.test")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonLineFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        yield logger, stream
    finally:
        logger.removeHandler(handler)


def _entry(stream):
    return json.loads(stream.getvalue().strip())


def test_setup_logging_installs_handler_once():
    first = setup_logging()
    second = setup_logging(logging.DEBUG)
    root = logging.getLogger()
    assert first is second
    assert [h for h in root.handlers if h.get_name() == HANDLER_NAME] == [first]
    assert root.level == logging.DEBUG
    setup_logging(logging.INFO)


def test_formatter_writes_one_json_line(captured):
    logger, stream = captured
    logger.info("Rules generated for %s", "香港")

    entry = _entry(stream)
    assert entry["level"] == "INFO"
    assert entry["logger"] == "node_assistant.test"
    assert entry["msg"] == "Rules generated for 香港"
    assert "T" in entry["time"]
    assert "exc_info" not in entry
    assert "香港" in stream.getvalue()


def test_formatter_keeps_extra_fields(captured):
    logger, stream = captured
    logger.info("Rules generated", extra={"nodes": 3, "client": "surge"})

    entry = _entry(stream)
    assert entry["nodes"] == 3
    assert entry["client"] == "surge"
    assert "args" not in entry
    assert "levelno" not in entry


def test_formatter_includes_traceback(captured):
    logger, stream = captured
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.exception("Request failed")

    entry = _entry(stream)
    assert entry["level"] == "ERROR"
    assert "RuntimeError: boom" in entry["exc_info"]
