"""Tests for logging configuration."""

import json
import logging
import sys

import pytest

from cabdash.logging_setup import JsonFormatter, setup_logging

pytestmark = pytest.mark.unit


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def make_record(message: str, *args) -> logging.LogRecord:
    return logging.LogRecord(
        name="cabdash.websocket",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=args,
        exc_info=None,
    )


class TestJsonFormatter:
    def test_message_with_quotes_is_valid_json(self):
        formatter = JsonFormatter(environment="test")

        line = formatter.format(make_record("Invalid control message: %r", '{"action": 1}'))

        entry = json.loads(line)
        assert entry["message"] == "Invalid control message: '{\"action\": 1}'"
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "cabdash.websocket"
        assert entry["service_name"] == "cabdash"
        assert entry["environment"] == "test"

    def test_includes_exception_text(self):
        formatter = JsonFormatter()
        try:
            raise ValueError("bad ride")
        except ValueError:
            record = make_record("failed")
            record.exc_info = sys.exc_info()

        entry = json.loads(formatter.format(record))

        assert "ValueError: bad ride" in entry["exception"]


def test_json_output_writes_one_object_per_line(capsys, restore_root_logger):
    setup_logging(level="INFO", json_output=True, environment="test")

    logging.getLogger("cabdash.test").warning('Invalid control message: \'{"action": 1}\'')

    lines = capsys.readouterr().out.strip().splitlines()
    entry = json.loads(lines[-1])
    assert entry["message"] == 'Invalid control message: \'{"action": 1}\''


def test_plain_output_is_human_readable(capsys, restore_root_logger):
    setup_logging(level="DEBUG")

    logging.getLogger("cabdash.test").info("ride registered")

    out = capsys.readouterr().out
    assert "cabdash.test - INFO - ride registered" in out
