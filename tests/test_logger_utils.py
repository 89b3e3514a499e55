"""
Tests for txgen_core.logger_utils.
"""

import io
import json
import logging
import sys

import pytest

from txgen_core.logger_utils import JsonFormatter, configure_logging, get_logger, parse_level


def make_record(msg="hello", **extra):
    record = logging.LogRecord("txgen", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_base_fields(self):
        data = json.loads(JsonFormatter().format(make_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "txgen"
        assert data["message"] == "hello"
        assert "timestamp" in data

    def test_structured_keys(self):
        record = make_record(run_id="gen_1", phase="users", event="phase_end", records=3)
        data = json.loads(JsonFormatter().format(record))
        assert data["run_id"] == "gen_1"
        assert data["phase"] == "users"
        assert data["event"] == "phase_end"
        assert data["records"] == 3

    def test_unknown_extras_ignored(self):
        data = json.loads(JsonFormatter().format(make_record(colour="blue")))
        assert "colour" not in data

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "txgen", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        data = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestConfigureLogging:
    def test_json_from_env(self, monkeypatch):
        monkeypatch.setenv("TXGEN_JSON_LOGS", "true")
        configure_logging()
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JsonFormatter)

    def test_writes_to_given_stream(self):
        stream = io.StringIO()
        configure_logging(json_format=True, stream=stream)
        get_logger("runner").info("phase done", extra={"phase": "users", "records": 2})
        data = json.loads(stream.getvalue())
        assert data["logger"] == "txgen.runner"
        assert data["phase"] == "users"

    def test_faker_kept_quiet(self):
        configure_logging(level=logging.DEBUG, stream=io.StringIO())
        assert logging.getLogger("faker").level == logging.WARNING

    def test_plain_by_default(self, monkeypatch):
        monkeypatch.delenv("TXGEN_JSON_LOGS", raising=False)
        configure_logging(level=logging.WARNING)
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)


class TestParseLevel:
    def test_names(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("WARNING") == logging.WARNING

    def test_empty_defaults_to_info(self):
        assert parse_level(None) == logging.INFO
        assert parse_level("") == logging.INFO

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            parse_level("chatty")
