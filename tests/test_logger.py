"""Tests for logging setup."""
import json
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from logger import JSONFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord("services.pipeline", logging.WARNING, __file__, 1, "chunk %d failed", (2,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_fields():
    data = json.loads(JSONFormatter().format(make_record()))
    assert data["level"] == "WARNING"
    assert data["logger"] == "services.pipeline"
    assert data["message"] == "chunk 2 failed"
    assert data["timestamp"].endswith("Z")


def test_json_formatter_structured_error():
    record = make_record(error_code="NETWORK_ERROR", error_details={"model": "gemini-1.5-pro"})
    data = json.loads(JSONFormatter().format(record))
    assert data["error_code"] == "NETWORK_ERROR"
    assert data["error_details"] == {"model": "gemini-1.5-pro"}


def test_setup_logging_replaces_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging("DEBUG", json_format=True)
        setup_logging("WARNING", json_format=True)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.WARNING
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_json_formatter_ignores_unlisted_extra():
    data = json.loads(JSONFormatter().format(make_record(chunk=3)))
    assert "chunk" not in data
