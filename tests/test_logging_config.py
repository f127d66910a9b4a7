"""
Tests for structured logging utilities
"""

import json
import logging
import sys
from unittest.mock import Mock

import pytest

from utils.logging_config import (
    ErrorTracker,
    StructuredFormatter,
    log_execution_time,
    log_user_interaction,
)


def make_record(message="hello", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="tests", level=level, pathname=__file__, lineno=10,
        msg=message, args=(), exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON log formatting"""

    def test_base_fields(self):
        output = json.loads(StructuredFormatter().format(make_record("caption ready")))

        assert output["message"] == "caption ready"
        assert output["level"] == "INFO"
        assert output["logger"] == "tests"
        assert "extra" not in output

    def test_extra_fields(self):
        record = make_record(status_code=503, prompt_length=19)

        output = json.loads(StructuredFormatter().format(record))

        assert output["extra"] == {"status_code": 503, "prompt_length": 19}

    def test_exception_info(self):
        try:
            raise ValueError("bad body")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        output = json.loads(StructuredFormatter().format(record))

        assert output["exception"]["type"] == "ValueError"
        assert output["exception"]["message"] == "bad body"


class TestLogHelpers:
    """Test logging helper functions"""

    def test_log_execution_time_success(self):
        logger = Mock()

        with log_execution_time(logger, "caption_request", prompt_length=5):
            pass

        assert logger.info.call_count == 2
        completed_extra = logger.info.call_args.kwargs["extra"]
        assert completed_extra["status"] == "success"
        assert completed_extra["prompt_length"] == 5

    def test_log_execution_time_reraises(self):
        logger = Mock()

        with pytest.raises(RuntimeError):
            with log_execution_time(logger, "caption_request"):
                raise RuntimeError("boom")

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["extra"]["error_type"] == "RuntimeError"

    def test_log_user_interaction(self):
        logger = Mock()

        log_user_interaction(logger, "send", has_image=True)

        extra = logger.info.call_args.kwargs["extra"]
        assert extra["interaction_type"] == "send"
        assert extra["has_image"] is True


class TestErrorTracker:
    """Test error counting"""

    def test_counts_by_type_and_context(self):
        tracker = ErrorTracker(Mock())

        tracker.track_error(ValueError("a"), "caption_request")
        tracker.track_error(ValueError("b"), "caption_request")
        tracker.track_error(KeyError("c"), "render")

        summary = tracker.get_error_summary()
        assert summary["total_errors"] == 3
        assert summary["unique_errors"] == 2
        assert summary["error_breakdown"]["ValueError:caption_request"] == 2
