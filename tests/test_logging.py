import io
import json
import logging

import structlog

from src.officehours.logging import get_logger, setup_logging


def test_json_logging_writes_event_with_context() -> None:
    buffer = io.StringIO()
    try:
        setup_logging(json_output=True, log_level="INFO", stream=buffer)
        log = get_logger("tests.logging")
        log.debug("hidden_event")
        log.warning("timezone_fallback", timezone="Mars/Base", fallback="UTC")

        lines = [json.loads(line) for line in buffer.getvalue().splitlines()]
        assert len(lines) == 1
        assert lines[0]["event"] == "timezone_fallback"
        assert lines[0]["level"] == "warning"
        assert lines[0]["fallback"] == "UTC"
        assert "timestamp" in lines[0]
    finally:
        structlog.reset_defaults()
        logging.getLogger().handlers = []
