import io
import json
import logging

import pytest

from rethinkdb_input.common.logger import configure_logging, current_task_id, task_context


@pytest.fixture(autouse=True)
def reset_root_handlers():
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)


class TestStructuredLogging:

    def test_json_formatter_includes_task_id(self):
        # Arrange
        handler = configure_logging(json_format=True)
        record = logging.LogRecord("test_json", logging.INFO, "path", 1, "test msg", {}, None)

        # Act
        with task_context("task-0"):
            handler.filter(record)
            formatted = handler.formatter.format(record)

        # Assert
        data = json.loads(formatted)
        assert data["message"] == "test msg"
        assert data["task_id"] == "task-0"
        assert data["level"] == "INFO"

    def test_json_formatter_keeps_extras_and_omits_missing_task(self):
        stream = io.StringIO()
        configure_logging(json_format=True, stream=stream)

        logging.getLogger("rethinkdb_input.test").info("emitted", extra={"record_count": 3})

        data = json.loads(stream.getvalue())
        assert data["record_count"] == 3
        assert "task_id" not in data
        assert "args" not in data

    def test_text_format_carries_task_id(self):
        stream = io.StringIO()
        configure_logging(level="DEBUG", stream=stream)
        log = logging.getLogger("rethinkdb_input.test")

        with task_context("task-3"):
            log.debug("inside")
        log.debug("outside")

        inside, outside = stream.getvalue().splitlines()
        assert "[task-3] rethinkdb_input.test: inside" in inside
        assert "[-] rethinkdb_input.test: outside" in outside

    def test_text_format_has_single_handler(self):
        configure_logging(level="DEBUG")
        configure_logging(level="WARNING")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

    def test_driver_logger_is_quieted(self):
        configure_logging(level="DEBUG")

        assert logging.getLogger("rethinkdb").level == logging.WARNING

    def test_task_context_resets(self):
        assert current_task_id() is None
        with task_context("task-7"):
            assert current_task_id() == "task-7"
        assert current_task_id() is None
