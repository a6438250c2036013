"""
Logging setup for connector runs.

Every record handled by the connector's handler carries the id of the task
that emitted it, taken from a context variable set by ``task_context``.
"""
import contextvars
import json
import logging
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(task_id)s] %(name)s: %(message)s"
NO_TASK = "-"

_task_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("task_id", default=None)

# attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "task_id",
}


class TaskContextFilter(logging.Filter):
    """Stamps each record with the current task id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.task_id = _task_id_ctx.get() or NO_TASK
        return True


@contextmanager
def task_context(task_id: str) -> Iterator[None]:
    """Sets the task id for log records emitted inside the block."""
    token = _task_id_ctx.set(task_id)
    try:
        yield
    finally:
        _task_id_ctx.reset(token)


def current_task_id() -> Optional[str]:
    return _task_id_ctx.get()


class JsonFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, task and extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        task_id = getattr(record, "task_id", NO_TASK)
        if task_id != NO_TASK:
            entry["task_id"] = task_id

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        return json.dumps(entry, default=str)


def configure_logging(
    level: str = "INFO", json_format: bool = False, stream: Optional[TextIO] = None
) -> logging.Handler:
    """Installs the connector's single root handler and returns it.

    Logs go to stderr unless ``stream`` is given, so record output on stdout
    stays clean. Calling this again replaces the previous handler.

    Args:
        level (str): Root logging level.
        json_format (bool): Emit JSON objects instead of text lines.
        stream (TextIO): Target stream. Defaults to stderr.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.addFilter(TaskContextFilter())
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    root_logger.addHandler(handler)

    # the driver logs every handshake step at DEBUG
    logging.getLogger("rethinkdb").setLevel(logging.WARNING)
    return handler
