from .plugin import RethinkdbInputPlugin, TASK_COUNT
from .configs import PluginTask
from .common.errors import ConfigurationError, DataError, ErrorCode, RethinkdbInputError
from .output import Schema, TaskReport, ConfigDiff, ResultFrameSink, JsonLinesSink
from .values import to_value

__all__ = [
    "RethinkdbInputPlugin",
    "TASK_COUNT",
    "PluginTask",
    "ConfigurationError",
    "DataError",
    "ErrorCode",
    "RethinkdbInputError",
    "Schema",
    "TaskReport",
    "ConfigDiff",
    "ResultFrameSink",
    "JsonLinesSink",
    "to_value",
]
