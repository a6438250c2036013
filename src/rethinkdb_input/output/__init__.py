from .contracts import Schema, SchemaColumn, ResultFrame, TaskReport, ConfigDiff, JSON_TYPE
from .sinks import Record, RecordSink, ResultFrameSink, JsonLinesSink, JsonLinesFileSink
from .emitter import RecordEmitter

__all__ = [
    "Schema",
    "SchemaColumn",
    "ResultFrame",
    "TaskReport",
    "ConfigDiff",
    "JSON_TYPE",
    "Record",
    "RecordSink",
    "ResultFrameSink",
    "JsonLinesSink",
    "JsonLinesFileSink",
    "RecordEmitter",
]
