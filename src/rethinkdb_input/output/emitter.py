from __future__ import annotations

import logging

from rethinkdb_input.values import Value
from .contracts import Schema
from .sinks import RecordSink

logger = logging.getLogger(__name__)


class RecordEmitter:
    """Wraps converted values as single-column records and hands them to a sink."""

    def __init__(self, schema: Schema, sink: RecordSink):
        if len(schema.columns) != 1:
            raise ValueError(f"Expected a single-column schema, got {len(schema.columns)} columns")
        self._column = schema.columns[0].name
        self._sink = sink
        self._finished = False
        self.record_count = 0

    def emit(self, value: Value) -> None:
        if self._finished:
            raise RuntimeError("Cannot emit records after the batch is finished")
        self._sink.add_record({self._column: value})
        self.record_count += 1

    def finish(self) -> None:
        """Finalizes the batch once; later calls are ignored."""
        if self._finished:
            return
        self._finished = True
        self._sink.finish()
        logger.info(f"Finished batch with {self.record_count} records in column '{self._column}'")
