from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Protocol, TextIO, Union, runtime_checkable

from rethinkdb_input.values import Value
from .contracts import ResultFrame, Schema

Record = Dict[str, Value]


@runtime_checkable
class RecordSink(Protocol):
    """Downstream consumer of emitted records."""

    def add_record(self, record: Record) -> None:
        """Append one record keyed by column name."""
        ...

    def finish(self) -> None:
        """Seal the batch. Called exactly once, after the last record."""
        ...


class ResultFrameSink:
    """Collects records into an in-memory ResultFrame."""

    def __init__(self, schema: Schema):
        self.schema = schema
        self.frame = ResultFrame(columns=list(schema.columns))

    def add_record(self, record: Record) -> None:
        self.frame.rows.append([record[name].to_python() for name in self.schema.column_names])
        self.frame.row_count += 1

    def finish(self) -> None:
        self.frame.finished = True


class JsonLinesSink:
    """Writes each record as one JSON object per line."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self.record_count = 0

    def add_record(self, record: Record) -> None:
        line = {name: value.to_python() for name, value in record.items()}
        self._stream.write(json.dumps(line, ensure_ascii=False))
        self._stream.write("\n")
        self.record_count += 1

    def finish(self) -> None:
        self._stream.flush()


class JsonLinesFileSink(JsonLinesSink):
    """JSON lines staged in a temporary file that replaces ``path`` on finish.

    A run that fails before ``finish`` leaves ``path`` untouched once
    ``discard`` has removed the staged file.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        fd, staged = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        self._staged = Path(staged)
        self._done = False
        super().__init__(os.fdopen(fd, "w", encoding="utf-8"))

    def finish(self) -> None:
        super().finish()
        self._stream.close()
        os.replace(self._staged, self.path)
        self._done = True

    def discard(self) -> None:
        """Drops the staged records. No-op after ``finish``."""
        if self._done:
            return
        self._stream.close()
        self._staged.unlink(missing_ok=True)
        self._done = True
