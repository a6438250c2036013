"""
RethinkDB input plugin.

Planning (``transaction``) validates the configuration, prepares the wrapped
query source and fixes a one-column JSON schema with a single task. Execution
(``run``) compiles the query, opens one connection, streams the cursor through
the value converter and hands every value to the record emitter.
"""
from __future__ import annotations

import logging
import time
from contextlib import closing
from typing import Any, Callable, List, Mapping, Optional, Union

from rethinkdb_input.common.logger import task_context
from rethinkdb_input.configs import PluginTask, dump_task
from rethinkdb_input.connection import ConnectionParams, open_connection
from rethinkdb_input.cursor import stream_documents
from rethinkdb_input.output import ConfigDiff, RecordEmitter, RecordSink, Schema, TaskReport
from rethinkdb_input.query import QueryCompiler, QueryEvaluator, build_query_source
from rethinkdb_input.values import to_value

logger = logging.getLogger(__name__)

TASK_COUNT = 1

Control = Callable[[PluginTask, Schema, int], List[TaskReport]]


def default_driver() -> Any:
    from rethinkdb import RethinkDB
    return RethinkDB()


class RethinkdbInputPlugin:
    """Single-task input plugin reading one ReQL query."""

    def __init__(
        self,
        driver_factory: Callable[[], Any] = default_driver,
        evaluator: Optional[QueryEvaluator] = None,
    ):
        """
        Args:
            driver_factory: Returns the driver root object (``r``) used both as the
                query-builder namespace and to open connections.
            evaluator: Query source evaluator; defaults to the sandboxed evaluator.
        """
        self._driver_factory = driver_factory
        self._evaluator = evaluator

    def transaction(self, config: Union[Mapping[str, Any], PluginTask], control: Control) -> ConfigDiff:
        """Validates the config and runs the single task through ``control``.

        Raises:
            ConfigurationError: On any configuration problem, before any connection.
        """
        task = config if isinstance(config, PluginTask) else PluginTask.from_config(config)
        reql = build_query_source(query=task.query, table=task.table)
        task = task.model_copy(update={"reql": reql})
        logger.debug(f"Planned task: {dump_task(task)}")

        schema = Schema.single_json_column(task.column_name)
        return self.resume(task, schema, TASK_COUNT, control)

    def resume(self, task: PluginTask, schema: Schema, task_count: int, control: Control) -> ConfigDiff:
        control(task, schema, task_count)
        return ConfigDiff()

    def cleanup(
        self,
        task: PluginTask,
        schema: Schema,
        task_count: int,
        success_task_reports: List[TaskReport],
    ) -> None:
        pass

    def guess(self, config: Mapping[str, Any]) -> ConfigDiff:
        return ConfigDiff()

    def run(self, task: PluginTask, schema: Schema, task_index: int, output: RecordSink) -> TaskReport:
        """Executes the query and emits one record per document.

        The batch is finished exactly once after the cursor is exhausted; on
        any failure the connection is still closed and the error propagates.
        """
        with task_context(f"task-{task_index}"):
            r = self._driver_factory()
            reql = task.reql or build_query_source(query=task.query, table=task.table)
            plan = QueryCompiler(r, self._evaluator).compile(reql)

            emitter = RecordEmitter(schema, output)
            params = ConnectionParams.from_task(task)
            start = time.perf_counter()

            with open_connection(r, params) as conn:
                with closing(stream_documents(plan, conn)) as docs:
                    for doc in docs:
                        emitter.emit(to_value(doc))

            emitter.finish()
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(f"Task {task_index} emitted {emitter.record_count} records in {duration_ms:.1f} ms")

            return TaskReport(task_index=task_index, record_count=emitter.record_count)
