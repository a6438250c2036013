#!/usr/bin/env python3
"""Command line entry point for the RethinkDB input connector."""
import pathlib
import sys
from contextlib import ExitStack
from typing import List, Optional

import typer
from rethinkdb.errors import ReqlError
from typing_extensions import Annotated

from rethinkdb_input.common.errors import ErrorCategory, RethinkdbInputError
from rethinkdb_input.common.logger import configure_logging
from rethinkdb_input.common.settings import settings
from rethinkdb_input.configs import PluginTask, load_raw_config
from rethinkdb_input.console import console, print_error, print_step, print_success
from rethinkdb_input.output import JsonLinesFileSink, JsonLinesSink, Schema, TaskReport
from rethinkdb_input.plugin import RethinkdbInputPlugin, default_driver
from rethinkdb_input.query import QueryCompiler, build_query_source

EXIT_CODES = {
    ErrorCategory.CONFIGURATION: 1,
    ErrorCategory.TRANSPORT: 2,
    ErrorCategory.DATA: 3,
}

app = typer.Typer(
    name="rethinkdb-input",
    help="Stream RethinkDB query results as single-column JSON records.",
    no_args_is_help=True,
    add_completion=False,
)

ConfigOption = Annotated[Optional[pathlib.Path], typer.Option("--config", "-c", help="Path to plugin config YAML")]


@app.callback()
def global_callback(
    env: Annotated[Optional[str], typer.Option("--env", "-e", help="Environment name; loads .env.<name>.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    RethinkDB input connector.
    """
    if env:
        settings.configure_env(env)
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_format=settings.log_json,
    )


def _load_task(config: Optional[pathlib.Path]) -> PluginTask:
    path = config or pathlib.Path(settings.config_path)
    return PluginTask.from_config(load_raw_config(path))


def _fail(exc: RethinkdbInputError) -> None:
    print_error(f"[{exc.error_code.value}] {exc}")
    raise typer.Exit(code=EXIT_CODES[exc.category])


@app.command()
def run(
    config: ConfigOption = None,
    output: Annotated[Optional[pathlib.Path], typer.Option("--output", "-o", help="Write JSON lines here instead of stdout; written only if the run succeeds")] = None,
):
    """
    Run the query and write one JSON object per document.
    """
    plugin = RethinkdbInputPlugin(driver_factory=default_driver)
    reports: List[TaskReport] = []

    try:
        task = _load_task(config)
        with ExitStack() as stack:
            if output:
                sink = JsonLinesFileSink(output)
                stack.callback(sink.discard)
            else:
                sink = JsonLinesSink(sys.stdout)

            def control(task: PluginTask, schema: Schema, task_count: int) -> List[TaskReport]:
                for index in range(task_count):
                    reports.append(plugin.run(task, schema, index, sink))
                return reports

            print_step(f"Reading from {task.host}:{task.port}/{task.database}")
            plugin.transaction(task, control)
    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_CODES[ErrorCategory.CONFIGURATION])
    except RethinkdbInputError as e:
        _fail(e)
    except ReqlError as e:
        print_error(f"{type(e).__name__}: {e}")
        raise typer.Exit(code=EXIT_CODES[ErrorCategory.TRANSPORT])

    total = sum(report.record_count for report in reports)
    print_success(f"Emitted {total} records in {len(reports)} task(s)")


@app.command()
def check(config: ConfigOption = None):
    """
    Validate the config, compile the query and print its source. Does not connect.
    """
    try:
        task = _load_task(config)
        source = build_query_source(query=task.query, table=task.table)
        QueryCompiler(default_driver()).compile(source)
    except FileNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_CODES[ErrorCategory.CONFIGURATION])
    except RethinkdbInputError as e:
        _fail(e)

    console.print(source, markup=False, highlight=False)
    print_success(f"Config OK; output column '{task.column_name}'")


def main():
    app()


if __name__ == "__main__":
    main()
