from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from rethinkdb_input.common.errors import ConfigurationError, ErrorCode
from .namespace import BuilderNamespace
from .sandbox import QueryEvaluator, SandboxedEvaluator

logger = logging.getLogger(__name__)

PLAN_KEY = "ast"
BUILDER_NAME = "r"


def wrap_query(expression: str) -> str:
    """Binds the expression under ``ast`` and returns it in a one-key record.

    The expression is parenthesised so multi-line method chains parse.
    """
    return f"{PLAN_KEY} = (\n{expression}\n)\nresult = {{{PLAN_KEY!r}: {PLAN_KEY}}}\n"


def build_query_source(query: Optional[str] = None, table: Optional[str] = None) -> str:
    """Builds the wrapped source for a raw query or a whole-table scan.

    Raises:
        ConfigurationError: If both or neither of ``query`` / ``table`` are given.
    """
    if query is not None:
        if table is not None:
            raise ConfigurationError(
                "only one of 'table' or 'query' parameter is needed",
                ErrorCode.QUERY_SOURCE_CONFLICT,
            )
        return wrap_query(query)

    if table is None:
        raise ConfigurationError(
            "'table' or 'query' parameter is needed", ErrorCode.MISSING_QUERY_SOURCE
        )
    return wrap_query(f"{BUILDER_NAME}.table({table!r})")


class QueryCompiler:
    """Compiles wrapped ReQL source into an executable query plan."""

    def __init__(
        self,
        builder: Any,
        evaluator: Optional[QueryEvaluator] = None,
        term_names: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            builder: The driver's query-builder root. Only its term builders are
                exposed to the source, as ``r``.
            evaluator: Evaluator for the wrapped source. Defaults to the sandbox.
            term_names: Attributes of ``builder`` the source may use. Defaults to
                the driver's exported ReQL terms.
        """
        self._namespace = BuilderNamespace(builder, term_names)
        self._evaluator = evaluator or SandboxedEvaluator()

    def compile(self, source: str) -> Any:
        """Evaluates the source and extracts the bound plan.

        Raises:
            ConfigurationError: On any parse or evaluation failure, or when the
                bound value is not a runnable query.
        """
        try:
            record: Mapping[str, Any] = self._evaluator.evaluate(
                source, {BUILDER_NAME: self._namespace}
            )
        except Exception as e:
            logger.error(f"ReQL compile error: {e}")
            raise ConfigurationError(
                "ReQL compile error", ErrorCode.QUERY_COMPILE_ERROR, details=str(e)
            ) from e

        plan = record.get(PLAN_KEY)
        if not callable(getattr(plan, "run", None)):
            raise ConfigurationError(
                "ReQL compile error",
                ErrorCode.QUERY_COMPILE_ERROR,
                details=f"expression did not produce a query (got {type(plan).__name__})",
            )

        logger.debug(f"Compiled ReQL plan: {plan}")
        return plan
