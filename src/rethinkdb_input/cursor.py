from __future__ import annotations

import logging
from collections.abc import Iterator as IteratorABC
from typing import Any, Iterator

logger = logging.getLogger(__name__)


def stream_documents(plan: Any, conn: Any) -> Iterator[Any]:
    """Runs the plan on the connection and yields raw documents lazily.

    Sequence results come back from the driver as a cursor that is iterated
    one document at a time and closed when the generator ends. A materialised
    list is yielded element by element, and any other single value is yielded
    as one document.

    The generator is not restartable; run the plan again to re-read.
    """
    result = plan.run(conn)

    if isinstance(result, list):
        logger.debug(f"Query returned an array of {len(result)} documents")
        yield from result
        return

    if not isinstance(result, IteratorABC):
        logger.debug("Query returned a single value")
        yield result
        return

    try:
        for doc in result:
            yield doc
    finally:
        close = getattr(result, "close", None)
        if close is not None:
            close()
