from __future__ import annotations

import datetime
from typing import Any

from rethinkdb_input.common.errors import DataError, ErrorCode
from .models import (
    INT64_MAX,
    INT64_MIN,
    ArrayValue,
    BooleanValue,
    FloatValue,
    IntegerValue,
    MapValue,
    NilValue,
    StringValue,
    Value,
)

_NIL = NilValue()


def to_value(doc: Any) -> Value:
    """Converts one raw driver document into a canonical value.

    Dispatch is on the runtime type; the first matching rule wins:

    - ``None`` -> NilValue
    - ``bool`` -> BooleanValue (checked before ``int``, which it subclasses)
    - ``int`` -> IntegerValue, must fit in a signed 64-bit integer
    - ``float`` -> FloatValue, including nan and infinities
    - ``str`` -> StringValue
    - timezone-aware ``datetime`` -> StringValue in ISO-8601 with offset
    - ``list`` / ``tuple`` -> ArrayValue, elements converted in order
    - ``dict`` -> MapValue, keys and values converted

    Nesting depth is not bounded.

    Args:
        doc: A document or nested value as returned by the driver.

    Returns:
        Value: The canonical value.

    Raises:
        DataError: If the value, or anything nested in it, has an unsupported type.
    """
    if doc is None:
        return _NIL
    if isinstance(doc, bool):
        return BooleanValue(value=doc)
    if isinstance(doc, int):
        if not INT64_MIN <= doc <= INT64_MAX:
            raise DataError(
                "Record parse error, integer out of 64-bit range",
                ErrorCode.INTEGER_OVERFLOW,
                details=str(doc),
            )
        return IntegerValue(value=int(doc))
    if isinstance(doc, float):
        return FloatValue(value=float(doc))
    if isinstance(doc, str):
        return StringValue(value=str(doc))
    if isinstance(doc, datetime.datetime) and doc.utcoffset() is not None:
        return StringValue(value=doc.isoformat())
    if isinstance(doc, (list, tuple)):
        return ArrayValue(items=tuple(to_value(item) for item in doc))
    if isinstance(doc, dict):
        return MapValue(entries=tuple((to_value(k), to_value(v)) for k, v in doc.items()))

    raise DataError(
        "Record parse error, unknown document type",
        ErrorCode.UNKNOWN_DOCUMENT_TYPE,
        details=type(doc).__name__,
    )
