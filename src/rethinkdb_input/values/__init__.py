from .models import (
    Value,
    NilValue,
    IntegerValue,
    FloatValue,
    StringValue,
    BooleanValue,
    ArrayValue,
    MapValue,
    INT64_MIN,
    INT64_MAX,
)
from .converter import to_value

__all__ = [
    "Value",
    "NilValue",
    "IntegerValue",
    "FloatValue",
    "StringValue",
    "BooleanValue",
    "ArrayValue",
    "MapValue",
    "INT64_MIN",
    "INT64_MAX",
    "to_value",
]
