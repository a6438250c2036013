import datetime
import math
from decimal import Decimal

import pytest

from rethinkdb_input.common.errors import DataError, ErrorCode
from rethinkdb_input.values import (
    INT64_MAX,
    INT64_MIN,
    ArrayValue,
    BooleanValue,
    FloatValue,
    IntegerValue,
    MapValue,
    NilValue,
    StringValue,
    to_value,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, NilValue()),
        (42, IntegerValue(value=42)),
        (INT64_MAX, IntegerValue(value=INT64_MAX)),
        (INT64_MIN, IntegerValue(value=INT64_MIN)),
        (1.5, FloatValue(value=1.5)),
        ("héllo", StringValue(value="héllo")),
        (True, BooleanValue(value=True)),
        (False, BooleanValue(value=False)),
    ],
)
def test_scalars_map_to_their_variant(raw, expected):
    assert to_value(raw) == expected


def test_bool_is_not_converted_as_integer():
    # bool subclasses int in Python; it must still come out as a boolean
    value = to_value(True)

    assert isinstance(value, BooleanValue)
    assert value.to_python() is True


def test_special_floats_are_preserved():
    assert math.isnan(to_value(float("nan")).value)
    assert to_value(float("inf")) == FloatValue(value=float("inf"))
    assert to_value(float("-inf")) == FloatValue(value=float("-inf"))


def test_nested_list_preserves_shape_and_order():
    assert to_value([1, "a", None]) == ArrayValue(
        items=(IntegerValue(value=1), StringValue(value="a"), NilValue())
    )


def test_mapping_converts_keys_and_values():
    assert to_value({"k": 1}) == MapValue(
        entries=((StringValue(value="k"), IntegerValue(value=1)),)
    )


def test_non_string_keys_are_canonical_values():
    value = to_value({1: "one", (1, 2): {"x": True}})

    assert value.get(IntegerValue(value=1)) == StringValue(value="one")
    inner = value.get(ArrayValue(items=(IntegerValue(value=1), IntegerValue(value=2))))
    assert inner.get("x") == BooleanValue(value=True)


def test_deeply_nested_document():
    doc = {"order": {"lines": [{"sku": "A1", "qty": 2, "price": 9.5}], "paid": False, "note": None}}

    value = to_value(doc)

    assert value.to_python() == doc
    lines = value.get("order").get("lines")
    assert isinstance(lines, ArrayValue)
    assert lines.items[0].get("qty") == IntegerValue(value=2)


def test_conversion_is_deterministic():
    doc = {"a": [1, 2.0, {"b": None}], "c": "d"}

    assert to_value(doc) == to_value(doc)
    assert hash(to_value(doc)) == hash(to_value(doc))


def test_aware_datetime_renders_iso8601_with_offset():
    tz = datetime.timezone(datetime.timedelta(hours=5, minutes=30))
    moment = datetime.datetime(2021, 3, 4, 5, 6, 7, 123456, tzinfo=tz)

    value = to_value(moment)

    assert value == StringValue(value="2021-03-04T05:06:07.123456+05:30")


def test_datetime_round_trip_keeps_instant_and_offset():
    tz = datetime.timezone(datetime.timedelta(hours=-7))
    moment = datetime.datetime(1999, 12, 31, 23, 59, 59, 500000, tzinfo=tz)

    reparsed = datetime.datetime.fromisoformat(to_value(moment).value)

    assert reparsed == moment
    assert reparsed.utcoffset() == moment.utcoffset()


@pytest.mark.parametrize(
    "raw",
    [
        b"\x00\x01",
        Decimal("1.5"),
        {1, 2},
        object(),
        datetime.date(2020, 1, 1),
        datetime.datetime(2020, 1, 1, 12, 0),
    ],
    ids=["bytes", "decimal", "set", "object", "date", "naive-datetime"],
)
def test_unsupported_types_raise_data_error(raw):
    with pytest.raises(DataError) as exc:
        to_value(raw)

    assert exc.value.error_code == ErrorCode.UNKNOWN_DOCUMENT_TYPE
    assert "unknown document type" in str(exc.value)


def test_unsupported_nested_value_fails_the_whole_document():
    with pytest.raises(DataError):
        to_value({"ok": 1, "bad": [1, b"raw"]})


def test_integer_outside_int64_raises_data_error():
    with pytest.raises(DataError) as exc:
        to_value(INT64_MAX + 1)

    assert exc.value.error_code == ErrorCode.INTEGER_OVERFLOW


def test_to_json_renders_non_string_keys_as_json_text():
    value = to_value({"a": 1, 2: [True, None]})

    assert value.to_python() == {"a": 1, "2": [True, None]}
    assert value.to_json() == '{"a": 1, "2": [true, null]}'


def test_colliding_rendered_keys_raise_data_error():
    value = to_value({1: "a", "1": "b"})

    assert value.get("1") == StringValue(value="b")
    with pytest.raises(DataError) as exc:
        value.to_python()

    assert exc.value.error_code == ErrorCode.DUPLICATE_MAP_KEY
    assert exc.value.details == "1"
