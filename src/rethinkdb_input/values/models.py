"""
Canonical value model for converted documents.

Every document leaving the converter is one of the variants below. The models
are frozen so values are hashable and can themselves be map keys.
"""
from __future__ import annotations

import json
from typing import Any, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr
from typing_extensions import Annotated

from rethinkdb_input.common.errors import DataError, ErrorCode

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class _CanonicalValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_python(self) -> Any:
        """Returns a JSON-compatible Python object."""
        raise NotImplementedError

    def to_json(self) -> str:
        return json.dumps(self.to_python(), ensure_ascii=False)


class NilValue(_CanonicalValue):
    kind: Literal["nil"] = "nil"

    def to_python(self) -> Any:
        return None


class IntegerValue(_CanonicalValue):
    kind: Literal["integer"] = "integer"
    value: Annotated[StrictInt, Field(ge=INT64_MIN, le=INT64_MAX)]

    def to_python(self) -> Any:
        return self.value


class FloatValue(_CanonicalValue):
    kind: Literal["float"] = "float"
    value: StrictFloat

    def to_python(self) -> Any:
        return self.value


class StringValue(_CanonicalValue):
    kind: Literal["string"] = "string"
    value: StrictStr

    def to_python(self) -> Any:
        return self.value


class BooleanValue(_CanonicalValue):
    kind: Literal["boolean"] = "boolean"
    value: StrictBool

    def to_python(self) -> Any:
        return self.value


class ArrayValue(_CanonicalValue):
    kind: Literal["array"] = "array"
    items: Tuple["Value", ...] = ()

    def to_python(self) -> Any:
        return [item.to_python() for item in self.items]


class MapValue(_CanonicalValue):
    """Mapping of canonical values; keys are not restricted to strings.

    Entries keep the order the source mapping delivered them in.
    """

    kind: Literal["map"] = "map"
    entries: Tuple[Tuple["Value", "Value"], ...] = ()

    def get(self, key: Any, default: Any = None) -> Any:
        """Looks up a value by canonical key, or by plain string for string keys."""
        if isinstance(key, str):
            key = StringValue(value=key)
        for k, v in self.entries:
            if k == key:
                return v
        return default

    def to_python(self) -> Any:
        """Returns a JSON object.

        Raises:
            DataError: If two keys render to the same JSON key, e.g. ``1`` and ``"1"``.
        """
        out = {}
        for k, v in self.entries:
            text = _key_text(k)
            if text in out:
                raise DataError(
                    "Record parse error, duplicate map key", ErrorCode.DUPLICATE_MAP_KEY, details=text
                )
            out[text] = v.to_python()
        return out


Value = Annotated[
    Union[NilValue, IntegerValue, FloatValue, StringValue, BooleanValue, ArrayValue, MapValue],
    Field(discriminator="kind"),
]

ArrayValue.model_rebuild()
MapValue.model_rebuild()


def _key_text(key: _CanonicalValue) -> str:
    # JSON object keys must be strings; other keys are rendered as their JSON text
    if isinstance(key, StringValue):
        return key.value
    return json.dumps(key.to_python(), ensure_ascii=False, separators=(",", ":"))
