"""
Value-directed encoding of typed fields.

:class:`ObjectEncoder` and :class:`ArrayEncoder` describe the sink capability a
field is written into. :func:`encode_field` dispatches on the field's kind and
makes exactly one contribution to the sink. :class:`MapObjectEncoder` is the
neutral implementation that builds plain ``dict``/``list`` values ready for
``json.dumps``.
"""

import base64
import json
import math
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Iterable

from .fields import ArrayMarshaler, Field, FieldKind, ObjectMarshaler
from .mechanism import FieldEncodingError


class ObjectEncoder(ABC):
    """A target that accepts named, typed contributions."""

    @abstractmethod
    def add_bool(self, key: str, val: bool) -> None: ...

    @abstractmethod
    def add_int64(self, key: str, val: int) -> None: ...

    @abstractmethod
    def add_uint64(self, key: str, val: int) -> None: ...

    @abstractmethod
    def add_float64(self, key: str, val: float) -> None: ...

    @abstractmethod
    def add_string(self, key: str, val: str) -> None: ...

    @abstractmethod
    def add_binary(self, key: str, val: bytes) -> None: ...

    @abstractmethod
    def add_byte_string(self, key: str, val: bytes) -> None: ...

    @abstractmethod
    def add_duration(self, key: str, val: timedelta) -> None: ...

    @abstractmethod
    def add_time(self, key: str, val: datetime) -> None: ...

    @abstractmethod
    def add_object(self, key: str, val: ObjectMarshaler) -> None: ...

    @abstractmethod
    def add_array(self, key: str, val: ArrayMarshaler) -> None: ...

    @abstractmethod
    def add_reflected(self, key: str, val: Any) -> None: ...

    @abstractmethod
    def add_raw_json(self, key: str, val: bytes) -> None: ...

    def add_int32(self, key: str, val: int) -> None:
        self.add_int64(key, val)

    def add_int16(self, key: str, val: int) -> None:
        self.add_int64(key, val)

    def add_int8(self, key: str, val: int) -> None:
        self.add_int64(key, val)

    def add_uint32(self, key: str, val: int) -> None:
        self.add_uint64(key, val)

    def add_uint16(self, key: str, val: int) -> None:
        self.add_uint64(key, val)

    def add_uint8(self, key: str, val: int) -> None:
        self.add_uint64(key, val)

    def add_uintptr(self, key: str, val: int) -> None:
        self.add_uint64(key, val)

    def add_float32(self, key: str, val: float) -> None:
        self.add_float64(key, val)


class ArrayEncoder(ABC):
    """A target that accepts positional, typed contributions."""

    @abstractmethod
    def append_bool(self, val: bool) -> None: ...

    @abstractmethod
    def append_int64(self, val: int) -> None: ...

    @abstractmethod
    def append_float64(self, val: float) -> None: ...

    @abstractmethod
    def append_string(self, val: str) -> None: ...

    @abstractmethod
    def append_object(self, val: ObjectMarshaler) -> None: ...

    @abstractmethod
    def append_array(self, val: ArrayMarshaler) -> None: ...

    @abstractmethod
    def append_reflected(self, val: Any) -> None: ...


def float_value(val: float) -> float | str:
    """NaN and infinities have no JSON number form; they are written as text."""
    val = float(val)
    if math.isnan(val):
        return "NaN"
    if math.isinf(val):
        return "+Inf" if val > 0 else "-Inf"
    return val


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _normalize(val: Any) -> Any:
    # non-finite floats inside reflected values fail like any other unencodable value
    return json.loads(json.dumps(val, default=str, ensure_ascii=False, allow_nan=False))


class MapObjectEncoder(ObjectEncoder):
    """Collects contributions into an insertion-ordered ``dict``."""

    def __init__(self):
        self.fields: dict[str, Any] = {}

    def add_bool(self, key: str, val: bool) -> None:
        self.fields[key] = bool(val)

    def add_int64(self, key: str, val: int) -> None:
        self.fields[key] = int(val)

    def add_uint64(self, key: str, val: int) -> None:
        self.fields[key] = int(val)

    def add_float64(self, key: str, val: float) -> None:
        self.fields[key] = float_value(val)

    def add_string(self, key: str, val: str) -> None:
        self.fields[key] = val

    def add_binary(self, key: str, val: bytes) -> None:
        self.fields[key] = base64.b64encode(val).decode("ascii")

    def add_byte_string(self, key: str, val: bytes) -> None:
        self.fields[key] = val.decode("utf-8", errors="replace")

    def add_duration(self, key: str, val: timedelta) -> None:
        self.fields[key] = val.total_seconds()

    def add_time(self, key: str, val: datetime) -> None:
        self.fields[key] = val.isoformat()

    def add_object(self, key: str, val: ObjectMarshaler) -> None:
        child = MapObjectEncoder()
        val.marshal_log_object(child)
        self.fields[key] = child.fields

    def add_array(self, key: str, val: ArrayMarshaler) -> None:
        child = SliceArrayEncoder()
        val.marshal_log_array(child)
        self.fields[key] = child.items

    def add_reflected(self, key: str, val: Any) -> None:
        self.fields[key] = _normalize(val)

    def add_raw_json(self, key: str, val: bytes) -> None:
        try:
            self.fields[key] = json.loads(val, parse_constant=_reject_constant)
        except ValueError:
            self.fields[key] = val.decode("utf-8", errors="replace")


class SliceArrayEncoder(ArrayEncoder):
    """Collects contributions into a ``list``."""

    def __init__(self):
        self.items: list[Any] = []

    def append_bool(self, val: bool) -> None:
        self.items.append(bool(val))

    def append_int64(self, val: int) -> None:
        self.items.append(int(val))

    def append_float64(self, val: float) -> None:
        self.items.append(float_value(val))

    def append_string(self, val: str) -> None:
        self.items.append(val)

    def append_object(self, val: ObjectMarshaler) -> None:
        child = MapObjectEncoder()
        val.marshal_log_object(child)
        self.items.append(child.fields)

    def append_array(self, val: ArrayMarshaler) -> None:
        child = SliceArrayEncoder()
        val.marshal_log_array(child)
        self.items.append(child.items)

    def append_reflected(self, val: Any) -> None:
        self.items.append(_normalize(val))


class StringArray:
    """ArrayMarshaler over a sequence of strings."""

    def __init__(self, values: Iterable[str]):
        self.values = tuple(values)

    def marshal_log_array(self, enc: ArrayEncoder) -> None:
        for v in self.values:
            enc.append_string(v)


_INT_WRITERS = {
    FieldKind.INT64: "add_int64",
    FieldKind.INT32: "add_int32",
    FieldKind.INT16: "add_int16",
    FieldKind.INT8: "add_int8",
    FieldKind.UINT64: "add_uint64",
    FieldKind.UINT32: "add_uint32",
    FieldKind.UINT16: "add_uint16",
    FieldKind.UINT8: "add_uint8",
    FieldKind.UINTPTR: "add_uintptr",
}


def encode_field(enc: ObjectEncoder, field: Field) -> None:
    """
    Write ``field`` into ``enc`` according to its kind.

    Skip fields, unknown kinds and payloads that do not match their declared
    kind contribute nothing. Failures raised while marshaling nested values
    are reported as :class:`FieldEncodingError`.
    """
    key = field.key
    kind = field.kind
    val = field.payload
    try:
        if kind is FieldKind.OBJECT:
            if isinstance(val, ObjectMarshaler):
                enc.add_object(key, val)
        elif kind is FieldKind.ARRAY:
            if isinstance(val, ArrayMarshaler):
                enc.add_array(key, val)
        elif kind is FieldKind.STRINGS:
            if isinstance(val, (list, tuple)):
                enc.add_array(key, StringArray(val))
        elif kind is FieldKind.BINARY:
            if isinstance(val, (bytes, bytearray)):
                enc.add_binary(key, bytes(val))
        elif kind is FieldKind.BYTE_STRING:
            if isinstance(val, (bytes, bytearray)):
                enc.add_byte_string(key, bytes(val))
        elif kind is FieldKind.BOOL:
            if isinstance(val, bool):
                enc.add_bool(key, val)
        elif kind is FieldKind.DURATION:
            if isinstance(val, timedelta):
                enc.add_duration(key, val)
        elif kind is FieldKind.FLOAT64:
            if isinstance(val, (int, float)):
                enc.add_float64(key, val)
        elif kind is FieldKind.FLOAT32:
            if isinstance(val, (int, float)):
                enc.add_float32(key, val)
        elif kind in _INT_WRITERS:
            if isinstance(val, int):
                getattr(enc, _INT_WRITERS[kind])(key, val)
        elif kind is FieldKind.STRING:
            if val is None:
                enc.add_string(key, field.text)
            elif isinstance(val, str):
                enc.add_string(key, val)
        elif kind is FieldKind.TIME:
            enc.add_int64(key, field.integer)
        elif kind is FieldKind.TIME_FULL:
            if isinstance(val, datetime):
                enc.add_time(key, val)
        elif kind is FieldKind.REFLECT:
            enc.add_reflected(key, val)
        elif kind is FieldKind.STRINGER:
            enc.add_string(key, str(val))
        elif kind is FieldKind.ERROR:
            if isinstance(val, BaseException):
                enc.add_string(key, str(val))
        elif kind is FieldKind.RAW_JSON:
            if isinstance(val, (bytes, bytearray)):
                enc.add_raw_json(key, bytes(val))
        # SKIP and anything unrecognized: no contribution
    except FieldEncodingError:
        raise
    except Exception as e:
        raise FieldEncodingError(key, e) from e


def add_fields(enc: ObjectEncoder, fields: Iterable[Field]) -> None:
    """Encode every field, recording failures as ``<key>Error`` strings."""
    for field in fields:
        try:
            encode_field(enc, field)
        except FieldEncodingError as e:
            enc.add_string(e.error_key, str(e.cause))


def render_fields(fields: Iterable[Field]) -> dict[str, Any]:
    """Render a final field list into an ordered, JSON-ready ``dict``."""
    enc = MapObjectEncoder()
    add_fields(enc, fields)
    return enc.fields
