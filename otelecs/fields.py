"""
Typed log fields.

A :class:`Field` is one key/value pair attached to a log call. The value is
stored in exactly one slot, selected by :class:`FieldKind`; the encoder in
:mod:`otelecs.encoder` dispatches on that kind to write the value.
"""

import struct
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .encoder import ArrayEncoder, ObjectEncoder


class FieldKind(Enum):
    SKIP = "skip"
    STRING = "string"
    BOOL = "bool"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    UINTPTR = "uintptr"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DURATION = "duration"
    # epoch nanoseconds kept in ``Field.integer``
    TIME = "time"
    TIME_FULL = "time_full"
    BINARY = "binary"
    BYTE_STRING = "byte_string"
    STRINGS = "strings"
    OBJECT = "object"
    ARRAY = "array"
    REFLECT = "reflect"
    STRINGER = "stringer"
    ERROR = "error"
    RAW_JSON = "raw_json"


@runtime_checkable
class ObjectMarshaler(Protocol):
    """Anything that can write itself as a nested object."""

    def marshal_log_object(self, enc: "ObjectEncoder") -> None: ...


@runtime_checkable
class ArrayMarshaler(Protocol):
    """Anything that can write itself as an array."""

    def marshal_log_array(self, enc: "ArrayEncoder") -> None: ...


@dataclass(frozen=True, slots=True)
class Field:
    """
    One typed log field.

    Attributes:
        key: Dotted field name, e.g. ``"event.action"``.
        kind: Selects which of ``integer``, ``text`` or ``payload`` is meaningful.
        integer: Epoch nanoseconds for :attr:`FieldKind.TIME`.
        text: Pre-rendered string value for :attr:`FieldKind.STRING`.
        payload: The value for every other kind.
    """

    key: str
    kind: FieldKind
    integer: int = 0
    text: str = ""
    payload: Any = None

    def with_key(self, key: str) -> "Field":
        return replace(self, key=key)


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _nil(key: str) -> Field:
    return Field(key, FieldKind.REFLECT)


def _wrap_int(value: int, bits: int, signed: bool) -> int:
    value = int(value) & ((1 << bits) - 1)
    if signed and value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _int_field(key: str, val: Optional[int], kind: FieldKind, bits: int, signed: bool) -> Field:
    if val is None:
        return _nil(key)
    return Field(key, kind, payload=_wrap_int(val, bits, signed))


def _as_utc(val: datetime) -> datetime:
    # naive datetimes are taken as UTC
    if val.tzinfo is None:
        return val.replace(tzinfo=timezone.utc)
    return val


def skip() -> Field:
    """A no-op field; encoders ignore it."""
    return Field("", FieldKind.SKIP)


def string(key: str, val: Optional[str]) -> Field:
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.STRING, text=val)


def boolean(key: str, val: Optional[bool]) -> Field:
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.BOOL, payload=bool(val))


def int8(key: str, val: Optional[int]) -> Field:
    return _int_field(key, val, FieldKind.INT8, 8, True)


def int16(key: str, val: Optional[int]) -> Field:
    return _int_field(key, val, FieldKind.INT16, 16, True)


def int32(key: str, val: Optional[int]) -> Field:
    return _int_field(key, val, FieldKind.INT32, 32, True)


def int64(key: str, val: Optional[int]) -> Field:
    return _int_field(key, val, FieldKind.INT64, 64, True)


def uint8(key: str, val: Optional[int]) -> Field:
    return _int_field(key, val, FieldKind.UINT8, 8, False)


def uint16(key: str, val: Optional[int]) -> Field:
    return _int_field(key, val, FieldKind.UINT16, 16, False)


def uint32(key: str, val: Optional[int]) -> Field:
    return _int_field(key, val, FieldKind.UINT32, 32, False)


def uint64(key: str, val: Optional[int]) -> Field:
    return _int_field(key, val, FieldKind.UINT64, 64, False)


def uintptr(key: str, val: Optional[int]) -> Field:
    return _int_field(key, val, FieldKind.UINTPTR, 64, False)


def float32(key: str, val: Optional[float]) -> Field:
    """Float field rounded to single precision."""
    if val is None:
        return _nil(key)
    try:
        rounded = struct.unpack("f", struct.pack("f", val))[0]
    except OverflowError:
        rounded = float("inf") if val > 0 else float("-inf")
    return Field(key, FieldKind.FLOAT32, payload=rounded)


def float64(key: str, val: Optional[float]) -> Field:
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.FLOAT64, payload=float(val))


def duration(key: str, val: Optional[timedelta]) -> Field:
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.DURATION, payload=val)


def time(key: str, val: Optional[datetime]) -> Field:
    """Timestamp field encoded as a full ISO-8601 timestamp."""
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.TIME_FULL, payload=val)


def epoch(key: str, val: Optional[datetime]) -> Field:
    """Timestamp field encoded as integer nanoseconds since the Unix epoch."""
    if val is None:
        return _nil(key)
    val = _as_utc(val)
    return Field(key, FieldKind.TIME, integer=(val - _EPOCH) // timedelta(microseconds=1) * 1000, payload=val)


def binary(key: str, val: Optional[bytes]) -> Field:
    """Opaque binary blob; encoded as base64."""
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.BINARY, payload=bytes(val))


def byte_string(key: str, val: Optional[bytes]) -> Field:
    """UTF-8 encoded bytes; encoded as text."""
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.BYTE_STRING, payload=bytes(val))


def strings(key: str, val: Optional[Iterable[str]]) -> Field:
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.STRINGS, payload=tuple(val))


def obj(key: str, val: Optional[ObjectMarshaler]) -> Field:
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.OBJECT, payload=val)


def array(key: str, val: Optional[ArrayMarshaler]) -> Field:
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.ARRAY, payload=val)


def reflect(key: str, val: Any) -> Field:
    """Arbitrary value, serialized the way ``json.dumps`` would."""
    return Field(key, FieldKind.REFLECT, payload=val)


def stringer(key: str, val: Any) -> Field:
    """Value rendered lazily with ``str()`` at encoding time."""
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.STRINGER, payload=val)


def error(key: str, val: Optional[BaseException]) -> Field:
    if val is None:
        return _nil(key)
    return Field(key, FieldKind.ERROR, payload=val)


def raw_json(key: str, val: bytes | str) -> Field:
    """Pre-serialized JSON embedded as a JSON value rather than a string."""
    if isinstance(val, str):
        val = val.encode("utf-8")
    return Field(key, FieldKind.RAW_JSON, payload=bytes(val))


def any_field(key: str, val: Any) -> Field:
    """
    Pick the field constructor matching the runtime type of ``val``.

    Values outside the known set fall back to :func:`reflect`.
    """
    if val is None:
        return _nil(key)
    if isinstance(val, bool):
        return boolean(key, val)
    if isinstance(val, int):
        if -(1 << 63) <= val < 1 << 63:
            return int64(key, val)
        if 0 <= val < 1 << 64:
            return uint64(key, val)
        return reflect(key, val)
    if isinstance(val, float):
        return float64(key, val)
    if isinstance(val, str):
        return string(key, val)
    if isinstance(val, (bytes, bytearray)):
        return binary(key, val)
    if isinstance(val, timedelta):
        return duration(key, val)
    if isinstance(val, datetime):
        return time(key, val)
    if isinstance(val, BaseException):
        return error(key, val)
    if isinstance(val, ObjectMarshaler):
        return obj(key, val)
    if isinstance(val, ArrayMarshaler):
        return array(key, val)
    if isinstance(val, (list, tuple)) and all(isinstance(v, str) for v in val):
        return strings(key, val)
    return reflect(key, val)
