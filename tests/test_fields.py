from datetime import datetime, timedelta, timezone

import pytest

from otelecs import fields as f
from otelecs.fields import FieldKind


def test_string_keeps_value_in_text():
    fld = f.string("foo", "bar")
    assert fld.kind is FieldKind.STRING
    assert fld.text == "bar"
    assert fld.payload is None


def test_none_values_become_nil_fields():
    for ctor in (f.string, f.boolean, f.int64, f.float64, f.duration, f.time, f.error):
        fld = ctor("k", None)
        assert fld.kind is FieldKind.REFLECT
        assert fld.payload is None


@pytest.mark.parametrize(
    "ctor, value, expected",
    [
        (f.int8, 200, -56),
        (f.int8, -129, 127),
        (f.int16, 1 << 15, -(1 << 15)),
        (f.uint8, -1, 255),
        (f.uint16, 1 << 16, 0),
        (f.int64, 42, 42),
    ],
)
def test_integers_wrap_to_width(ctor, value, expected):
    assert ctor("k", value).payload == expected


def test_float32_rounds_to_single_precision():
    fld = f.float32("pi", 3.141592653589793)
    assert fld.payload != 3.141592653589793
    assert abs(fld.payload - 3.141592653589793) < 1e-6


def test_epoch_counts_nanoseconds():
    dt = datetime(1990, 11, 26, 17, 56, 11, tzinfo=timezone.utc)
    fld = f.epoch("ts", dt)
    assert fld.kind is FieldKind.TIME
    assert fld.integer == int(dt.timestamp()) * 1_000_000_000


def test_epoch_treats_naive_datetime_as_utc():
    naive = datetime(2000, 1, 1)
    aware = datetime(2000, 1, 1, tzinfo=timezone.utc)
    assert f.epoch("ts", naive).integer == f.epoch("ts", aware).integer


def test_with_key_returns_copy():
    fld = f.string("event.action", "start")
    reduced = fld.with_key("action")
    assert reduced.key == "action"
    assert fld.key == "event.action"
    assert reduced.text == "start"


def test_skip_field():
    assert f.skip().kind is FieldKind.SKIP


@pytest.mark.parametrize(
    "value, kind",
    [
        (True, FieldKind.BOOL),
        (3, FieldKind.INT64),
        (1 << 63, FieldKind.UINT64),
        (1 << 70, FieldKind.REFLECT),
        (1.5, FieldKind.FLOAT64),
        ("s", FieldKind.STRING),
        (b"x", FieldKind.BINARY),
        (timedelta(seconds=1), FieldKind.DURATION),
        (datetime(2020, 1, 1), FieldKind.TIME_FULL),
        (ValueError("bad"), FieldKind.ERROR),
        (["a", "b"], FieldKind.STRINGS),
        ({"a": 1}, FieldKind.REFLECT),
        (None, FieldKind.REFLECT),
    ],
)
def test_any_field_picks_kind(value, kind):
    assert f.any_field("k", value).kind is kind


def test_any_field_detects_marshalers():
    class Obj:
        def marshal_log_object(self, enc):
            pass

    class Arr:
        def marshal_log_array(self, enc):
            pass

    assert f.any_field("o", Obj()).kind is FieldKind.OBJECT
    assert f.any_field("a", Arr()).kind is FieldKind.ARRAY


def test_raw_json_accepts_text():
    assert f.raw_json("k", '{"a":1}').payload == b'{"a":1}'
