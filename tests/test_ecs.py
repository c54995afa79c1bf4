from datetime import timedelta

import pytest

from otelecs import ecs, keys
from otelecs.fields import FieldKind


def test_sanitize_headers_redacts_secrets_case_insensitively():
    headers = [{"Authorization": ["secret123"], "X-Trace": ["abc"]}]
    assert ecs.sanitize_headers(headers) == ["Authorization=SECRET", "X-Trace=abc"]


@pytest.mark.parametrize("name", ["authorization", "X-Authorization", "COOKIE", "x-san-iatx-user-pass"])
def test_every_secret_header_is_redacted(name):
    assert ecs.sanitize_headers({name: "value"}) == [f"{name}=SECRET"]


def test_sanitize_headers_joins_multiple_values():
    assert ecs.sanitize_headers([{"Accept": ["a", "b"]}, {"Host": "h"}]) == ["Accept=a,b", "Host=h"]


def test_sanitize_headers_does_not_modify_input():
    headers = {"Cookie": ["a=b"]}
    ecs.sanitize_headers(headers)
    assert headers == {"Cookie": ["a=b"]}


@pytest.mark.parametrize(
    "value, expected",
    [
        (timedelta(0), "0s"),
        (timedelta(microseconds=7), "7µs"),
        (timedelta(microseconds=1500), "1.5ms"),
        (timedelta(milliseconds=500), "500ms"),
        (timedelta(milliseconds=1532), "1.532s"),
        (timedelta(seconds=90), "1m30s"),
        (timedelta(hours=1), "1h0m0s"),
        (timedelta(hours=1, seconds=2.5), "1h0m2.5s"),
        (timedelta(seconds=-1.5), "-1.5s"),
    ],
)
def test_format_duration(value, expected):
    assert ecs.format_duration(value) == expected


def test_duration_is_a_string_field():
    fld = ecs.duration("elapsed_example", timedelta(milliseconds=1532))
    assert fld.kind is FieldKind.STRING
    assert fld.text == "1.532s"


def test_tags_is_a_skip_field_with_list_payload():
    fld = ecs.tags(["tag1", "tag2"])
    assert fld.key == keys.FIELD_TAGS
    assert fld.kind is FieldKind.SKIP
    assert fld.payload == ["tag1", "tag2"]


@pytest.mark.parametrize(
    "ctor, key",
    [
        (ecs.service_name, keys.FIELD_SERVICE_NAME),
        (ecs.event_action, keys.FIELD_EVENT_ACTION),
        (ecs.event_kind, keys.FIELD_EVENT_KIND),
        (ecs.event_category, keys.FIELD_EVENT_CATEGORY),
        (ecs.event_module, keys.FIELD_EVENT_MODULE),
        (ecs.event_type, keys.FIELD_EVENT_TYPE),
        (ecs.event_original, keys.FIELD_EVENT_ORIGINAL),
        (ecs.event_outcome, keys.FIELD_EVENT_OUTCOME),
        (ecs.trace_id, keys.FIELD_TRACE_ID),
        (ecs.stack_trace, keys.FIELD_STACK_TRACE),
        (ecs.http_request_body_content, keys.FIELD_HTTP_REQUEST_BODY_CONTENT),
        (ecs.http_request_method, keys.FIELD_HTTP_REQUEST_METHOD),
        (ecs.http_request_referrer, keys.FIELD_HTTP_REQUEST_REFERRER),
        (ecs.http_response_body_content, keys.FIELD_HTTP_RESPONSE_BODY_CONTENT),
        (ecs.http_response_body_referrer, keys.FIELD_HTTP_RESPONSE_BODY_REFERRER),
    ],
)
def test_string_constructors_use_fixed_keys(ctor, key):
    fld = ctor("value")
    assert fld.key == key
    assert fld.text == "value"
    assert keys.is_ecs_field_name(key)


def test_status_code_accepts_int():
    assert ecs.http_response_status_code(201).text == "201"


def test_request_headers_are_sanitized_on_construction():
    fld = ecs.http_request_body_headers([{"Authorization": ["x"], "foo": ["bar"]}])
    assert fld.kind is FieldKind.STRINGS
    assert fld.payload == ("Authorization=SECRET", "foo=bar")


def test_err():
    assert ecs.err(ValueError("fail")).text == "fail"
    nil = ecs.err(None)
    assert nil.key == keys.FIELD_ERROR_MESSAGE
    assert nil.payload is None


def test_error_type_from_exception():
    assert ecs.error_type(KeyError("x")).text == "KeyError"
    assert ecs.error_type("panic").text == "panic"


def test_is_ecs_field_name():
    assert keys.is_ecs_field_name("tags")
    assert not keys.is_ecs_field_name("custom.x")
