"""
Field constructors for the ECS vocabulary.

Each helper tags a value with one of the fixed keys from :mod:`otelecs.keys`,
so the classifier can route it into the right ECS object.
"""

from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Iterable, Optional

from . import fields
from .fields import Field, FieldKind
from .keys import (
    FIELD_ERROR_MESSAGE,
    FIELD_ERROR_TYPE,
    FIELD_EVENT_ACTION,
    FIELD_EVENT_CATEGORY,
    FIELD_EVENT_KIND,
    FIELD_EVENT_MODULE,
    FIELD_EVENT_ORIGINAL,
    FIELD_EVENT_OUTCOME,
    FIELD_EVENT_TYPE,
    FIELD_HTTP_REQUEST_BODY_CONTENT,
    FIELD_HTTP_REQUEST_BODY_HEADERS,
    FIELD_HTTP_REQUEST_METHOD,
    FIELD_HTTP_REQUEST_REFERRER,
    FIELD_HTTP_RESPONSE_BODY_CONTENT,
    FIELD_HTTP_RESPONSE_BODY_REFERRER,
    FIELD_HTTP_RESPONSE_STATUS_CODE,
    FIELD_SERVICE_NAME,
    FIELD_STACK_TRACE,
    FIELD_TAGS,
    FIELD_TRACE_ID,
)

# Header names whose values never reach the log output (compared lower-cased)
SECRET_HEADER_NAMES = frozenset(
    {
        "x-authorization",
        "authorization",
        "cookie",
        "x-san-iatx-user-pass",
    }
)

SECRET_PLACEHOLDER = "SECRET"


def is_header_collection(val: Any) -> bool:
    return isinstance(val, Mapping) or callable(getattr(val, "items", None))


def sanitize_headers(headers: Any) -> list[str]:
    """
    Render header collections as ``name=value`` entries, redacting secrets.

    ``headers`` is a single header mapping or an iterable of them. Values may be
    strings or lists of strings; lists are joined with ``","``. The input is not
    modified.
    """
    if is_header_collection(headers):
        headers = [headers]

    plain = []
    for header in headers:
        for name, value in header.items():
            if str(name).lower() in SECRET_HEADER_NAMES:
                value = SECRET_PLACEHOLDER
            elif isinstance(value, (list, tuple)):
                value = ",".join(str(v) for v in value)
            plain.append(f"{name}={value}")
    return plain


def format_duration(val: timedelta) -> str:
    """Compact duration notation: ``1h2m3.5s``, ``1.532s``, ``500ms``, ``0s``."""
    us = val // timedelta(microseconds=1)
    sign = "-" if us < 0 else ""
    us = abs(us)
    if us == 0:
        return "0s"
    if us < 1_000:
        return f"{sign}{us}µs"
    if us < 1_000_000:
        return f"{sign}{_decimal(us, 1_000)}ms"

    hours, rem = divmod(us, 3_600_000_000)
    minutes, rem = divmod(rem, 60_000_000)
    out = sign
    if hours:
        out += f"{hours}h{minutes}m"
    elif minutes:
        out += f"{minutes}m"
    return f"{out}{_decimal(rem, 1_000_000)}s"


def _decimal(value: int, unit: int) -> str:
    whole, part = divmod(value, unit)
    if not part:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{part:0{digits}d}".rstrip("0")


# =============================================================================
# Base fields
# =============================================================================


def tags(val: Iterable[str]) -> Field:
    """Tags field; merged with the logger's base tags instead of being encoded."""
    return Field(FIELD_TAGS, FieldKind.SKIP, payload=list(val))


def duration(key: str, val: timedelta) -> Field:
    """Duration as a readable string rather than float seconds."""
    return fields.string(key, format_duration(val))


def service_name(val: str) -> Field:
    return fields.string(FIELD_SERVICE_NAME, val)


def event_action(val: str) -> Field:
    return fields.string(FIELD_EVENT_ACTION, val)


def event_kind(val: str) -> Field:
    return fields.string(FIELD_EVENT_KIND, val)


def event_category(val: str) -> Field:
    return fields.string(FIELD_EVENT_CATEGORY, val)


def event_module(val: str) -> Field:
    return fields.string(FIELD_EVENT_MODULE, val)


def event_type(val: str) -> Field:
    return fields.string(FIELD_EVENT_TYPE, val)


def event_original(val: str) -> Field:
    return fields.string(FIELD_EVENT_ORIGINAL, val)


def event_outcome(val: str) -> Field:
    return fields.string(FIELD_EVENT_OUTCOME, val)


def trace_id(val: str) -> Field:
    return fields.string(FIELD_TRACE_ID, val)


# =============================================================================
# Error fields
# =============================================================================


def err(val: Optional[BaseException]) -> Field:
    """
    Error message field. ``None`` yields an explicit nil value, which is
    rendered as an empty string.
    """
    if val is None:
        return fields.string(FIELD_ERROR_MESSAGE, None)
    return fields.string(FIELD_ERROR_MESSAGE, str(val))


def error_type(val: str | BaseException) -> Field:
    if isinstance(val, BaseException):
        val = type(val).__name__
    return fields.string(FIELD_ERROR_TYPE, val)


def stack_trace(val: str) -> Field:
    return fields.string(FIELD_STACK_TRACE, val)


# =============================================================================
# HTTP fields
# =============================================================================


def http_request_body_content(val: str) -> Field:
    return fields.string(FIELD_HTTP_REQUEST_BODY_CONTENT, val)


def http_request_method(val: str) -> Field:
    return fields.string(FIELD_HTTP_REQUEST_METHOD, val)


def http_request_body_headers(val: Any) -> Field:
    """Request headers, already sanitized; see :func:`sanitize_headers`."""
    return fields.strings(FIELD_HTTP_REQUEST_BODY_HEADERS, sanitize_headers(val))


def http_request_referrer(val: str) -> Field:
    return fields.string(FIELD_HTTP_REQUEST_REFERRER, val)


def http_response_body_content(val: str) -> Field:
    return fields.string(FIELD_HTTP_RESPONSE_BODY_CONTENT, val)


def http_response_status_code(val: int | str) -> Field:
    return fields.string(FIELD_HTTP_RESPONSE_STATUS_CODE, str(val))


def http_response_body_referrer(val: str) -> Field:
    return fields.string(FIELD_HTTP_RESPONSE_BODY_REFERRER, val)
