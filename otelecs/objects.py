"""
Encoders turning a bucket of fields into one nested ECS object.

:class:`FieldObject` writes a flat ``key -> value`` object. :class:`HTTPObject`
maps the HTTP fields onto the fixed ``request``/``response`` document and embeds
it as raw JSON.
"""

import json
from decimal import Decimal
from dataclasses import dataclass, fields as dataclass_fields, is_dataclass
from typing import Any, Callable, Optional

from . import keys
from .ecs import is_header_collection, sanitize_headers
from .encoder import ObjectEncoder, encode_field, float_value
from .fields import Field, FieldKind, raw_json
from .mechanism import FieldEncodingError


class FieldObject:
    """Field wrapper which encodes into a plain key/value object on marshal."""

    def __init__(self, fields: list[Field]):
        self.fields = fields

    def marshal_log_object(self, enc: ObjectEncoder) -> None:
        for fld in self.fields:
            if fld.kind is FieldKind.SKIP:
                continue
            # Encode either the field's payload or its text, in that order of availability
            if fld.payload is None:
                enc.add_string(fld.key, fld.text)
                continue
            try:
                encode_field(enc, fld)
            except FieldEncodingError as e:
                enc.add_string(e.error_key, str(e.cause))


def as_object(*fields: Field) -> FieldObject:
    return FieldObject(list(fields))


# =============================================================================
# HTTP document
# =============================================================================


@dataclass
class HTTPBody:
    content: str = ""
    headers: str = ""
    status_code: str = ""


@dataclass
class HTTPRequest:
    body: Optional[HTTPBody] = None
    method: str = ""
    referrer: str = ""

    def ensure_body(self) -> HTTPBody:
        if self.body is None:
            self.body = HTTPBody()
        return self.body


@dataclass
class HTTPResponse:
    body: Optional[HTTPBody] = None
    referrer: str = ""

    def ensure_body(self) -> HTTPBody:
        if self.body is None:
            self.body = HTTPBody()
        return self.body


@dataclass
class HTTPDocument:
    request: Optional[HTTPRequest] = None
    response: Optional[HTTPResponse] = None

    def ensure_request(self) -> HTTPRequest:
        if self.request is None:
            self.request = HTTPRequest()
        return self.request

    def ensure_response(self) -> HTTPResponse:
        if self.response is None:
            self.response = HTTPResponse()
        return self.response

    def to_dict(self) -> dict[str, Any]:
        """Nested dict omitting unallocated nodes and empty leaves."""
        return _omit_empty(self)


def _omit_empty(node: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in dataclass_fields(node):
        value = getattr(node, f.name)
        if value is None or value == "":
            continue
        out[f.name] = _omit_empty(value) if is_dataclass(value) else value
    return out


def format_scalar(val: Any) -> str:
    """Text for a scalar HTTP value: ``true``/``false``, and floats in shortest ``%g`` form (``1``, ``1e+06``)."""
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, int):
        return str(val)
    if isinstance(val, float):
        text = float_value(val)
        if isinstance(text, str):
            return text
        digits = Decimal(repr(val)).normalize()
        _, mantissa, exponent = digits.as_tuple()
        point = len(mantissa) + exponent - 1
        if -4 <= point < 6:
            return format(digits, "f")
        head, rest = str(mantissa[0]), "".join(map(str, mantissa[1:]))
        sign = "-" if val < 0 else ""
        return f"{sign}{head}{'.' + rest if rest else ''}e{point:+03d}"
    return str(val)


def value_as_string(fld: Field) -> str:
    """
    Coerce a field to the string stored in the HTTP document.

    Header collections are sanitized and rendered as comma-joined
    ``name=value`` entries.
    """
    if fld.text:
        return fld.text
    val = fld.payload
    if val is None:
        return ""
    if is_header_collection(val) or (
        isinstance(val, (list, tuple)) and val and all(is_header_collection(h) for h in val)
    ):
        return ",".join(sanitize_headers(val))
    if isinstance(val, (list, tuple)):
        return ",".join(format_scalar(v) for v in val)
    if isinstance(val, (bytes, bytearray)):
        return bytes(val).decode("utf-8", errors="replace")
    return format_scalar(val)


def map_http_field(fld: Field, doc: HTTPDocument) -> None:
    """Assign one HTTP field to its leaf; unrecognized keys are ignored."""
    key = fld.key
    if key == keys.FIELD_HTTP_REQUEST_BODY_CONTENT:
        doc.ensure_request().ensure_body().content = value_as_string(fld)
    elif key == keys.FIELD_HTTP_REQUEST_BODY_HEADERS:
        doc.ensure_request().ensure_body().headers = value_as_string(fld)
    elif key == keys.FIELD_HTTP_REQUEST_METHOD:
        doc.ensure_request().method = value_as_string(fld)
    elif key == keys.FIELD_HTTP_REQUEST_REFERRER:
        doc.ensure_request().referrer = value_as_string(fld)
    elif key == keys.FIELD_HTTP_RESPONSE_BODY_CONTENT:
        doc.ensure_response().ensure_body().content = value_as_string(fld)
    elif key == keys.FIELD_HTTP_RESPONSE_STATUS_CODE:
        doc.ensure_response().ensure_body().status_code = value_as_string(fld)
    elif key == keys.FIELD_HTTP_RESPONSE_BODY_REFERRER:
        doc.ensure_response().referrer = value_as_string(fld)


class HTTPObject:
    """Specialized nested object which serializes into a single raw JSON field."""

    def __init__(
        self,
        base_key: str,
        fields: list[Field],
        mapper: Callable[[Field, HTTPDocument], None] = map_http_field,
    ):
        self.base_key = base_key
        self.fields = fields
        self.mapper = mapper

    def document(self) -> HTTPDocument:
        doc = HTTPDocument()
        for fld in self.fields:
            self.mapper(fld, doc)
        return doc

    def marshal_json(self) -> bytes:
        return json.dumps(
            self.document().to_dict(), separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")

    def as_field(self) -> Field:
        """
        The serialized document as a raw JSON field. A failure while building
        it is not raised; the error text becomes the field value instead.
        """
        try:
            data = self.marshal_json()
        except Exception as e:
            # always a JSON string, even when the text parses as JSON
            data = json.dumps(str(e), ensure_ascii=False).encode("utf-8")
        return raw_json(self.base_key, data)
