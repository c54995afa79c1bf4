"""Convenience exports for the :mod:`otelecs` package."""

from . import ecs, fields, keys  # noqa: F401
from .classifier import Bucket, FieldBuckets, classify, reduce_key  # noqa: F401
from .config import base_labels_from_env, base_tags_from_env, default_logger_field, options_from_env  # noqa: F401
from .encoder import (  # noqa: F401
    ArrayEncoder,
    MapObjectEncoder,
    ObjectEncoder,
    SliceArrayEncoder,
    encode_field,
    render_fields,
)
from .fields import ArrayMarshaler, Field, FieldKind, ObjectMarshaler  # noqa: F401
from .levels import Level  # noqa: F401
from .logger import ECSLogger, Options, new_ecs_logger  # noqa: F401
from .mechanism import ECSLogError, FieldEncodingError, PanicError, SinkError  # noqa: F401
from .objects import FieldObject, HTTPDocument, HTTPObject, as_object, map_http_field  # noqa: F401
from .sinks import ECSRecord, MemorySink, Sink, StreamSink  # noqa: F401
from .stream import RxSink, as_documents, as_json_lines, at_least, tagged, with_bucket  # noqa: F401

__all__ = [
    "ecs",
    "fields",
    "keys",

    "Field",
    "FieldKind",
    "ObjectMarshaler",
    "ArrayMarshaler",
    "Level",

    # encoding
    "ObjectEncoder",
    "ArrayEncoder",
    "MapObjectEncoder",
    "SliceArrayEncoder",
    "encode_field",
    "render_fields",
    "FieldObject",
    "as_object",
    "HTTPDocument",
    "HTTPObject",
    "map_http_field",

    # classification
    "Bucket",
    "FieldBuckets",
    "classify",
    "reduce_key",

    # logger
    "ECSLogger",
    "Options",
    "new_ecs_logger",
    "options_from_env",
    "base_tags_from_env",
    "base_labels_from_env",
    "default_logger_field",

    # sinks
    "Sink",
    "ECSRecord",
    "MemorySink",
    "StreamSink",
    "RxSink",
    "at_least",
    "tagged",
    "with_bucket",
    "as_documents",
    "as_json_lines",

    # errors
    "ECSLogError",
    "FieldEncodingError",
    "SinkError",
    "PanicError",
]
