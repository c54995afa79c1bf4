"""
ECS logger.

:class:`ECSLogger` turns the fields of each log call into the ECS record
layout (``tags``, base labels, then the ``labels``, ``log``, ``http``,
``event``, ``error`` and ``trace`` objects) and hands the result to a
:class:`~otelecs.sinks.Sink`.

Example:
    >>> sink = MemorySink()
    >>> logger = ECSLogger(Options(sink=sink, base_tags=("prod",)))
    >>> logger.info("request served", ecs.http_request_method("POST"), ecs.tags(["api"]))
"""

from dataclasses import dataclass
from typing import Any, Iterable

from . import fields as f
from .classifier import classify
from .fields import Field
from .keys import (
    ERROR_BASE_KEY,
    EVENT_BASE_KEY,
    FIELD_LABELS,
    FIELD_LOGGER,
    FIELD_TAGS,
    HTTP_BASE_KEY,
    LOG_BASE_KEY,
    TRACE_BASE_KEY,
)
from .levels import Level
from .mechanism import PanicError, SinkError
from .objects import FieldObject, HTTPObject
from .sinks import Sink

DEFAULT_LOGGER_NAME = "ecs_(otelecs)"


@dataclass(frozen=True)
class Options:
    """
    Process-wide logger configuration, fixed at construction.

    Attributes:
        sink: Destination of the assembled records.
        logger_field: Logger identity, always added to the ``log`` object.
        base_tags: Tags prepended to every record's ``tags``.
        base_labels: Fields added to every record verbatim.
    """

    sink: Sink
    logger_field: Field = f.string(FIELD_LOGGER, DEFAULT_LOGGER_NAME)
    base_tags: tuple[str, ...] = ()
    base_labels: tuple[Field, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "base_tags", tuple(self.base_tags))
        object.__setattr__(self, "base_labels", tuple(self.base_labels))


class ECSLogger:
    """Logger which encodes call fields into ECS objects before writing them."""

    def __init__(self, options: Options):
        self._options = options

    @property
    def options(self) -> Options:
        return self._options

    @property
    def sink(self) -> Sink:
        return self._options.sink

    def encode_fields(self, fields: Iterable[Field], level: Level) -> list[Field]:
        """Assemble the final field list for one call."""
        o = self._options
        buckets = classify(fields, o.base_labels, o.base_tags, level, o.logger_field)

        out: list[Field] = []
        if buckets.tags:
            out.append(f.strings(FIELD_TAGS, buckets.tags))
        out.extend(o.base_labels)
        out.extend(
            [
                f.obj(FIELD_LABELS, FieldObject(buckets.labels)),
                f.obj(LOG_BASE_KEY, FieldObject(buckets.log)),
                HTTPObject(HTTP_BASE_KEY, buckets.http).as_field(),
                f.obj(EVENT_BASE_KEY, FieldObject(buckets.event)),
                f.obj(ERROR_BASE_KEY, FieldObject(buckets.error)),
                f.obj(TRACE_BASE_KEY, FieldObject(buckets.trace)),
            ]
        )
        return out

    def _collect(self, fields: tuple[Field, ...], attrs: dict[str, Any]) -> list[Field]:
        return [*fields, *(f.any_field(k, v) for k, v in attrs.items())]

    def _emit(self, level: Level, message: str, fields: tuple[Field, ...], attrs: dict[str, Any]) -> None:
        if not self.sink.enabled(level):
            return
        self.sink.log(level, message, self.encode_fields(self._collect(fields, attrs), level))

    def debug(self, message: str, *fields: Field, **attrs: Any) -> None:
        self._emit(Level.DEBUG, message, fields, attrs)

    def info(self, message: str, *fields: Field, **attrs: Any) -> None:
        self._emit(Level.INFO, message, fields, attrs)

    def warn(self, message: str, *fields: Field, **attrs: Any) -> None:
        self._emit(Level.WARN, message, fields, attrs)

    def error(self, message: str, *fields: Field, **attrs: Any) -> None:
        self._emit(Level.ERROR, message, fields, attrs)

    def panic(self, message: str, *fields: Field, **attrs: Any) -> None:
        """Log the record, then raise :class:`PanicError`."""
        self._emit(Level.PANIC, message, fields, attrs)
        raise PanicError(message)

    def fatal(self, message: str, *fields: Field, **attrs: Any) -> None:
        """Log the record, flush, then exit with status 1."""
        self._emit(Level.FATAL, message, fields, attrs)
        try:
            self.flush()
        except SinkError:
            # exiting regardless
            pass
        raise SystemExit(1)

    def flush(self) -> None:
        self.sink.sync()

    def set_level(self, level: Level) -> None:
        self.sink.set_level(level)


def new_ecs_logger(options: Options) -> ECSLogger:
    return ECSLogger(options)
