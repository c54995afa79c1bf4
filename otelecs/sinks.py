"""
Record sinks.

A sink receives the assembled field list of one log call together with its
message and level. It owns level filtering, output and flushing; everything
before it is a pure transform of the call's fields.
"""

import copy
import json
import sys
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, TextIO

from .encoder import render_fields
from .fields import Field
from .keys import FIELD_MESSAGE, FIELD_TIMESTAMP
from .levels import Level
from .mechanism import SinkError


def iso_timestamp(timestamp_ns: int) -> str:
    return datetime.fromtimestamp(timestamp_ns / 1e9, tz=timezone.utc).isoformat()


def dump_document(doc: dict[str, Any]) -> str:
    """Compact, single-line JSON for one record. Non-finite floats are rejected."""
    return json.dumps(doc, separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=str)


@dataclass(frozen=True)
class ECSRecord:
    """
    One assembled log record, as handed to a sink.

    ``rendered`` holds the encoded fields as plain JSON values, captured when
    the record is built; later changes to the caller's marshalers are not
    visible through the record.
    """

    level: Level
    message: str
    rendered: dict[str, Any] = field(default_factory=dict)
    timestamp_ns: int = field(default_factory=time.time_ns)

    @classmethod
    def from_fields(cls, level: Level, message: str, fields: Iterable[Field]) -> "ECSRecord":
        return cls(level, message, render_fields(fields))

    def body(self) -> dict[str, Any]:
        """The message followed by the rendered fields."""
        return {FIELD_MESSAGE: self.message, **copy.deepcopy(self.rendered)}

    def document(self) -> dict[str, Any]:
        """The complete ECS document, timestamp first."""
        return {FIELD_TIMESTAMP: iso_timestamp(self.timestamp_ns), **self.body()}

    def to_json(self) -> str:
        return dump_document(self.document())


class Sink(ABC):
    """
    Destination of assembled records.

    Subclasses implement :meth:`write` and :meth:`sync`. Records below the
    sink's minimum level are dropped by :meth:`log`.
    """

    def __init__(self, min_level: Level = Level.DEBUG):
        self._min_level = min_level

    @property
    def min_level(self) -> Level:
        return self._min_level

    def set_level(self, level: Level) -> None:
        self._min_level = level

    def enabled(self, level: Level) -> bool:
        return level >= self._min_level

    def log(self, level: Level, message: str, fields: Iterable[Field]) -> None:
        if self.enabled(level):
            self.write(ECSRecord.from_fields(level, message, fields))

    def debug(self, message: str, fields: Iterable[Field]) -> None:
        self.log(Level.DEBUG, message, fields)

    def info(self, message: str, fields: Iterable[Field]) -> None:
        self.log(Level.INFO, message, fields)

    def warn(self, message: str, fields: Iterable[Field]) -> None:
        self.log(Level.WARN, message, fields)

    def error(self, message: str, fields: Iterable[Field]) -> None:
        self.log(Level.ERROR, message, fields)

    def panic(self, message: str, fields: Iterable[Field]) -> None:
        self.log(Level.PANIC, message, fields)

    def fatal(self, message: str, fields: Iterable[Field]) -> None:
        self.log(Level.FATAL, message, fields)

    @abstractmethod
    def write(self, record: ECSRecord) -> None: ...

    @abstractmethod
    def sync(self) -> None:
        """Block until written records are flushed. Raises :class:`SinkError`."""


class MemorySink(Sink):
    """Keeps records in memory. Useful for tests and in-process inspection."""

    def __init__(self, min_level: Level = Level.DEBUG):
        super().__init__(min_level)
        self.records: list[ECSRecord] = []
        self._lock = threading.Lock()

    def write(self, record: ECSRecord) -> None:
        with self._lock:
            self.records.append(record)

    def sync(self) -> None:
        pass

    def documents(self) -> list[dict[str, Any]]:
        with self._lock:
            return [r.document() for r in self.records]

    def clear(self) -> None:
        with self._lock:
            self.records.clear()


class StreamSink(Sink):
    """
    Writes one ECS JSON line per record to a text stream.

    Parameters:
        stream: Target stream. ``None`` resolves ``sys.stderr`` at write time.
        min_level: Records below this level are dropped.
    """

    def __init__(self, stream: Optional[TextIO] = None, min_level: Level = Level.DEBUG):
        super().__init__(min_level)
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def write(self, record: ECSRecord) -> None:
        line = record.to_json() + "\n"
        with self._lock:
            self.stream.write(line)

    def sync(self) -> None:
        try:
            with self._lock:
                self.stream.flush()
        except (OSError, ValueError) as e:
            raise SinkError(f"stream flush failed: {e}") from e
