"""OTel log-record exporter writing ECS JSON lines.

Provides :func:`format_ecs_record` and :class:`ECSConsoleLogRecordExporter`.
"""

import sys
from collections.abc import Mapping, Sequence
from typing import Any, TextIO

from opentelemetry._logs import LogRecord
from opentelemetry.sdk._logs.export import (
    LogRecordExporter,
    LogRecordExportResult,
)

from ..keys import FIELD_MESSAGE, FIELD_TIMESTAMP
from ..sinks import dump_document, iso_timestamp


def format_ecs_record(record: LogRecord) -> str:
    """
    Format a LogRecord as one ECS JSON line.

    Mapping bodies (as emitted by :class:`OTelSink`) are spread into the
    document after ``@timestamp``; any other body becomes the ``message``.

    Args:
        record: OpenTelemetry LogRecord to format.

    Returns:
        JSON string (single line) with newline terminator.
    """
    timestamp_ns = record.timestamp or record.observed_timestamp or 0
    body = record.body
    if not isinstance(body, Mapping):
        body = {FIELD_MESSAGE: body}
    doc = {FIELD_TIMESTAMP: iso_timestamp(timestamp_ns), **body}
    return dump_document(doc) + "\n"


class ECSConsoleLogRecordExporter(LogRecordExporter):
    """OTel LogRecordExporter that writes one ECS JSON document per line.

    Example output:
        {"@timestamp":"2026-02-03T10:30:00+00:00","message":"served","labels":{},...}

    Parameters:
        stream: Output stream. ``None`` resolves ``sys.stderr`` at export time.
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def export(self, batch: Sequence[Any]) -> LogRecordExportResult:
        """Export log records as ECS JSON lines.

        Args:
            batch: Sequence of readable log records (each carrying ``log_record``).

        Returns:
            LogRecordExportResult.SUCCESS on success,
            LogRecordExportResult.FAILURE on error.
        """
        try:
            stream = self.stream
            for readable_record in batch:
                stream.write(format_ecs_record(readable_record.log_record))
            stream.flush()
            return LogRecordExportResult.SUCCESS
        except Exception:
            return LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        """Shutdown the exporter (no-op, the stream is not owned)."""
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Force flush the output stream.

        Returns:
            True on success, False if the stream could not be flushed.
        """
        try:
            self.stream.flush()
        except (OSError, ValueError):
            return False
        return True
