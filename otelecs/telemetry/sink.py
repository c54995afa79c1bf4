"""Sink writing ECS records through an OpenTelemetry logger.

:class:`OTelSink` emits one OTel ``LogRecord`` per call. The record body is
the rendered ECS document (message first, then the assembled fields); the
timestamp and severity travel on the record itself.
"""

from opentelemetry._logs import LogRecord, SeverityNumber
from opentelemetry.sdk._logs import LoggerProvider

from ..levels import Level
from ..mechanism import SinkError
from ..sinks import ECSRecord, Sink

SEVERITY_MAP: dict[Level, tuple[SeverityNumber, str]] = {
    Level.DEBUG: (SeverityNumber.DEBUG, "DEBUG"),
    Level.INFO: (SeverityNumber.INFO, "INFO"),
    Level.WARN: (SeverityNumber.WARN, "WARN"),
    Level.ERROR: (SeverityNumber.ERROR, "ERROR"),
    Level.PANIC: (SeverityNumber.FATAL, "PANIC"),
    Level.FATAL: (SeverityNumber.FATAL4, "FATAL"),
}


class OTelSink(Sink):
    """Sink backed by a logger obtained from an OTel ``LoggerProvider``.

    Example:
        >>> provider = configure_logging("my-app", log_exporter=ECSConsoleLogRecordExporter())
        >>> logger = ECSLogger(Options(sink=OTelSink(provider)))
        >>> logger.info("Connection established", ecs.event_action("connect"))
    """

    def __init__(
        self,
        logger_provider: LoggerProvider,
        name: str = "otelecs",
        min_level: Level = Level.DEBUG,
    ):
        """Initialize the sink.

        Args:
            logger_provider: Provider the OTel logger is taken from; also
                flushed by :meth:`sync`.
            name: Instrumentation scope name of the OTel logger.
            min_level: Records below this level are dropped.
        """
        super().__init__(min_level)
        self._provider = logger_provider
        self._logger = logger_provider.get_logger(name)

    def write(self, record: ECSRecord) -> None:
        severity_number, severity_text = SEVERITY_MAP[record.level]
        self._logger.emit(
            LogRecord(
                timestamp=record.timestamp_ns,
                body=record.body(),
                severity_text=severity_text,
                severity_number=severity_number,
            )
        )

    def sync(self) -> None:
        """Flush the provider's processors; raises :class:`SinkError` on failure."""
        if not self._provider.force_flush():
            raise SinkError("OTel logger provider did not flush in time")
