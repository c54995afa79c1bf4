"""OpenTelemetry integration for :mod:`otelecs`.

This package provides the OTel-backed sink, logger provider configuration,
and an ECS JSON log-record exporter.
"""

from .config import configure_logging, deployment_resource
from .exporters import ECSConsoleLogRecordExporter, format_ecs_record
from .sink import SEVERITY_MAP, OTelSink

__all__ = [
    # config
    "configure_logging",
    "deployment_resource",
    # sink
    "OTelSink",
    "SEVERITY_MAP",
    # exporters
    "ECSConsoleLogRecordExporter",
    "format_ecs_record",
]
