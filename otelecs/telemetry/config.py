"""OTel logger provider wiring for ECS records.

The provider's resource describes the deployment the same way the ECS base
labels do, read from the same environment variables (``LOGGING_SERVICE_NAME``,
``APPLICATION_NAME``, ``ENVIRONMENT``, ``MY_POD_NAME``, ``MY_NODE_NAME``).
"""

import os
from collections.abc import Mapping
from typing import Optional

from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import (
    BatchLogRecordProcessor,
    LogRecordExporter,
    SimpleLogRecordProcessor,
)
from opentelemetry.sdk.resources import Resource

from ..config import DISTRIBUTION_NAME, lib_version

DEFAULT_SERVICE_NAME = "otelecs"


def deployment_resource(
    service_name: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Resource:
    """
    Resource attributes for the running deployment.

    ``service_name`` wins over ``LOGGING_SERVICE_NAME``, which wins over
    ``APPLICATION_NAME``. Unset variables are left out.
    """
    environ = os.environ if environ is None else environ
    attributes = {
        "service.name": service_name
        or environ.get("LOGGING_SERVICE_NAME")
        or environ.get("APPLICATION_NAME")
        or DEFAULT_SERVICE_NAME,
        "deployment.environment": environ.get("ENVIRONMENT", ""),
        "k8s.pod.name": environ.get("MY_POD_NAME", ""),
        "k8s.node.name": environ.get("MY_NODE_NAME", ""),
        "telemetry.distro.name": DISTRIBUTION_NAME,
        "telemetry.distro.version": lib_version(),
    }
    return Resource.create({k: v for k, v in attributes.items() if v})


def configure_logging(
    service_name: Optional[str] = None,
    log_exporter: LogRecordExporter | None = None,
    batch_logs: bool = True,
    environ: Optional[Mapping[str, str]] = None,
) -> LoggerProvider:
    """
    Build a LoggerProvider for :class:`OTelSink`. The global provider is left alone.

    ``batch_logs`` picks a BatchLogRecordProcessor; otherwise records are
    exported synchronously, which suits console output.
    """
    provider = LoggerProvider(resource=deployment_resource(service_name, environ))
    if log_exporter is not None:
        if batch_logs:
            processor = BatchLogRecordProcessor(log_exporter)
        else:
            processor = SimpleLogRecordProcessor(log_exporter)
        provider.add_log_record_processor(processor)
    return provider
