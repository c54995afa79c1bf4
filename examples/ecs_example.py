"""Log a few ECS records to stderr through OpenTelemetry.

Run with: python examples/ecs_example.py
"""

from datetime import timedelta

from otelecs import ECSLogger, ecs, fields as f, options_from_env
from otelecs.telemetry import ECSConsoleLogRecordExporter, OTelSink, configure_logging


def main():
    provider = configure_logging(
        service_name="ecs-example",
        log_exporter=ECSConsoleLogRecordExporter(),
        batch_logs=False,
    )
    logger = ECSLogger(options_from_env(OTelSink(provider), logger_name="ecs-example"))

    logger.info(
        "request served",
        ecs.http_request_method("POST"),
        ecs.http_request_body_headers({"Authorization": "Bearer abc", "Accept": "application/json"}),
        ecs.http_response_status_code(201),
        ecs.duration("elapsed", timedelta(milliseconds=1532)),
        ecs.tags(["api"]),
    )

    try:
        {}["missing"]
    except KeyError as e:
        logger.error("lookup failed", ecs.err(e), ecs.error_type(e), f.string("table", "users"))

    logger.flush()
    provider.shutdown()


if __name__ == "__main__":
    main()
