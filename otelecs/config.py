"""
Base logger configuration read from the process environment.

The variables follow the usual container deployment conventions:

- ``ENVIRONMENT``: deployment environment, also the only base tag
- ``APPLICATION_NAME``, ``LOGGING_SERVICE_NAME``
- ``MY_POD_NAME``, ``MY_NODE_NAME``: injected through the downward API
"""

import os
import platform
from collections.abc import Mapping
from importlib import metadata
from typing import Optional

from . import fields as f
from .fields import Field
from .keys import (
    FIELD_LABEL_APPLICATION,
    FIELD_LABEL_ENVIRONMENT,
    FIELD_LABEL_LIB_LANGUAGE,
    FIELD_LABEL_LIB_VERSION,
    FIELD_LABEL_NODE_NAME,
    FIELD_LABEL_POD_NAME,
    FIELD_LABEL_SERVICE,
    FIELD_LOGGER,
)
from .logger import DEFAULT_LOGGER_NAME, Options
from .sinks import Sink

DISTRIBUTION_NAME = "otel-ecs"


def lib_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"


def lib_language() -> str:
    return f"python {platform.python_version()}"


def default_logger_field(name: str = DEFAULT_LOGGER_NAME) -> Field:
    return f.string(FIELD_LOGGER, name)


def base_tags_from_env(environ: Optional[Mapping[str, str]] = None) -> tuple[str, ...]:
    environ = os.environ if environ is None else environ
    return (environ.get("ENVIRONMENT", ""),)


def base_labels_from_env(environ: Optional[Mapping[str, str]] = None) -> tuple[Field, ...]:
    environ = os.environ if environ is None else environ
    return (
        f.string(FIELD_LABEL_APPLICATION, environ.get("APPLICATION_NAME", "")),
        f.string(FIELD_LABEL_SERVICE, environ.get("LOGGING_SERVICE_NAME", "")),
        f.string(FIELD_LABEL_ENVIRONMENT, environ.get("ENVIRONMENT", "")),
        f.string(FIELD_LABEL_LIB_VERSION, lib_version()),
        f.string(FIELD_LABEL_LIB_LANGUAGE, lib_language()),
        f.string(FIELD_LABEL_POD_NAME, environ.get("MY_POD_NAME", "")),
        f.string(FIELD_LABEL_NODE_NAME, environ.get("MY_NODE_NAME", "")),
    )


def options_from_env(
    sink: Sink,
    logger_name: str = DEFAULT_LOGGER_NAME,
    environ: Optional[Mapping[str, str]] = None,
) -> Options:
    """Build :class:`Options` with base tags and labels taken from ``environ``."""
    return Options(
        sink=sink,
        logger_field=default_logger_field(logger_name),
        base_tags=base_tags_from_env(environ),
        base_labels=base_labels_from_env(environ),
    )
