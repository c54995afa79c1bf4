"""
ECS field names used by the logger.

See https://www.elastic.co/guide/en/ecs/current/ecs-base.html
"""

# Base record fields
FIELD_TIMESTAMP = "@timestamp"
FIELD_MESSAGE = "message"
FIELD_LABELS = "labels"
FIELD_TAGS = "tags"

# Base labels set up from the process environment
FIELD_LABEL_APPLICATION = "application"
FIELD_LABEL_SERVICE = "service"
FIELD_LABEL_ENVIRONMENT = "environment"
FIELD_LABEL_LIB_VERSION = "lib_version"
FIELD_LABEL_LIB_LANGUAGE = "lib_language"
FIELD_LABEL_POD_NAME = "pod_name"
FIELD_LABEL_NODE_NAME = "node_name"

FIELD_LOGGER = "log.logger"
FIELD_LOG_LEVEL = "log.level"

# Public fields available to callers
FIELD_SERVICE_NAME = "service.name"

FIELD_ERROR_MESSAGE = "error.message"
FIELD_STACK_TRACE = "error.stack_trace"
FIELD_ERROR_TYPE = "error.type"

FIELD_EVENT_ACTION = "event.action"
FIELD_EVENT_KIND = "event.kind"
FIELD_EVENT_CATEGORY = "event.category"
FIELD_EVENT_MODULE = "event.module"
FIELD_EVENT_TYPE = "event.type"
FIELD_EVENT_ORIGINAL = "event.original"
FIELD_EVENT_OUTCOME = "event.outcome"

FIELD_TRACE_ID = "trace.id"

FIELD_HTTP_REQUEST_BODY_CONTENT = "http.request.body.content"
FIELD_HTTP_REQUEST_METHOD = "http.request.method"
FIELD_HTTP_REQUEST_BODY_HEADERS = "http.request.body.headers"
FIELD_HTTP_REQUEST_REFERRER = "http.request.referrer"
FIELD_HTTP_RESPONSE_BODY_CONTENT = "http.response.body.content"
FIELD_HTTP_RESPONSE_STATUS_CODE = "http.response.status_code"
FIELD_HTTP_RESPONSE_BODY_REFERRER = "http.response.body.referrer"

# Top-level object keys and the dotted prefixes routed into them
LOG_PREFIX = "log."
LOG_BASE_KEY = "log"

HTTP_PREFIX = "http."
HTTP_BASE_KEY = "http"

EVENT_PREFIX = "event."
EVENT_BASE_KEY = "event"

ERROR_PREFIX = "error."
ERROR_BASE_KEY = "error"

TRACE_PREFIX = "trace."
TRACE_BASE_KEY = "trace"

ECS_FIELD_NAMES = frozenset(
    {
        FIELD_TAGS,
        FIELD_LOGGER,
        FIELD_LOG_LEVEL,
        FIELD_LABEL_APPLICATION,
        FIELD_LABEL_SERVICE,
        FIELD_LABEL_ENVIRONMENT,
        FIELD_LABEL_LIB_VERSION,
        FIELD_LABEL_LIB_LANGUAGE,
        FIELD_LABEL_POD_NAME,
        FIELD_LABEL_NODE_NAME,
        FIELD_SERVICE_NAME,
        FIELD_ERROR_MESSAGE,
        FIELD_STACK_TRACE,
        FIELD_ERROR_TYPE,
        FIELD_EVENT_ACTION,
        FIELD_EVENT_KIND,
        FIELD_EVENT_CATEGORY,
        FIELD_EVENT_MODULE,
        FIELD_EVENT_TYPE,
        FIELD_EVENT_ORIGINAL,
        FIELD_EVENT_OUTCOME,
        FIELD_TRACE_ID,
        FIELD_HTTP_REQUEST_BODY_CONTENT,
        FIELD_HTTP_REQUEST_METHOD,
        FIELD_HTTP_REQUEST_BODY_HEADERS,
        FIELD_HTTP_REQUEST_REFERRER,
        FIELD_HTTP_RESPONSE_BODY_CONTENT,
        FIELD_HTTP_RESPONSE_STATUS_CODE,
        FIELD_HTTP_RESPONSE_BODY_REFERRER,
    }
)


def is_ecs_field_name(name: str) -> bool:
    return name in ECS_FIELD_NAMES
