"""
Routing of log fields into ECS objects.

Every field of a log call lands in exactly one bucket, chosen by its dotted
key prefix. The ``tags`` field is pulled out and merged into a tag list.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from . import fields as f
from .fields import Field
from .keys import (
    ERROR_BASE_KEY,
    ERROR_PREFIX,
    EVENT_BASE_KEY,
    EVENT_PREFIX,
    FIELD_LABELS,
    FIELD_LOG_LEVEL,
    FIELD_TAGS,
    HTTP_BASE_KEY,
    HTTP_PREFIX,
    LOG_BASE_KEY,
    LOG_PREFIX,
    TRACE_BASE_KEY,
    TRACE_PREFIX,
)
from .levels import Level


class Bucket(Enum):
    LABELS = FIELD_LABELS
    LOG = LOG_BASE_KEY
    HTTP = HTTP_BASE_KEY
    EVENT = EVENT_BASE_KEY
    ERROR = ERROR_BASE_KEY
    TRACE = TRACE_BASE_KEY


# Checked in order, first match wins
PREFIX_TABLE: tuple[tuple[str, Bucket], ...] = (
    (LOG_PREFIX, Bucket.LOG),
    (HTTP_PREFIX, Bucket.HTTP),
    (EVENT_PREFIX, Bucket.EVENT),
    (ERROR_PREFIX, Bucket.ERROR),
    (TRACE_PREFIX, Bucket.TRACE),
)


def route(key: str) -> Bucket:
    for prefix, bucket in PREFIX_TABLE:
        if key.startswith(prefix):
            return bucket
    return Bucket.LABELS


def reduce_key(fld: Field) -> Field:
    """Keep only the last element of a dotted key."""
    return fld.with_key(fld.key.rsplit(".", 1)[-1])


@dataclass
class FieldBuckets:
    """Per-call accumulators: the merged tag list and one field list per bucket."""

    tags: list[str] = field(default_factory=list)
    labels: list[Field] = field(default_factory=list)
    log: list[Field] = field(default_factory=list)
    http: list[Field] = field(default_factory=list)
    event: list[Field] = field(default_factory=list)
    error: list[Field] = field(default_factory=list)
    trace: list[Field] = field(default_factory=list)

    def bucket(self, bucket: Bucket) -> list[Field]:
        return getattr(self, bucket.value)

    def append(self, fld: Field) -> None:
        bucket = route(fld.key)
        if bucket is Bucket.LABELS:
            # no recognized prefix, nothing to strip
            self.labels.append(fld)
        elif bucket is Bucket.HTTP:
            # the HTTP mapper dispatches on the full key
            self.http.append(fld)
        else:
            self.bucket(bucket).append(reduce_key(fld))

    def extend_tags(self, fld: Field) -> None:
        val = fld.payload
        # silently ignored unless it is a list of strings
        if isinstance(val, (list, tuple)) and all(isinstance(t, str) for t in val):
            self.tags.extend(val)


def classify(
    call_fields: Iterable[Field],
    base_labels: Iterable[Field] = (),
    base_tags: Iterable[str] = (),
    level: Level = Level.INFO,
    logger_field: Optional[Field] = None,
) -> FieldBuckets:
    """
    Deduplicate and route the fields of one log call.

    Call fields come first, then base labels; the first occurrence of a key
    wins and later duplicates are dropped. The logger identity and the level
    name are appended to the log bucket after the caller's fields.
    """
    buckets = FieldBuckets(tags=list(base_tags))
    seen: set[str] = set()

    for fld in (*call_fields, *base_labels):
        if fld.key in seen:
            continue
        seen.add(fld.key)

        if fld.key == FIELD_TAGS:
            buckets.extend_tags(fld)
        else:
            buckets.append(fld)

    if logger_field is not None:
        buckets.log.append(reduce_key(logger_field))
    buckets.log.append(reduce_key(f.string(FIELD_LOG_LEVEL, level.name.lower())))
    return buckets
