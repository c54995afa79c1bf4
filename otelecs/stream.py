"""
Reactive record streams.

:class:`RxSink` publishes every assembled :class:`ECSRecord` to its
subscribers. The operators below select records by the content of their ECS
document (severity, tags, populated objects) or turn them into output form.
"""

from reactivex import Subject
from reactivex import operators as ops

from .classifier import Bucket
from .keys import FIELD_TAGS
from .levels import Level
from .sinks import ECSRecord, Sink


class RxSink(Sink):
    """
    Sink backed by a :class:`reactivex.Subject`.

    - Records are forwarded to subscribers synchronously, in write order.
    - Never completes on its own; :meth:`close` completes the stream.
    """

    def __init__(self, min_level: Level = Level.DEBUG):
        super().__init__(min_level)
        self.subject: Subject = Subject()

    def write(self, record: ECSRecord) -> None:
        self.subject.on_next(record)

    def sync(self) -> None:
        """Nothing is buffered."""
        pass

    def close(self) -> None:
        self.subject.on_completed()

    def subscribe(self, *args, **kwargs):
        return self.subject.subscribe(*args, **kwargs)

    def pipe(self, *operators):
        return self.subject.pipe(*operators)


def at_least(level: Level):
    """Keep records at or above ``level``."""
    return ops.filter(lambda r: r.level >= level)


def record_tags(record: ECSRecord) -> list[str]:
    tags = record.rendered.get(FIELD_TAGS, [])
    return tags if isinstance(tags, list) else []


def tagged(*tags: str):
    """Keep records whose ``tags`` list holds any of ``tags``."""
    wanted = set(tags)
    return ops.filter(lambda r: not wanted.isdisjoint(record_tags(r)))


def with_bucket(bucket: Bucket, key: str | None = None):
    """
    Keep records whose ``bucket`` object is populated.

    With ``key``, the object must hold that (reduced) key, e.g.
    ``with_bucket(Bucket.EVENT, "action")``.
    """

    def populated(record: ECSRecord) -> bool:
        obj = record.rendered.get(bucket.value)
        if not isinstance(obj, dict) or not obj:
            return False
        return key is None or key in obj

    return ops.filter(populated)


def as_documents():
    """Map records to their complete ECS documents."""
    return ops.map(lambda r: r.document())


def as_json_lines():
    """Map records to newline-terminated ECS JSON lines."""
    return ops.map(lambda r: r.to_json() + "\n")
