"""Tests for record assembly in ECSLogger."""

from datetime import timedelta

import pytest

from otelecs import ECSLogger, MemorySink, Options, ecs, fields as f
from otelecs.levels import Level
from otelecs.mechanism import PanicError, SinkError
from otelecs.sinks import Sink

BUCKET_KEYS = ["labels", "log", "http", "event", "error", "trace"]


def only_document(sink):
    docs = sink.documents()
    assert len(docs) == 1
    return docs[0]


class TestAssembly:
    def test_simple_record(self, logger, sink):
        logger.info("this is a test message", f.string("foo", "a"), ecs.duration("elapsed_example", timedelta(milliseconds=1532)))

        doc = only_document(sink)
        assert list(doc) == ["@timestamp", "message", "tags", *BUCKET_KEYS]
        assert doc["message"] == "this is a test message"
        assert doc["tags"] == ["prod"]
        assert doc["labels"] == {"foo": "a", "elapsed_example": "1.532s"}
        assert doc["log"] == {"logger": "ecs_(otelecs)", "level": "info"}
        assert doc["http"] == {}
        assert doc["event"] == {}
        assert doc["error"] == {}
        assert doc["trace"] == {}

    def test_no_tags_field_without_tags(self, sink):
        ECSLogger(Options(sink=sink)).info("msg")
        assert "tags" not in only_document(sink)

    def test_tags_are_merged(self, logger, sink):
        logger.info("msg", ecs.tags(["a", "b"]))
        assert only_document(sink)["tags"] == ["prod", "a", "b"]

    def test_base_labels_are_emitted_verbatim(self, sink):
        logger = ECSLogger(
            Options(sink=sink, base_labels=(f.string("application", "app"), f.string("service", "svc")))
        )
        logger.info("msg", f.string("application", "override"))

        doc = only_document(sink)
        assert list(doc)[:4] == ["@timestamp", "message", "application", "service"]
        assert doc["application"] == "app"
        assert doc["labels"] == {"application": "override", "service": "svc"}

    def test_all_ecs_fields(self, logger, sink):
        logger.info(
            "msg",
            ecs.tags(["tag1"]),
            ecs.service_name("logger.test"),
            ecs.err(ValueError("fail")),
            ecs.stack_trace("trace"),
            ecs.error_type("panic"),
            ecs.event_action("test-started"),
            ecs.event_outcome("test-outcome"),
            ecs.trace_id("1c6ee3fc"),
            ecs.http_request_method("POST"),
            ecs.http_request_body_headers([{"foo": ["bar"]}]),
            ecs.http_response_status_code(201),
        )

        doc = only_document(sink)
        assert doc["tags"] == ["prod", "tag1"]
        assert doc["labels"] == {"service.name": "logger.test"}
        assert doc["error"] == {"message": "fail", "stack_trace": "trace", "type": "panic"}
        assert doc["event"] == {"action": "test-started", "outcome": "test-outcome"}
        assert doc["trace"] == {"id": "1c6ee3fc"}
        assert doc["http"] == {
            "request": {"body": {"headers": "foo=bar"}, "method": "POST"},
            "response": {"body": {"status_code": "201"}},
        }

    def test_keyword_attributes_become_labels(self, logger, sink):
        logger.info("msg", f.string("first", "1"), peer_id="abc123", port=8765)
        assert only_document(sink)["labels"] == {"first": "1", "peer_id": "abc123", "port": 8765}

    def test_encode_fields_is_side_effect_free(self, logger, sink):
        out = logger.encode_fields([f.string("foo", "a")], Level.DEBUG)
        assert [fld.key for fld in out] == ["tags", *BUCKET_KEYS]
        assert sink.records == []


class TestIdempotence:
    def test_same_field_twice(self, logger, sink):
        logger.info("msg", f.string("foo", "a"), f.string("foo", "b"))
        assert only_document(sink)["labels"] == {"foo": "a"}

    def test_ecs_fields_twice(self, logger, sink):
        fields = [ecs.event_action("start"), ecs.http_request_method("POST"), ecs.tags(["t"])]
        logger.info("msg", *fields)
        logger.info("msg", *fields, *fields)

        first, second = sink.documents()
        first.pop("@timestamp")
        second.pop("@timestamp")
        assert first == second

    def test_same_output_across_calls(self, logger, sink):
        logger.info("msg", ecs.tags(["a"]))
        logger.info("msg", ecs.tags(["b"]))
        assert [d["tags"] for d in sink.documents()] == [["prod", "a"], ["prod", "b"]]


class TestLevels:
    @pytest.mark.parametrize(
        "method, level",
        [("debug", Level.DEBUG), ("info", Level.INFO), ("warn", Level.WARN), ("error", Level.ERROR)],
    )
    def test_level_is_recorded(self, logger, sink, method, level):
        getattr(logger, method)("msg")
        record = sink.records[0]
        assert record.level is level
        assert record.document()["log"]["level"] == level.name.lower()

    def test_panic_logs_then_raises(self, logger, sink):
        with pytest.raises(PanicError):
            logger.panic("giving up", f.string("foo", "a"))
        assert only_document(sink)["log"]["level"] == "panic"

    def test_fatal_logs_flushes_and_exits(self, logger, sink):
        with pytest.raises(SystemExit) as exc_info:
            logger.fatal("bye")
        assert exc_info.value.code == 1
        assert only_document(sink)["log"]["level"] == "fatal"

    def test_set_level_drops_lower_records(self, logger, sink):
        logger.set_level(Level.WARN)
        logger.info("dropped")
        logger.warn("kept")
        assert [r.message for r in sink.records] == ["kept"]


class FailingSink(Sink):
    def __init__(self):
        super().__init__()
        self.records = []

    def write(self, record):
        self.records.append(record)

    def sync(self):
        raise SinkError("disk full")


class TestFlush:
    def test_flush_error_reaches_caller(self):
        logger = ECSLogger(Options(sink=FailingSink()))
        with pytest.raises(SinkError):
            logger.flush()

    def test_fatal_exits_even_if_flush_fails(self):
        sink = FailingSink()
        logger = ECSLogger(Options(sink=sink))
        with pytest.raises(SystemExit):
            logger.fatal("bye")
        assert len(sink.records) == 1

    def test_memory_sink_flush(self, logger):
        logger.flush()


def test_encoding_failures_do_not_abort_the_call(logger, sink):
    class Broken:
        def marshal_log_object(self, enc):
            raise RuntimeError("boom")

    logger.info("msg", f.obj("bad", Broken()), f.string("ok", "1"))
    assert only_document(sink)["labels"] == {"badError": "boom", "ok": "1"}


def test_options_are_immutable(sink):
    options = Options(sink=sink, base_tags=["prod"])
    assert options.base_tags == ("prod",)
    with pytest.raises(AttributeError):
        options.base_tags = ("dev",)
