import io
import json

import pytest

from otelecs import ECSLogger, Options, StreamSink
from otelecs import fields as f
from otelecs.levels import Level
from otelecs.mechanism import SinkError


def test_stream_sink_writes_json_lines():
    out = io.StringIO()
    logger = ECSLogger(Options(sink=StreamSink(out)))
    logger.info("one")
    logger.warn("two")

    lines = out.getvalue().splitlines()
    assert [json.loads(line)["message"] for line in lines] == ["one", "two"]
    assert lines[0].startswith('{"@timestamp":')


def test_stream_sink_respects_min_level():
    out = io.StringIO()
    ECSLogger(Options(sink=StreamSink(out, min_level=Level.ERROR))).info("dropped")
    assert out.getvalue() == ""


def test_stream_sink_sync_failure():
    out = io.StringIO()
    sink = StreamSink(out)
    out.close()
    with pytest.raises(SinkError):
        sink.sync()


def test_sink_level_methods(sink):
    sink.warn("w", [])
    sink.debug("d", [])
    assert [(r.level, r.message) for r in sink.records] == [(Level.WARN, "w"), (Level.DEBUG, "d")]


def test_memory_sink_clear(sink, logger):
    logger.info("msg")
    sink.clear()
    assert sink.records == []


def test_non_finite_floats_stay_valid_json():
    out = io.StringIO()
    logger = ECSLogger(Options(sink=StreamSink(out)))
    logger.info("m", f.float64("ratio", float("nan")), f.float32("big", 1e300), f.float64("low", float("-inf")))

    doc = json.loads(out.getvalue(), parse_constant=lambda name: pytest.fail(f"bare {name} in output"))
    assert doc["labels"] == {"ratio": "NaN", "big": "+Inf", "low": "-Inf"}


class Counter:
    def __init__(self):
        self.n = 1

    def marshal_log_object(self, enc):
        enc.add_int64("n", self.n)


def test_memory_sink_keeps_values_from_log_time(sink, logger):
    counter = Counter()
    logger.info("m", f.obj("counter", counter))
    counter.n = 2

    assert sink.documents()[0]["labels"]["counter"] == {"n": 1}


def test_documents_are_independent_copies(sink, logger):
    logger.info("m", f.strings("names", ["a"]))
    sink.documents()[0]["labels"]["names"].append("b")

    assert sink.documents()[0]["labels"]["names"] == ["a"]
