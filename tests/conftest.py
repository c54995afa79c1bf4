"""Shared test fixtures for otelecs tests."""

import pytest

from otelecs import ECSLogger, MemorySink, Options


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def logger(sink):
    """Logger with one base tag and no base labels."""
    return ECSLogger(Options(sink=sink, base_tags=("prod",)))


class Collector:
    def __init__(self):
        self.items = []

    def on_next(self, value):
        self.items.append(value)

    def on_error(self, error):
        raise error

    def on_completed(self):
        pass


@pytest.fixture
def collector():
    return Collector()
