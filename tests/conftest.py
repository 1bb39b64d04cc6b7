"""Shared test fixtures for all test modules."""

from collections.abc import Callable, Iterator

import pytest

from logstream.adapters.sinks.in_memory import InMemorySink
from logstream.core.logger import Logger
from logstream.core.models import LogLevel
from logstream.core.scheduler import DeliveryScheduler, reset_default_scheduler


@pytest.fixture
def out_sink() -> InMemorySink:
    """Uncongested in-memory sink for the OUT target."""
    return InMemorySink()


@pytest.fixture
def err_sink() -> InMemorySink:
    """Uncongested in-memory sink for the ERR target."""
    return InMemorySink()


@pytest.fixture
def scheduler(out_sink: InMemorySink, err_sink: InMemorySink) -> DeliveryScheduler:
    """Fresh scheduler delivering to the in-memory sinks."""
    return DeliveryScheduler(out_sink, err_sink)


@pytest.fixture
def make_logger(scheduler: DeliveryScheduler) -> Callable[..., Logger]:
    """Factory fixture for loggers bound to the test scheduler.

    Usage:
        def test_something(make_logger):
            logger = make_logger(LogLevel.INFO, "api")
    """

    def _make(level: LogLevel = LogLevel.DEBUG, scope: str = "test") -> Logger:
        return Logger(level, scope, scheduler=scheduler)

    return _make


@pytest.fixture
def default_scheduler(
    out_sink: InMemorySink, err_sink: InMemorySink
) -> Iterator[DeliveryScheduler]:
    """Install a fresh process-wide scheduler for the duration of a test."""
    yield reset_default_scheduler(DeliveryScheduler(out_sink, err_sink))
    reset_default_scheduler()

