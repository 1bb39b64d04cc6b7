"""BDD step definitions for delivery and backpressure features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from logstream.adapters.sinks.in_memory import InMemorySink
from logstream.core.logger import Logger
from logstream.core.models import LogLevel, Target
from logstream.core.scheduler import DeliveryScheduler
from tests.helpers import flush_all, read_records


@dataclass
class DeliveryContext:
    """State shared by the steps of one scenario."""

    out_sink: InMemorySink = field(default_factory=InMemorySink)
    err_sink: InMemorySink = field(default_factory=InMemorySink)
    replacement: InMemorySink | None = None
    scheduler: DeliveryScheduler | None = None
    results: list[bool] = field(default_factory=list)

    def logger(self) -> Logger:
        assert self.scheduler is not None, "scheduler step missing"
        return Logger(LogLevel.DEBUG, "bdd", scheduler=self.scheduler)


def _split(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def _names(sink: InMemorySink) -> list[str]:
    return [record["n"] for record in read_records(sink)]


@pytest.fixture
def ctx() -> DeliveryContext:
    """Fresh scenario context for each test."""
    return DeliveryContext()


# === Given ===
@given("an out sink that never congests")
def given_idle_sink(ctx: DeliveryContext) -> None:
    ctx.out_sink = InMemorySink()


@given(
    parsers.re(r"an out sink that congests after (?P<n>\d+) pending lines?"),
    converters={"n": int},
)
def given_congesting_sink(ctx: DeliveryContext, n: int) -> None:
    ctx.out_sink = InMemorySink(high_watermark=n)


@given(parsers.parse("a scheduler with a high watermark of {n:d}"))
def given_scheduler(ctx: DeliveryContext, n: int) -> None:
    ctx.scheduler = DeliveryScheduler(ctx.out_sink, ctx.err_sink, high_watermark=n)


# === When ===
@when(parsers.parse('the logger logs "{names}"'))
def when_logger_logs(ctx: DeliveryContext, names: str) -> None:
    logger = ctx.logger()
    ctx.results = [logger.log(name) for name in _split(names)]


@when("the out sink drains")
def when_out_sink_drains(ctx: DeliveryContext) -> None:
    flush_all(ctx.out_sink)


@when("the sinks are replaced with an idle sink")
def when_sinks_replaced(ctx: DeliveryContext) -> None:
    assert ctx.scheduler is not None
    ctx.replacement = InMemorySink()
    ctx.scheduler.replace_sinks(ctx.replacement)


# === Then ===
@then(parsers.parse('the out sink has received "{names}"'))
def then_out_sink_received(ctx: DeliveryContext, names: str) -> None:
    assert _names(ctx.out_sink) == _split(names)


@then(parsers.parse('the replacement sink has received "{names}"'))
def then_replacement_received(ctx: DeliveryContext, names: str) -> None:
    assert ctx.replacement is not None
    assert _names(ctx.replacement) == _split(names)


@then(parsers.parse('the logging calls returned "{results}"'))
def then_results(ctx: DeliveryContext, results: str) -> None:
    assert ctx.results == [value == "true" for value in _split(results)]


@then(parsers.re(r"(?P<n>\d+) lines? (?:is|are) queued"), converters={"n": int})
def then_queued(ctx: DeliveryContext, n: int) -> None:
    assert ctx.scheduler is not None
    assert ctx.scheduler.buffer_size == n


@then("the out target is congested")
def then_congested(ctx: DeliveryContext) -> None:
    assert ctx.scheduler is not None
    assert ctx.scheduler.is_congested(Target.OUT)


@then("the out target is not congested")
def then_not_congested(ctx: DeliveryContext) -> None:
    assert ctx.scheduler is not None
    assert not ctx.scheduler.is_congested(Target.OUT)
