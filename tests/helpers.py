"""Helpers shared by test modules."""

import json
from typing import Any

from logstream.adapters.sinks.in_memory import InMemorySink


def read_records(sink: InMemorySink) -> list[dict[str, Any]]:
    """Parse the compact lines delivered to a sink."""
    return [json.loads(line) for line in sink.lines]


def flush_all(*sinks: InMemorySink) -> None:
    """Flush sinks until nothing is pending anywhere."""
    while sum(sink.flush() for sink in sinks):
        pass
