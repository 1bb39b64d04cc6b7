"""Sink adapters implementing SinkPort."""

from logstream.adapters.sinks.asyncio_writer import AsyncioStreamSink
from logstream.adapters.sinks.in_memory import InMemorySink
from logstream.adapters.sinks.stream import StreamSink

__all__ = [
    "AsyncioStreamSink",
    "InMemorySink",
    "StreamSink",
]
