"""Sink over an ``asyncio.StreamWriter``.

Writes go straight into the transport buffer. Once that buffer reaches the
high-water limit the sink reports congestion, awaits ``writer.drain()`` in
a task and then fires the drain listeners. Must be written to from the
event loop thread.

If waiting for the drain fails, the pending listeners are discarded and the
failure is logged; replace the scheduler sinks to resume delivery.
"""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger("logstream")


class AsyncioStreamSink:
    """SinkPort adapter for asyncio streams.

    Args:
        writer: Connected stream writer.
        high_water: Buffered bytes at which the sink reports congestion.
            Defaults to the transport's own high-water limit.
        encoding: Text encoding of written lines.
    """

    def __init__(
        self,
        writer: asyncio.StreamWriter,
        high_water: int | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self._writer = writer
        if high_water is None:
            _, high_water = writer.transport.get_write_buffer_limits()
        self._high_water = high_water
        self._encoding = encoding
        self._listeners: list[Callable[[], None]] = []
        self._drain_task: asyncio.Task[None] | None = None

    @property
    def high_water(self) -> int:
        return self._high_water

    def write(self, data: str) -> bool:
        self._writer.write(data.encode(self._encoding))
        if self._writer.transport.get_write_buffer_size() < self._high_water:
            return True
        if self._drain_task is None or self._drain_task.done():
            self._drain_task = asyncio.get_running_loop().create_task(self._wait_drained())
        return False

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def once_drain(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    async def _wait_drained(self) -> None:
        try:
            await self._writer.drain()
        except ConnectionError:
            self._listeners.clear()
            logger.warning("Stream closed while waiting for drain", exc_info=True)
            return
        except Exception:
            self._listeners.clear()
            logger.warning("Waiting for stream drain failed", exc_info=True)
            return
        # Listeners may write again and need a fresh task if that congests.
        self._drain_task = None
        listeners, self._listeners = self._listeners, []
        for callback in listeners:
            callback()
