"""In-memory sink with optional simulated congestion."""

from collections.abc import Callable


class InMemorySink:
    """In-memory implementation of SinkPort.

    Stores written lines in a list. Suitable for testing and for capturing
    output programmatically.

    With a ``high_watermark``, written lines are held as pending and
    ``write`` reports congestion once that many are pending, the way a
    buffered stream does. ``flush`` delivers the pending lines and fires the
    drain listeners of the current congestion episode.

    Args:
        high_watermark: Pending lines at which the sink reports congestion.
            None (default) never congests.
    """

    def __init__(self, high_watermark: int | None = None) -> None:
        self._high_watermark = high_watermark
        self._lines: list[str] = []
        self._pending: list[str] = []
        self._listeners: list[Callable[[], None]] = []
        self._needs_drain = False

    @property
    def lines(self) -> list[str]:
        """Delivered lines, without terminators."""
        return list(self._lines)

    @property
    def pending(self) -> list[str]:
        """Lines accepted but not yet flushed."""
        return list(self._pending)

    @property
    def congested(self) -> bool:
        return self._needs_drain

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def write(self, data: str) -> bool:
        line = data.removesuffix("\n")
        if self._high_watermark is None:
            self._lines.append(line)
            return True
        self._pending.append(line)
        if len(self._pending) >= self._high_watermark:
            self._needs_drain = True
            return False
        return True

    def once_drain(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def flush(self) -> int:
        """Deliver pending lines and signal drain if the sink was congested.

        Lines written by drain listeners stay pending until the next flush.

        Returns:
            Number of lines delivered.
        """
        delivered, self._pending = self._pending, []
        self._lines.extend(delivered)
        if self._needs_drain:
            self._needs_drain = False
            listeners, self._listeners = self._listeners, []
            for callback in listeners:
                callback()
        return len(delivered)
