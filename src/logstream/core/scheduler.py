"""Backpressure-aware delivery of encoded log lines.

One scheduler mediates between any number of loggers and a pair of sinks
(OUT and ERR). Each target has a FIFO queue and a congestion flag:

- ``enqueue`` rejects the entry when the combined queue length has reached
  the high watermark, otherwise queues it and drains the target.
- ``drain`` hands queued lines to the sink until the queue is empty or the
  sink reports congestion. A congested target waits for a single drain
  listener before it is written to again.
- When a sink drains, both targets are drained again so a shared sink does
  not starve one of them.
"""

import logging
import threading
from collections import deque

from logstream.adapters.sinks.stream import StreamSink
from logstream.core.models import QueueEntry, Target
from logstream.core.ports import SinkPort

logger = logging.getLogger("logstream")

DEFAULT_HIGH_WATERMARK = 100_000
LINE_TERMINATOR = "\n"


class DeliveryScheduler:
    """Shared per-target queues plus the congestion state machine.

    All state is guarded by a re-entrant lock, so sinks may call back into
    the scheduler (drain listeners, nested logging) from inside ``write``.

    Args:
        out: Sink for debug/info/warn lines. Defaults to ``sys.stdout``.
        err: Sink for error lines. Defaults to ``sys.stderr``.
        high_watermark: Maximum combined number of queued entries.
    """

    def __init__(
        self,
        out: SinkPort | None = None,
        err: SinkPort | None = None,
        high_watermark: int = DEFAULT_HIGH_WATERMARK,
    ) -> None:
        self._lock = threading.RLock()
        self._sinks: dict[Target, SinkPort] = {
            Target.OUT: _check_sink(out) if out is not None else StreamSink(fallback="stdout"),
            Target.ERR: _check_sink(err) if err is not None else StreamSink(fallback="stderr"),
        }
        self._queues: dict[Target, deque[QueueEntry]] = {t: deque() for t in Target}
        self._congested = dict.fromkeys(Target, False)
        self._draining = dict.fromkeys(Target, False)
        # Bumped per congestion episode and on sink replacement; drain
        # listeners carrying an older value are ignored.
        self._generation = dict.fromkeys(Target, 0)
        self._high_watermark = _check_watermark(high_watermark)
        self._escape_newlines = False

    # === Administrative API ===

    @property
    def high_watermark(self) -> int:
        return self._high_watermark

    def set_high_watermark(self, mark: int) -> None:
        """Change the overflow threshold. Queued entries are kept.

        Raises:
            ValueError: If ``mark`` is negative.
        """
        with self._lock:
            self._high_watermark = _check_watermark(mark)

    @property
    def buffer_size(self) -> int:
        """Combined number of entries waiting in both queues."""
        with self._lock:
            return sum(len(queue) for queue in self._queues.values())

    def queue_size(self, target: Target) -> int:
        with self._lock:
            return len(self._queues[Target(target)])

    def is_congested(self, target: Target) -> bool:
        with self._lock:
            return self._congested[Target(target)]

    def sink(self, target: Target) -> SinkPort:
        return self._sinks[Target(target)]

    @property
    def escape_newlines(self) -> bool:
        """Whether newlines in message names are written as ``\\n``."""
        return self._escape_newlines

    def set_escape_newlines(self, enabled: bool) -> None:
        self._escape_newlines = bool(enabled)

    def replace_sinks(self, out: SinkPort, err: SinkPort | None = None) -> None:
        """Install new sinks and deliver pending entries to them.

        Both targets start flowing again; listeners registered on the old
        sinks become stale. Queued entries are kept and delivered in order.

        Args:
            out: New OUT sink.
            err: New ERR sink. Defaults to ``out``.

        Raises:
            TypeError: If a sink does not implement SinkPort.
        """
        out = _check_sink(out)
        err = _check_sink(err) if err is not None else out
        with self._lock:
            self._sinks = {Target.OUT: out, Target.ERR: err}
            for target in Target:
                self._congested[target] = False
                self._generation[target] += 1
            self._drain(Target.ERR)
            self._drain(Target.OUT)

    # === Delivery ===

    def enqueue(self, entry: QueueEntry) -> bool:
        """Queue an entry for its target and try to deliver it.

        Returns:
            False if the buffer is at the high watermark and the entry was
            dropped, True if it was accepted (delivered or still queued).
        """
        with self._lock:
            if self.buffer_size >= self._high_watermark:
                return False
            self._queues[entry.target].append(entry)
            self._drain(entry.target)
            return True

    def drain(self, target: Target) -> None:
        """Deliver queued entries for ``target`` unless it is congested."""
        with self._lock:
            self._drain(Target(target))

    def _drain(self, target: Target) -> None:
        # A drain already running for this target picks up whatever gets
        # queued while its sink is writing.
        if self._congested[target] or self._draining[target]:
            return
        queue = self._queues[target]
        self._draining[target] = True
        try:
            while queue:
                entry = queue.popleft()
                sink = self._sinks[target]
                try:
                    accepted = sink.write(entry.data + LINE_TERMINATOR)
                except Exception:
                    logger.warning(
                        "Dropping log line: %s sink write failed", target.value, exc_info=True
                    )
                    continue
                if not accepted:
                    self._wait_for_drain(target, sink)
                    if self._congested[target]:
                        break
        finally:
            self._draining[target] = False

    def _wait_for_drain(self, target: Target, sink: SinkPort) -> None:
        self._congested[target] = True
        self._generation[target] += 1
        generation = self._generation[target]
        logger.debug(
            "Sink %s congested, %d line(s) queued", target.value, len(self._queues[target])
        )
        try:
            sink.once_drain(lambda: self._on_drain(target, generation))
        except Exception:
            logger.warning(
                "Could not register drain listener on %s sink", target.value, exc_info=True
            )
            # Without a listener nothing would ever resume this target.
            self._congested[target] = False
            self._generation[target] += 1

    def _on_drain(self, target: Target, generation: int) -> None:
        with self._lock:
            if generation != self._generation[target] or not self._congested[target]:
                return
            self._congested[target] = False
            logger.debug("Sink %s drained", target.value)
            self._drain(target)
            self._drain(target.other)


def _check_sink(sink: SinkPort) -> SinkPort:
    if not isinstance(sink, SinkPort):
        raise TypeError(f"sink must implement write() and once_drain(), got {type(sink).__name__}")
    return sink


def _check_watermark(mark: int) -> int:
    if mark < 0:
        raise ValueError(f"high watermark must be non-negative, got {mark}")
    return int(mark)


_default_scheduler: DeliveryScheduler | None = None
_default_lock = threading.Lock()


def get_default_scheduler() -> DeliveryScheduler:
    """Return the process-wide scheduler, creating it on first use."""
    global _default_scheduler
    with _default_lock:
        if _default_scheduler is None:
            _default_scheduler = DeliveryScheduler()
        return _default_scheduler


def reset_default_scheduler(scheduler: DeliveryScheduler | None = None) -> DeliveryScheduler:
    """Replace the process-wide scheduler (a fresh one when omitted).

    Loggers created earlier keep the scheduler they were built with.
    """
    global _default_scheduler
    with _default_lock:
        _default_scheduler = scheduler if scheduler is not None else DeliveryScheduler()
        return _default_scheduler
