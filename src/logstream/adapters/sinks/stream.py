"""Sink writing to a text stream such as ``sys.stdout``."""

import sys
from collections.abc import Callable
from typing import TextIO

_STD_STREAMS = ("stdout", "stderr")


class StreamSink:
    """Writes each line to a text stream and flushes it.

    A blocking text stream absorbs every write, so this sink never reports
    congestion.

    Args:
        stream: Destination stream. When omitted, ``sys.<fallback>`` is looked
            up on every write so a replaced or captured std stream is used.
        fallback: ``"stdout"`` or ``"stderr"``.
    """

    def __init__(self, stream: TextIO | None = None, *, fallback: str = "stdout") -> None:
        if fallback not in _STD_STREAMS:
            raise ValueError(f"fallback must be one of {_STD_STREAMS}, got {fallback!r}")
        self._stream = stream
        self._fallback = fallback

    @property
    def stream(self) -> TextIO:
        if self._stream is not None:
            return self._stream
        return getattr(sys, self._fallback)

    def write(self, data: str) -> bool:
        stream = self.stream
        stream.write(data)
        stream.flush()
        return True

    def once_drain(self, callback: Callable[[], None]) -> None:
        # Never congested, so it is always drained.
        callback()

    def __repr__(self) -> str:
        target = "custom" if self._stream is not None else f"sys.{self._fallback}"
        return f"StreamSink({target})"
