"""Port interfaces for sinks and formatters.

These protocols define the contracts that adapters must implement.
The core depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from logstream.core.models import LogLevel


@runtime_checkable
class SinkPort(Protocol):
    """Port for a line-oriented output destination.

    Adapters implementing this protocol accept text and report whether
    they can take more right now. Examples: StreamSink, InMemorySink,
    AsyncioStreamSink.
    """

    def write(self, data: str) -> bool:
        """Write one terminated line.

        Returns:
            True if the sink can accept more data immediately, False if it
            is congested. The written data is accepted either way.
        """
        ...

    def once_drain(self, callback: Callable[[], None]) -> None:
        """Register a one-shot callback fired when the sink drains.

        Only meaningful after write() returned False. The callback is
        invoked at most once.
        """
        ...


@runtime_checkable
class LogFormatter(Protocol):
    """Custom formatter replacing the built-in line formats.

    Receives the raw logged data and returns the exact line to emit.
    """

    def __call__(
        self,
        timestamp: int,
        name: str,
        scope: str,
        level: LogLevel,
        data: Any = None,
    ) -> str: ...
