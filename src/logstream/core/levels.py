"""Per-logger level filter."""

from logstream.core.models import LogLevel


class LevelFilter:
    """Decides whether a call at a given severity is emitted.

    A call at severity S is enabled when the threshold is at least as
    verbose as S. NONE disables everything, including errors.

    Args:
        threshold: Most verbose level that is still emitted.
    """

    def __init__(self, threshold: LogLevel = LogLevel.NONE) -> None:
        self._threshold = LogLevel(threshold)
        self._enabled = {
            level: level is not LogLevel.NONE and self._threshold >= level
            for level in LogLevel
        }

    @property
    def threshold(self) -> LogLevel:
        return self._threshold

    def enabled(self, level: LogLevel) -> bool:
        """Return True if a call at ``level`` should be emitted."""
        return self._enabled[level]

    def __repr__(self) -> str:
        return f"LevelFilter({self._threshold.name})"
