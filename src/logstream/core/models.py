"""Core domain models for log records and delivery."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Severity ordinal, from least verbose (NONE) to most verbose (DEBUG)."""

    NONE = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4

    @classmethod
    def parse(cls, value: "str | int | LogLevel") -> "LogLevel":
        """Resolve a level from its name ("debug", "WARN") or ordinal.

        Raises:
            ValueError: If the value names no known level.
        """
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown log level: {value!r}") from None
        return cls(value)


LOG_LEVEL_NONE = LogLevel.NONE
LOG_LEVEL_ERROR = LogLevel.ERROR
LOG_LEVEL_WARN = LogLevel.WARN
LOG_LEVEL_INFO = LogLevel.INFO
LOG_LEVEL_DEBUG = LogLevel.DEBUG


class Target(str, Enum):
    """Output sink a record is routed to."""

    OUT = "out"
    ERR = "err"

    @property
    def other(self) -> "Target":
        return Target.ERR if self is Target.OUT else Target.OUT


class OutputFormat(str, Enum):
    """Built-in line formats."""

    COMPACT = "compact"
    VISUAL = "visual"


@dataclass(frozen=True)
class ErrorDescriptor:
    """Serialized form of an error value.

    Attributes:
        name: Error type name (e.g., ValueError).
        message: The error message.
        stack: Formatted traceback, if available.
    """

    name: str
    message: str
    stack: str | None = None


@dataclass(frozen=True)
class LogRecord:
    """A single structured log record.

    Attributes:
        timestamp: Epoch milliseconds.
        level: Severity of the record.
        scope: Scope of the logger that produced it.
        name: Message name.
        payload: Serialized data (JSON-compatible tree or fallback dump).
        error: Error descriptor; takes precedence over payload.
    """

    timestamp: int
    level: LogLevel
    scope: str
    name: str
    payload: Any = None
    error: ErrorDescriptor | None = None


@dataclass(frozen=True)
class QueueEntry:
    """An encoded line waiting for delivery.

    Attributes:
        target: Sink the line goes to.
        data: Encoded line, without the line terminator.
    """

    target: Target
    data: str
