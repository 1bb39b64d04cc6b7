"""Logger facade: scope, level filter, formatting and shared delivery."""

import dataclasses
import logging
import time
from dataclasses import dataclass
from typing import Any

from logstream.core.encoding.compact import encode_record
from logstream.core.encoding.visual import render_record
from logstream.core.levels import LevelFilter
from logstream.core.models import LogLevel, LogRecord, OutputFormat, QueueEntry, Target
from logstream.core.ports import LogFormatter
from logstream.core.scheduler import DeliveryScheduler, get_default_scheduler
from logstream.core.serialize import DEFAULT_DEPTH, describe

_internal = logging.getLogger("logstream")


@dataclass
class LoggerConfig:
    """Per-logger configuration.

    Attributes:
        level: Most verbose level that is emitted.
        scope: Scope written with every record.
        depth: Depth limit of the fallback dump for circular data.
        formatter: Custom formatter replacing the built-in formats.
        output_format: Built-in format used when no formatter is set.
        colors: ANSI colors in the visual format.
    """

    level: LogLevel = LogLevel.NONE
    scope: str = ""
    depth: int = DEFAULT_DEPTH
    formatter: LogFormatter | None = None
    output_format: OutputFormat = OutputFormat.COMPACT
    colors: bool = True


class Logger:
    """Leveled, scoped structured logger.

    Every logger delivers through a DeliveryScheduler shared with its clones
    (the process-wide one unless another is given). Logging calls never
    block and never raise: they return True when the record was accepted
    and False when it was filtered out or the buffer is full.

    Example:
        ```python
        from logstream import LOG_LEVEL_DEBUG, Logger

        logger = Logger(LOG_LEVEL_DEBUG, "api").set_depth(1)
        logger.log("request", {"path": "/health"})
        db_logger = logger.clone("db")
        ```

    Args:
        level: Most verbose level that is emitted. NONE disables the logger.
        scope: Scope written with every record.
        scheduler: Delivery scheduler; defaults to the process-wide one.
    """

    def __init__(
        self,
        level: LogLevel | int = LogLevel.NONE,
        scope: str = "",
        *,
        scheduler: DeliveryScheduler | None = None,
    ) -> None:
        self._config = LoggerConfig(level=LogLevel(level), scope=scope)
        self._filter = LevelFilter(self._config.level)
        self._scheduler = scheduler if scheduler is not None else get_default_scheduler()

    @classmethod
    def from_config(
        cls, config: LoggerConfig, *, scheduler: DeliveryScheduler | None = None
    ) -> "Logger":
        """Create a logger from a configuration struct (copied)."""
        logger = cls(config.level, config.scope, scheduler=scheduler)
        logger._config = dataclasses.replace(config, level=LogLevel(config.level))
        return logger

    # === Configuration ===

    @property
    def config(self) -> LoggerConfig:
        """A copy of the current configuration."""
        return dataclasses.replace(self._config)

    @property
    def scheduler(self) -> DeliveryScheduler:
        return self._scheduler

    @property
    def level(self) -> LogLevel:
        return self._config.level

    @property
    def scope(self) -> str:
        return self._config.scope

    @property
    def depth(self) -> int:
        return self._config.depth

    def set_scope(self, scope: str) -> "Logger":
        self._config.scope = scope
        return self

    def set_depth(self, depth: int) -> "Logger":
        if depth < 0:
            raise ValueError(f"depth must be non-negative, got {depth}")
        self._config.depth = depth
        return self

    def set_formatter(self, formatter: LogFormatter | None) -> "Logger":
        """Install a custom formatter, or restore the built-ins with None."""
        if formatter is not None and not callable(formatter):
            raise TypeError("formatter must be callable")
        self._config.formatter = formatter
        return self

    def set_output_format(self, output_format: OutputFormat | str) -> "Logger":
        self._config.output_format = OutputFormat(output_format)
        return self

    def set_colors(self, enabled: bool) -> "Logger":
        self._config.colors = bool(enabled)
        return self

    def clone(self, scope: str) -> "Logger":
        """Independent copy with a new scope, sharing this logger's scheduler."""
        config = dataclasses.replace(self._config, scope=scope)
        return Logger.from_config(config, scheduler=self._scheduler)

    def is_enabled(self, level: LogLevel) -> bool:
        return self._filter.enabled(level)

    # === Logging calls ===

    def debug(self, name: str, data: Any = None) -> bool:
        return self._filter.enabled(LogLevel.DEBUG) and self._push(
            LogLevel.DEBUG, Target.OUT, name, data
        )

    def log(self, name: str, data: Any = None) -> bool:
        return self._filter.enabled(LogLevel.INFO) and self._push(
            LogLevel.INFO, Target.OUT, name, data
        )

    info = log

    def warn(self, name: str, data: Any = None) -> bool:
        return self._filter.enabled(LogLevel.WARN) and self._push(
            LogLevel.WARN, Target.OUT, name, data
        )

    def error(self, name: str, data: Any = None) -> bool:
        """Log an error. Non-exception data is wrapped as an error descriptor."""
        return self._filter.enabled(LogLevel.ERROR) and self._push(
            LogLevel.ERROR, Target.ERR, name, data
        )

    def _push(self, level: LogLevel, target: Target, name: str, data: Any) -> bool:
        try:
            line = self._format(level, name, data)
        except Exception:
            _internal.warning("Dropping log line: formatting %r failed", name, exc_info=True)
            return False
        return self._scheduler.enqueue(QueueEntry(target=target, data=line))

    def _format(self, level: LogLevel, name: str, data: Any) -> str:
        timestamp = time.time_ns() // 1_000_000
        if self._scheduler.escape_newlines:
            name = name.replace("\n", "\\n")
        config = self._config
        if config.formatter is not None:
            return str(config.formatter(timestamp, name, config.scope, level, data))

        payload, error = describe(data, config.depth, as_error=level is LogLevel.ERROR)
        record = LogRecord(
            timestamp=timestamp,
            level=level,
            scope=config.scope,
            name=name,
            payload=payload,
            error=error,
        )
        if config.output_format is OutputFormat.VISUAL:
            return render_record(record, use_color=config.colors)
        return encode_record(record)

    def __repr__(self) -> str:
        return f"Logger(level={self._config.level.name}, scope={self._config.scope!r})"
