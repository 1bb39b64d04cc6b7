"""Python logging handler adapter for logstream.

This adapter bridges Python's standard library logging module to a
logstream Logger, so records from libraries that use ``logging`` flow
through the same buffered delivery pipeline.
"""

import logging

from logstream.core.logger import Logger
from logstream.core.models import LogLevel

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Default attributes to extract from LogRecord
_DEFAULT_INCLUDE_ATTRS = ["module", "funcName", "lineno", "pathname"]

# logstream's own diagnostics; forwarding them would feed the pipeline
# with reports about itself.
_INTERNAL_LOGGER = "logstream"


def _to_log_level(levelno: int) -> LogLevel:
    """Map a stdlib level number onto the closest logstream level."""
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARN
    if levelno >= logging.INFO:
        return LogLevel.INFO
    return LogLevel.DEBUG


class LogstreamHandler(logging.Handler):
    """Logging handler that forwards log records to a logstream Logger.

    The formatted message becomes the record name; selected LogRecord
    attributes plus primitive ``extra`` fields become the data. Records
    carrying exception info are logged as errors with the exception.

    Example:
        ```python
        from logstream import LOG_LEVEL_DEBUG, Logger, LogstreamHandler

        handler = LogstreamHandler(Logger(LOG_LEVEL_DEBUG, "stdlib"))
        logging.getLogger().addHandler(handler)
        ```
    """

    def __init__(
        self,
        logger: Logger,
        include_attrs: list[str] | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a target logger.

        Args:
            logger: Logger receiving the forwarded records.
            include_attrs: List of LogRecord attributes to include. Defaults to
                ["module", "funcName", "lineno", "pathname"].
            level: Minimum stdlib level handled.
        """
        super().__init__(level)
        self._logger = logger
        self._include_attrs = include_attrs if include_attrs is not None else _DEFAULT_INCLUDE_ATTRS

    @property
    def logger(self) -> Logger:
        return self._logger

    def emit(self, record: logging.LogRecord) -> None:
        """Forward a log record to the logger.

        Args:
            record: The log record to emit.
        """
        if record.name == _INTERNAL_LOGGER or record.name.startswith(_INTERNAL_LOGGER + "."):
            return
        try:
            level = _to_log_level(record.levelno)
            if not self._logger.is_enabled(level):
                return
            self._forward(record, level)
        except Exception:
            self.handleError(record)

    def _forward(self, record: logging.LogRecord, level: LogLevel) -> None:
        message = record.getMessage()

        if record.exc_info and record.exc_info[1] is not None:
            self._logger.error(message, record.exc_info[1])
            return

        # Map of attribute names to their values from LogRecord
        attr_mapping: dict[str, str | int | float | bool] = {
            "logger": record.name,
            "module": record.module,
            "funcName": record.funcName or "",
            "lineno": record.lineno,
            "pathname": record.pathname,
        }
        data: dict[str, str | int | float | bool] = {
            key: attr_mapping[key] for key in self._include_attrs if key in attr_mapping
        }

        # Add any extra attributes passed via logging call
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                data[key] = value

        if level is LogLevel.ERROR:
            self._logger.error(message, data or None)
        elif level is LogLevel.WARN:
            self._logger.warn(message, data or None)
        elif level is LogLevel.INFO:
            self._logger.log(message, data or None)
        else:
            self._logger.debug(message, data or None)
