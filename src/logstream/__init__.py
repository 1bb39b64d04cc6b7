"""Structured logging with buffered, backpressure-aware delivery."""

from logstream.adapters.logging import LogstreamHandler
from logstream.adapters.sinks import AsyncioStreamSink, InMemorySink, StreamSink
from logstream.config import LogstreamSettings, configure, create_logger
from logstream.core.logger import Logger, LoggerConfig
from logstream.core.models import (
    LOG_LEVEL_DEBUG,
    LOG_LEVEL_ERROR,
    LOG_LEVEL_INFO,
    LOG_LEVEL_NONE,
    LOG_LEVEL_WARN,
    ErrorDescriptor,
    LogLevel,
    LogRecord,
    OutputFormat,
    QueueEntry,
    Target,
)
from logstream.core.ports import LogFormatter, SinkPort
from logstream.core.scheduler import (
    DEFAULT_HIGH_WATERMARK,
    DeliveryScheduler,
    get_default_scheduler,
    reset_default_scheduler,
)

__all__ = [
    "DEFAULT_HIGH_WATERMARK",
    "LOG_LEVEL_DEBUG",
    "LOG_LEVEL_ERROR",
    "LOG_LEVEL_INFO",
    "LOG_LEVEL_NONE",
    "LOG_LEVEL_WARN",
    "AsyncioStreamSink",
    "DeliveryScheduler",
    "ErrorDescriptor",
    "InMemorySink",
    "LogFormatter",
    "LogLevel",
    "LogRecord",
    "Logger",
    "LoggerConfig",
    "LogstreamHandler",
    "LogstreamSettings",
    "OutputFormat",
    "QueueEntry",
    "SinkPort",
    "StreamSink",
    "Target",
    "configure",
    "create_logger",
    "get_default_scheduler",
    "reset_default_scheduler",
]
