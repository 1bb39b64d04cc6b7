"""Configuration system for logstream.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (LOGSTREAM_*) -> .env file -> field defaults.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logstream.core.logger import Logger, LoggerConfig
from logstream.core.models import LogLevel, OutputFormat
from logstream.core.scheduler import (
    DEFAULT_HIGH_WATERMARK,
    DeliveryScheduler,
    get_default_scheduler,
)
from logstream.core.serialize import DEFAULT_DEPTH


class LogstreamSettings(BaseSettings):
    """Logger and delivery configuration.

    Resolution order: init kwargs -> env vars (LOGSTREAM_*) -> .env file -> defaults.

    ``level``, ``output_format``, ``colors`` and ``depth`` configure loggers;
    ``high_watermark`` and ``escape_newlines`` are process-wide and apply to
    the scheduler.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOGSTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: LogLevel = Field(
        default=LogLevel.NONE,
        description="Most verbose level emitted: NONE, ERROR, WARN, INFO or DEBUG",
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.COMPACT,
        description="Built-in line format: 'compact' or 'visual'",
    )
    colors: bool = Field(default=True, description="ANSI colors in the visual format")
    depth: int = Field(
        default=DEFAULT_DEPTH,
        ge=0,
        description="Depth limit of the fallback dump for circular data",
    )
    high_watermark: int = Field(
        default=DEFAULT_HIGH_WATERMARK,
        ge=0,
        description="Maximum combined number of queued lines before new ones are rejected",
    )
    escape_newlines: bool = Field(
        default=False,
        description="Write newlines in message names as a literal backslash-n",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            return LogLevel(int(value)) if value.isdigit() else LogLevel.parse(value)
        return value

    def logger_config(self, scope: str = "") -> LoggerConfig:
        """Build the per-logger part of this configuration."""
        return LoggerConfig(
            level=self.level,
            scope=scope,
            depth=self.depth,
            output_format=self.output_format,
            colors=self.colors,
        )


def configure(
    settings: LogstreamSettings | None = None,
    *,
    scheduler: DeliveryScheduler | None = None,
) -> DeliveryScheduler:
    """Apply the process-wide settings to a scheduler.

    Args:
        settings: Settings to apply; loaded from the environment when omitted.
        scheduler: Scheduler to configure; the process-wide one when omitted.

    Returns:
        The configured scheduler.
    """
    settings = settings if settings is not None else LogstreamSettings()
    scheduler = scheduler if scheduler is not None else get_default_scheduler()
    scheduler.set_high_watermark(settings.high_watermark)
    scheduler.set_escape_newlines(settings.escape_newlines)
    return scheduler


def create_logger(
    scope: str = "",
    settings: LogstreamSettings | None = None,
    *,
    scheduler: DeliveryScheduler | None = None,
) -> Logger:
    """Create a logger from settings.

    Only the per-logger fields are used; call configure() to apply the
    process-wide ones.
    """
    settings = settings if settings is not None else LogstreamSettings()
    return Logger.from_config(settings.logger_config(scope), scheduler=scheduler)
