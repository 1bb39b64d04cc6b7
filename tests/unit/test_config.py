"""Tests for pydantic-settings based configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from logstream.config import LogstreamSettings, configure, create_logger
from logstream.core.models import LogLevel, OutputFormat
from logstream.core.scheduler import DEFAULT_HIGH_WATERMARK, DeliveryScheduler

pytestmark = [
    pytest.mark.unit,
    pytest.mark.tier(0),
    pytest.mark.tra("Config.LogstreamSettings"),
]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Run each test without LOGSTREAM_* variables or a stray .env file."""
    for field in LogstreamSettings.model_fields:
        monkeypatch.delenv(f"LOGSTREAM_{field.upper()}", raising=False)
    monkeypatch.chdir(tmp_path)


class TestLogstreamSettings:
    """Tests for settings resolution and validation."""

    @pytest.mark.config
    def test_defaults(self) -> None:
        settings = LogstreamSettings()

        assert settings.level is LogLevel.NONE
        assert settings.output_format is OutputFormat.COMPACT
        assert settings.colors is True
        assert settings.depth == 2
        assert settings.high_watermark == DEFAULT_HIGH_WATERMARK
        assert settings.escape_newlines is False

    @pytest.mark.config
    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOGSTREAM_LEVEL", "debug")
        monkeypatch.setenv("LOGSTREAM_OUTPUT_FORMAT", "visual")
        monkeypatch.setenv("LOGSTREAM_COLORS", "false")
        monkeypatch.setenv("LOGSTREAM_HIGH_WATERMARK", "500")

        settings = LogstreamSettings()

        assert settings.level is LogLevel.DEBUG
        assert settings.output_format is OutputFormat.VISUAL
        assert settings.colors is False
        assert settings.high_watermark == 500

    @pytest.mark.config
    def test_level_accepts_ordinal_text(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOGSTREAM_LEVEL", "3")

        assert LogstreamSettings().level is LogLevel.INFO

    @pytest.mark.config
    def test_init_kwargs_override_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOGSTREAM_LEVEL", "debug")

        assert LogstreamSettings(level="warn").level is LogLevel.WARN

    @pytest.mark.config
    def test_dotenv_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("LOGSTREAM_DEPTH=4\n", encoding="utf-8")

        assert LogstreamSettings().depth == 4

    @pytest.mark.config
    @pytest.mark.parametrize(
        "kwargs",
        [{"level": "verbose"}, {"depth": -1}, {"high_watermark": -1}, {"output_format": "xml"}],
    )
    def test_invalid_values_raise(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            LogstreamSettings(**kwargs)  # type: ignore[arg-type]

    @pytest.mark.config
    def test_settings_are_frozen(self) -> None:
        settings = LogstreamSettings()

        with pytest.raises(ValidationError):
            settings.depth = 5  # type: ignore[misc]

    @pytest.mark.config
    def test_logger_config(self) -> None:
        settings = LogstreamSettings(level=LogLevel.INFO, depth=1, colors=False)

        config = settings.logger_config("api")

        assert config.level is LogLevel.INFO
        assert config.scope == "api"
        assert config.depth == 1
        assert config.colors is False
        assert config.formatter is None


class TestConfigure:
    """Tests for configure() and create_logger()."""

    @pytest.mark.config
    def test_configure_applies_process_wide_settings(self, scheduler: DeliveryScheduler) -> None:
        settings = LogstreamSettings(high_watermark=10, escape_newlines=True)

        assert configure(settings, scheduler=scheduler) is scheduler

        assert scheduler.high_watermark == 10
        assert scheduler.escape_newlines is True

    @pytest.mark.config
    def test_configure_defaults_to_environment_and_default_scheduler(
        self, monkeypatch: pytest.MonkeyPatch, default_scheduler: DeliveryScheduler
    ) -> None:
        monkeypatch.setenv("LOGSTREAM_HIGH_WATERMARK", "7")

        assert configure() is default_scheduler
        assert default_scheduler.high_watermark == 7

    @pytest.mark.config
    def test_create_logger(self, scheduler: DeliveryScheduler) -> None:
        settings = LogstreamSettings(level="info", output_format="visual")

        logger = create_logger("api", settings, scheduler=scheduler)

        assert logger.level is LogLevel.INFO
        assert logger.scope == "api"
        assert logger.config.output_format is OutputFormat.VISUAL
        assert logger.scheduler is scheduler

    @pytest.mark.config
    def test_create_logger_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, scheduler: DeliveryScheduler
    ) -> None:
        monkeypatch.setenv("LOGSTREAM_LEVEL", "error")

        logger = create_logger("env", scheduler=scheduler)

        assert logger.is_enabled(LogLevel.ERROR)
        assert not logger.is_enabled(LogLevel.WARN)
