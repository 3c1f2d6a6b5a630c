"""
Settings for the aggregation service.

Each component reads its own environment prefix through pydantic-settings;
a YAML file can override any section.
"""

from datetime import timezone, tzinfo
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class FetcherConfig(BaseSettings):
    """RSS/Atom fetcher configuration."""

    model_config = SettingsConfigDict(env_prefix="FETCHER_")

    # HTTP settings
    timeout_seconds: int = Field(default=30, ge=1, le=300, description="Request timeout")
    user_agent: str = Field(
        default="Feed-Aggregation/0.1.0 (+https://github.com/feed-aggregation)",
        description="User-Agent header"
    )
    accept: str = Field(
        default="application/atom+xml, application/rss+xml, application/xml;q=0.9, text/xml;q=0.8",
        description="Accept header"
    )

    # Follow redirects
    follow_redirects: bool = Field(default=True)
    max_redirects: int = Field(default=5, ge=0, le=20)

    # Concurrency
    max_workers: int = Field(default=8, ge=1, le=64, description="Maximum concurrent feed fetches")

    # Content settings
    max_content_length: int = Field(
        default=10_000_000,
        ge=1_000,
        le=100_000_000,
        description="Maximum feed body length in bytes"
    )


class AggregatorConfig(BaseSettings):
    """Aggregation pipeline configuration."""

    model_config = SettingsConfigDict(env_prefix="AGGREGATOR_")

    timezone: Optional[str] = Field(
        default=None,
        description="Timezone used to split items into days (None = local time)"
    )
    highlight_threshold: int = Field(
        default=3,
        ge=1,
        description="Domains with fewer entries than this in a day may be highlighted"
    )
    drop_homepage_links: bool = Field(
        default=True,
        description="Drop items that only link back to their feed's homepage"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Validate timezone name."""
        if v is None or v.upper() == "UTC":
            return v
        try:
            ZoneInfo(v)
        except Exception as e:
            raise ValueError(f"Unknown timezone: {v!r}") from e
        return v

    def get_tzinfo(self) -> Optional[tzinfo]:
        """Get the tzinfo used for day bucketing (None means local time)."""
        if self.timezone is None:
            return None
        if self.timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.timezone)


class LoggingConfig(BaseSettings):
    """Log sinks and verbosity."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Minimum level for all sinks")
    format: str = Field(
        default="<green>{time:HH:mm:ss.SSS}</green> <level>{level: <7}</level> <cyan>{name}</cyan> {message}",
        description="loguru format string"
    )

    console_enabled: bool = Field(default=True, description="Log to stderr")

    file_enabled: bool = Field(default=False, description="Also log to a rotating file")
    file_path: str = Field(default="logs/feed_aggregation.log")
    rotation: str = Field(default="50 MB")
    retention: str = Field(default="14 days")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize the level name to a loguru level."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level {v!r}, expected one of {', '.join(_LOG_LEVELS)}")
        return level


class WebConfig(BaseSettings):
    """HTTP listener settings."""

    model_config = SettingsConfigDict(env_prefix="WEB_")

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=1, le=65535)
    debug: bool = Field(default=False, description="Flask debug mode")


class Config(BaseSettings):
    """Top-level configuration; one section per component."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FEEDAGG_",
        case_sensitive=False,
    )

    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    aggregator: AggregatorConfig = Field(default_factory=AggregatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    web: WebConfig = Field(default_factory=WebConfig)


_config: Optional[Config] = None

_SECTIONS = {
    "fetcher": FetcherConfig,
    "aggregator": AggregatorConfig,
    "logging": LoggingConfig,
    "web": WebConfig,
}


def get_config() -> Config:
    """Return the process-wide configuration, building it from the environment on first use."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Config) -> None:
    global _config
    _config = config


def load_config_from_yaml(yaml_path: str) -> Config:
    """Build a configuration from a YAML file.

    Top-level keys map onto ``Config`` fields and each section onto its own
    settings class. Keys present in the file override the environment; the
    rest still come from ``FETCHER_*``, ``AGGREGATOR_*`` and so on.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(yaml_path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}

    sections = {
        name: settings_class(**(data.pop(name, None) or {}))
        for name, settings_class in _SECTIONS.items()
    }
    return Config(**data, **sections)
