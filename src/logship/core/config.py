"""Configuration settings for the logship integration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from logship.fields.constants import DEFAULT_ERROR_FIELDS, DEFAULT_EVENT_FIELDS


class Settings(BaseSettings):
    """Integration settings loaded from environment variables."""

    # Service identification
    service_name: str = "logship"
    enabled: bool = True
    sql_enabled: bool = False

    # Host runtime
    environment: str = "production"
    host_version: str = "5.8"
    running_in_console: bool = False

    # Own diagnostics
    log_level: str = "INFO"
    log_format: str = "json"

    # Transport
    transport: str = "structlog"  # structlog | http
    endpoint_url: str = "http://localhost:8080/api/logs"
    http_timeout: float = 5.0  # seconds

    # Classification
    ignored_levels: list[str] = []

    # Output field name -> registered FieldName
    event_fields: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_EVENT_FIELDS))
    error_fields: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ERROR_FIELDS))

    model_config = SettingsConfigDict(
        env_prefix="LOGSHIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
