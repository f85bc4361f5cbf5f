from __future__ import annotations

"""Configuration model for the uptime monitor service."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    API_TG_BOT: str
    CHAT_ID: str
    SECRET_FILE: str
    CRON_EXPRESSION: str
    SELF_HOST: str

    SELF_PING_CRON: str = "24 * * * * *"
    ALERT_HEADER: str = "healthcheck"

    PROBE_TIMEOUT_SEC: float = Field(default=60.0)
    MAX_CONCURRENCY: int = Field(default=50)

    HOST: str = "0.0.0.0"
    PORT: int = Field(default=10000)

    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"
    HEARTBEAT_INTERVAL_SEC: float = Field(default=5.0)

    @field_validator("API_TG_BOT", "CHAT_ID", "SECRET_FILE", "SELF_HOST")
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        """Reject blank values for settings the service cannot start without."""
        normalized = value.strip()
        if not normalized:
            raise ValueError("value must not be empty")
        return normalized

    @field_validator("CRON_EXPRESSION", "SELF_PING_CRON")
    @classmethod
    def validate_cron_text(cls, value: str) -> str:
        """Collapse whitespace; field parsing happens when the schedule is built."""
        normalized = " ".join(value.split())
        if not normalized:
            raise ValueError("cron expression must not be empty")
        return normalized

    @field_validator("PROBE_TIMEOUT_SEC")
    @classmethod
    def validate_probe_timeout(cls, value: float) -> float:
        """Every probe must be bounded by a positive timeout."""
        if value <= 0 or value > 600:
            raise ValueError("PROBE_TIMEOUT_SEC must be in (0, 600]")
        return value

    @field_validator("MAX_CONCURRENCY")
    @classmethod
    def validate_concurrency(cls, value: int) -> int:
        """Cap in-flight probes to avoid invalid or extreme runtime settings."""
        if value <= 0 or value > 500:
            raise ValueError("MAX_CONCURRENCY must be in [1, 500]")
        return value

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError("PORT must be in [1, 65535]")
        return value

    @field_validator("HEARTBEAT_INTERVAL_SEC")
    @classmethod
    def validate_heartbeat_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("HEARTBEAT_INTERVAL_SEC must be > 0")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept loguru level names case-insensitively."""
        normalized = value.strip().upper()
        if normalized not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be a loguru level name")
        return normalized

    @field_validator("ALERT_HEADER")
    @classmethod
    def validate_alert_header(cls, value: str) -> str:
        """Keep a non-empty first line so receivers can filter alert messages."""
        normalized = value.strip()
        if not normalized:
            raise ValueError("ALERT_HEADER must not be empty")
        return normalized


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings to avoid repeated environment parsing."""
    return Settings()
