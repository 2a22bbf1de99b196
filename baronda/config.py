"""Application configuration settings."""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Key shared with the identity provider to verify JWT tokens",
        min_length=1,
    )
    access_token_expire_minutes: int = Field(
        default=30,
        description="Number of minutes before locally minted access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="Asia/Makassar",
        description=(
            "IANA timezone (or UTC+HH:MM offset) used for timestamps. Naive local "
            "time is the inbox sort key, so zones with daylight saving time are rejected"
        ),
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )
    fanout_max_batch_size: int = Field(
        default=500,
        description="Maximum number of writes committed in a single atomic batch",
        gt=0,
    )
    inbox_page_size: int = Field(
        default=10, description="Default number of records per inbox page", gt=0
    )
    inbox_max_page_size: int = Field(
        default=100, description="Upper bound accepted for the inbox page size", gt=0
    )
    notification_salutation: str = Field(
        default="Yth. {name},",
        description="Salutation line; ``{name}`` receives the upper-cased recipient name",
    )
    notification_signature: str = Field(
        default="Hormat kami,\nPengurus Siskamling Baronda",
        description="Closing block appended verbatim to every rendered message",
    )
    notification_fallback_name: str = Field(
        default="Warga",
        description="Label used when a recipient has no display name",
        min_length=1,
    )

    @field_validator("app_timezone")
    @classmethod
    def _reject_daylight_saving(cls, value: str) -> str:
        try:
            zone = ZoneInfo(value.strip())
        except (ZoneInfoNotFoundError, ValueError):
            # Fixed offsets such as UTC+08:00 are resolved later by the datetime helpers.
            return value
        winter = datetime(2024, 1, 15, tzinfo=zone).utcoffset()
        summer = datetime(2024, 7, 15, tzinfo=zone).utcoffset()
        if winter != summer:
            raise ValueError("APP_TIMEZONE must not observe daylight saving time")
        return value

    @model_validator(mode="after")
    def _validate_page_sizes(self) -> "Settings":
        if self.inbox_page_size > self.inbox_max_page_size:
            raise ValueError("INBOX_PAGE_SIZE must not exceed INBOX_MAX_PAGE_SIZE")
        if "{name}" not in self.notification_salutation:
            raise ValueError("NOTIFICATION_SALUTATION must contain a {name} placeholder")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
