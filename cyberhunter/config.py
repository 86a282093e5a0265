"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy",
        min_length=1,
    )
    secret_key: str = Field(description="Secret key for signing JWT tokens", min_length=1)
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    password_hash_rounds: int = Field(
        default=310_000,
        description="PBKDF2 rounds used when hashing passwords",
        ge=1000,
    )
    environment: str = Field(
        default="development",
        description="Deployment environment; 'production' hides error stack traces",
    )
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    client_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the web client, used to build links in emails",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    max_upload_size: int = Field(
        default=5 * 1024 * 1024,
        description="Largest file size in bytes a chat attachment may declare",
        gt=0,
    )
    default_page_limit: int = Field(default=10, gt=0)
    max_page_limit: int = Field(default=100, gt=0)
    chat_page_limit: int = Field(default=20, gt=0)
    password_reset_expire_minutes: int = Field(default=30, gt=0)
    email_verification_expire_minutes: int = Field(default=60 * 24, gt=0)
    app_timezone: str = Field(default="UTC")
    outbox_poll_seconds: float = Field(
        default=5.0,
        description="Interval of the background notification outbox worker; 0 disables it",
        ge=0,
    )
    outbox_max_attempts: int = Field(default=5, gt=0)

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @model_validator(mode="after")
    def _validate_page_limits(self) -> "Settings":
        if self.default_page_limit > self.max_page_limit:
            raise ValueError("DEFAULT_PAGE_LIMIT cannot exceed MAX_PAGE_LIMIT")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
