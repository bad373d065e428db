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
        default="sqlite:///./inbox.db",
        description="Database connection URL used by SQLAlchemy for the key/value store",
        min_length=1,
    )
    add_secret: str | None = Field(
        default=None,
        description="Shared secret the indexer webhook sends in the x-api-key header",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    web_push_public_key: str | None = Field(
        default=None, description="VAPID public key advertised to push clients"
    )
    web_push_private_key: str | None = Field(
        default=None, description="VAPID private key used to sign push requests"
    )
    web_push_subject: str = Field(
        default="mailto:support@daodao.zone",
        description="VAPID subject claim (mailto: or https: URL)",
    )
    pusher_host: str | None = Field(default=None, description="Pusher REST API host")
    pusher_port: int | None = Field(default=None, description="Pusher REST API port")
    pusher_app_id: str | None = Field(default=None, description="Pusher application id")
    pusher_app_key: str | None = Field(default=None, description="Pusher application key")
    pusher_secret: str | None = Field(default=None, description="Pusher application secret")
    profile_directory_url: str | None = Field(
        default=None,
        description="Base URL of the profile directory used to expand linked identities",
    )
    app_base_url: str = Field(
        default="https://daodao.zone",
        description="Public URL of the web application linked from notifications",
    )
    ipfs_gateway_url: str = Field(
        default="https://nftstorage.link/ipfs/",
        description="HTTP gateway prefix that replaces ipfs:// image references",
    )
    default_image_url: str = Field(
        default="https://daodao.zone/daodao.png",
        description="Image used in emails when the event carries none",
    )
    outbound_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound for every outbound call made while delivering an event",
        gt=0,
    )
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

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
    def _validate_web_push_pair(self) -> "Settings":
        if bool(self.web_push_public_key) ^ bool(self.web_push_private_key):
            raise ValueError(
                "WEB_PUSH_PUBLIC_KEY and WEB_PUSH_PRIVATE_KEY must both be provided to enable push"
            )
        return self

    @property
    def pusher_enabled(self) -> bool:
        return all(
            (
                self.pusher_host,
                self.pusher_port,
                self.pusher_app_id,
                self.pusher_app_key,
                self.pusher_secret,
            )
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
