"""Application configuration."""

import os
from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    telegram_allowed_user_ids: str | None = None
    album_debounce_seconds: float = Field(default=3.0, gt=0)
    max_media_per_album: int = Field(default=10, ge=2, le=10)
    cleanup_delay_seconds: float = Field(default=1.0, ge=0)
    session_idle_timeout_minutes: float = Field(default=30, gt=0)
    session_sweep_interval_minutes: float = Field(default=10, gt=0)
    shutdown_grace_seconds: float = Field(default=5.0, ge=0)
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def session_idle_timeout(self) -> timedelta:
        return timedelta(minutes=self.session_idle_timeout_minutes)

    @property
    def session_sweep_interval(self) -> timedelta:
        return timedelta(minutes=self.session_sweep_interval_minutes)


def parse_allowed_user_ids(raw: str | None) -> set[int] | None:
    """Parse allowed Telegram user IDs from env."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return None
    ids: set[int] = set()
    for chunk in cleaned.split(","):
        value = chunk.strip()
        if not value:
            continue
        if value.isdigit():
            ids.add(int(value))
    return ids or None
