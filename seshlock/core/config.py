"""Session settings loaded from environment variables."""

from __future__ import annotations

import datetime as dt
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]
# Written by the install command; relative, so read from the working directory.
SETTINGS_FILENAME = ".env.seshlock"


class Settings(BaseSettings):
    APP_NAME: str = "seshlock"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./seshlock.db"

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    TOKEN_INSERT_MAX_ATTEMPTS: int = 5

    model_config = SettingsConfigDict(
        env_prefix="SESHLOCK_",
        env_file=(str(BASE_DIR / ".env"), SETTINGS_FILENAME),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES", "REFRESH_TOKEN_EXPIRE_DAYS")
    @classmethod
    def validate_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("token_ttl_must_be_positive")
        return value

    @field_validator("TOKEN_INSERT_MAX_ATTEMPTS")
    @classmethod
    def validate_max_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_attempts_must_be_positive")
        return value

    @property
    def access_token_ttl(self) -> dt.timedelta:
        return dt.timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)

    @property
    def refresh_token_ttl(self) -> dt.timedelta:
        return dt.timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS)


@lru_cache()
def get_settings() -> Settings:
    """Settings for application wiring; the core receives them explicitly."""
    return Settings()
