from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(..., env="DATABASE_URL")
    jwt_secret_key: str = Field("CHANGE_ME_SECRET", env="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", env="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(30, env="ACCESS_TOKEN_EXPIRE_MINUTES")
    refresh_token_expire_days: int = Field(30, env="REFRESH_TOKEN_EXPIRE_DAYS")

    redis_url: str = Field(
        "redis://localhost:6379/0",
        env="REDIS_URL",
    )
    public_profile_cache_ttl_seconds: int = Field(
        60,
        env="PUBLIC_PROFILE_CACHE_TTL_SECONDS",
    )

    # Single supported calendar year for day entries.
    calendar_year: int = Field(2026, env="CALENDAR_YEAR")

    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3001"],
        env="CORS_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


settings = Settings()


__all__ = ["settings", "Settings"]
