"""
Application settings for airday.

This module defines all configuration settings for airday using Pydantic BaseSettings.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings using Pydantic BaseSettings."""

    # Gate for mutating operations (playlist writes, overrides)
    # Empty means every mutation is rejected until a key is configured
    broadcast_key: str = Field(default="", alias="BROADCAST_KEY")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    allowed_origins: str = Field(default="*", alias="ALLOWED_ORIGINS")  # Comma-separated origins
    env: str = Field(default="dev", alias="ENV")  # dev|prod|test

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # Applied when a track payload carries no duration
    default_track_duration: int = Field(default=180, gt=0, alias="DEFAULT_TRACK_DURATION")

    search_api_url: str = Field(
        default="https://svn-vivekfy.vercel.app/search/songs",
        alias="SEARCH_API_URL",
    )
    search_timeout: float = Field(default=10.0, alias="SEARCH_TIMEOUT")

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


def _resolve_env_file() -> str | None:
    # 1) Explicit override
    explicit = os.getenv("AIRDAY_ENV_FILE")
    if explicit and Path(explicit).is_file():
        return explicit

    # 2) CWD .env
    cwd_env = Path.cwd() / ".env"
    if cwd_env.is_file():
        return str(cwd_env)

    # 3) Walk up from this file to find nearest .env
    here = Path(__file__).resolve()
    for parent in here.parents:
        candidate = parent / ".env"
        if candidate.is_file():
            return str(candidate)
    return None


# Global settings instance (load from best-effort .env discovery)
_env_file = _resolve_env_file()
settings = Settings(_env_file=_env_file) if _env_file else Settings()  # type: ignore[call-arg]
