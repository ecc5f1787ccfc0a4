"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the command line tool and
the narrative report service share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class GeminiSettings(BaseSettings):
    """Configuration for the Gemini model that writes narrative reports."""

    model_config = SettingsConfigDict(extra="ignore")

    api_key: Optional[str] = Field(
        None,
        validation_alias="GEMINI_API_KEY",
        description="Reports degrade to a placeholder when no key is configured.",
    )
    model_name: str = Field("gemini-2.5-flash", validation_alias="GEMINI_MODEL_NAME")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


class AppSettings(BaseSettings):
    """Root settings object for the screening service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    max_rows: int = Field(
        200_000,
        validation_alias="APP_MAX_ROWS",
        description="Upper bound on rows accepted by a single analysis request.",
    )
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @field_validator("max_rows")
    @classmethod
    def _positive_rows(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("APP_MAX_ROWS must be positive")
        return value


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = ["AppSettings", "GeminiSettings", "get_settings"]
