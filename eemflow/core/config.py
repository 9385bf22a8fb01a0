"""Application configuration using Pydantic Settings v2.

Loads configuration from environment variables (prefix ``EEM_``) with .env
file support. The correlation engine itself never reads settings; services
turn them into an explicit ``DetectionConfig`` per call.
"""

from __future__ import annotations

import functools
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """EEM Flow application settings."""

    model_config = SettingsConfigDict(
        env_prefix="EEM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────
    app_name: str = "EEM Flow"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ── Storage ──────────────────────────────────────────────────
    storage_backend: Literal["memory", "redis"] = "memory"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_url: str | None = None
    redis_key_prefix: str = "eem"

    # ── Processing toggles ───────────────────────────────────────
    enable_correlation_analysis: bool = True
    enable_eulerian_processing: bool = True

    # ── Correlation defaults ─────────────────────────────────────
    default_min_strength: float = Field(default=0.5, ge=0.0, le=1.0)
    max_events_per_session: int = Field(default=50, gt=0)
    max_events_per_window: int = Field(default=1000, gt=0)
    default_flow_window_minutes: int = Field(default=24 * 60, gt=0)
    temporal_window_seconds: float = Field(default=300.0, gt=0)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def resolved_redis_url(self) -> str:
        return self.redis_url or f"redis://{self.redis_host}:{self.redis_port}/0"


@functools.lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()
