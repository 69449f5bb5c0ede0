"""Configuration helpers for API keys and environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_APP_URL = "http://localhost:3000"
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:3001"]


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(slots=True)
class ApiSettings:
    """Centralised container for the external service credentials."""

    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    app_url: str = DEFAULT_APP_URL
    app_title: str = "Rihla - AI Tourism Ecosystem"
    youtube_api_key: Optional[str] = None
    environment: str = "development"
    sentry_dsn: Optional[str] = None
    video_cache_ttl_s: float = 3600.0
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Load settings from environment variables."""

        return cls(
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY"),
            openrouter_base_url=os.getenv("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL),
            app_url=os.getenv("NEXT_PUBLIC_APP_URL", DEFAULT_APP_URL),
            youtube_api_key=os.getenv("YOUTUBE_API_KEY"),
            environment=os.getenv("APP_ENV", "development"),
            sentry_dsn=os.getenv("SENTRY_DSN"),
            video_cache_ttl_s=float(os.getenv("VIDEO_CACHE_TTL_S", "3600")),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS")),
        )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def ensure(self, field: str) -> str:
        """Return the requested field and fail fast if it is missing."""

        value = getattr(self, field)
        if not value:
            raise RuntimeError(f"Missing configuration value: {field}")
        return value
