"""driveview settings.

Values come from (highest priority first) constructor arguments, ``DRIVEVIEW_*``
environment variables and a ``.env`` file in the working directory.

Changes:
  - 2026-10-09: Added token_file so the session token can live outside the env.
  - 2026-10-04: Initial settings (api_url, request_timeout, use_webhook, log_level).
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8003"


def get_config_dir() -> Path:
    """Get/create the driveview config directory (~/.driveview)."""
    d = Path.home() / ".driveview"
    d.mkdir(parents=True, exist_ok=True)
    return d


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DRIVEVIEW_",
        env_file=".env",
        extra="ignore",
    )

    api_url: str = DEFAULT_API_URL
    request_timeout: float = Field(default=30.0, gt=0)
    use_webhook: bool = False
    access_token: str | None = None
    token_file: Path | None = None
    log_level: str = "INFO"

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()

    @property
    def endpoint_family(self) -> str:
        return "webhook" if self.use_webhook else "api"

    @classmethod
    def load(cls, **overrides) -> Settings:
        """Build settings, dropping overrides that were not given (None)."""
        return cls(**{k: v for k, v in overrides.items() if v is not None})


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
        logger.debug("Loaded settings for %s", _settings.api_url)
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (for testing)."""
    global _settings
    _settings = None
