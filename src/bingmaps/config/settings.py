"""Centralized configuration management using Pydantic Settings.

Settings are loaded from environment variables and an optional ``.env`` file
in the working directory. Nothing is read at import time; call
``get_settings()`` when configuration is actually needed.

Example:
    >>> from bingmaps.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.api.bing_maps_url)
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://dev.virtualearth.net/REST/v1"


class APISettings(BaseSettings):
    """Bing Maps credentials and endpoint."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    bing_maps_key: Optional[str] = Field(
        default=None,
        description="Bing Maps API key (unset: Client falls back to load_api_key)",
    )
    bing_maps_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Bing Maps REST base URL",
    )

    @field_validator("bing_maps_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Requests always go over TLS."""
        if not v.startswith("https://"):
            raise ValueError("Bing Maps URL must start with https://")
        return v.rstrip("/")


class HTTPSettings(BaseSettings):
    """Transport options for the HTTP client."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    bing_maps_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Transport timeout in seconds (unset: wait indefinitely)",
    )
    bing_maps_verify_tls: bool = Field(
        default=True,
        description="Verify the server TLS certificate",
    )
    bing_maps_ca_bundle: Optional[str] = Field(
        default=None,
        description="Path to a CA bundle used instead of the default trust store",
    )


class Settings(BaseSettings):
    """Root settings container.

    Example .env file:
        BING_MAPS_KEY=your_api_key
        BING_MAPS_TIMEOUT=10
        LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    api: APISettings = Field(default_factory=APISettings)
    http: HTTPSettings = Field(default_factory=HTTPSettings)
    log_level: str = Field(default="INFO", description="Root log level for the CLI")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


_settings: Optional[Settings] = None
_settings_lock = threading.Lock()


def get_settings() -> Settings:
    """Get or create the Settings singleton (thread-safe).

    Returns:
        Settings instance loaded from environment variables/.env file.

    Raises:
        ValidationError: If a configured value is invalid.
    """
    global _settings

    if _settings is not None:
        return _settings

    with _settings_lock:
        if _settings is None:
            LOGGER.debug("Initializing Settings from environment variables and .env file")
            try:
                _settings = Settings()
            except ValidationError as e:
                LOGGER.error("Configuration validation failed: %s", e)
                raise
    return _settings


def reset_settings() -> None:
    """Forget the cached Settings so the next call reloads them."""
    global _settings
    with _settings_lock:
        _settings = None


__all__ = [
    "DEFAULT_BASE_URL",
    "APISettings",
    "HTTPSettings",
    "Settings",
    "get_settings",
    "reset_settings",
]
