"""Configuration management for the Bing Maps client."""

from __future__ import annotations

from .settings import get_settings, reset_settings

__all__ = ["get_settings", "reset_settings"]
