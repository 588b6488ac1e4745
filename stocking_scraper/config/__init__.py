"""
Configuration module for the stocking scraper.

Provides:
- YAML settings loading with validation
- Environment variable substitution
"""

from .loader import (
    ConfigError,
    ConfigLoader,
    Settings,
    ScraperSettings,
    CacheSettings,
    StorageSettings,
    load_settings,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "Settings",
    "ScraperSettings",
    "CacheSettings",
    "StorageSettings",
    "load_settings",
]
