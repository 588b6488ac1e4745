"""
YAML configuration loader.

Loads scraper settings with:
- Environment variable substitution
- Typed dataclasses with defaults for every missing key
- Validation of the table backend name
"""

import os
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

import yaml
import structlog

from stocking_scraper.core.http_client import DEFAULT_USER_AGENT

logger = structlog.get_logger(__name__)


DEFAULT_SCHEDULE_URL = "https://dwr.virginia.gov/fishing/trout-stocking-schedule/"
DEFAULT_SETTINGS_FILE = "settings.yml"


class ConfigError(ValueError):
    """Raised for unreadable or invalid settings."""


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variables in text.

    Supports formats:
    - ${VAR_NAME} - empty string (with a warning) if missing
    - ${VAR_NAME:-default} - optional with default

    Args:
        text: Text with env var placeholders

    Returns:
        Text with substituted values
    """
    def replace(match):
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)
        else:
            value = os.getenv(var_expr)
            if value is None:
                logger.warning("env_var_not_set", var=var_expr)
                return ""
            return value

    return re.sub(r"\$\{([^}]+)\}", replace, text)


def _parse_date(value, name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ConfigError(f"Invalid date for {name}: {value!r}") from None


@dataclass
class ScraperSettings:
    """Where and how to fetch the schedule page."""

    schedule_url: str = DEFAULT_SCHEDULE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0
    backend: str = "soup"

    lookback_days: int = 60
    lookahead_days: int = 365
    backfill_start: date = date(2015, 1, 1)

    @classmethod
    def from_dict(cls, data: dict) -> "ScraperSettings":
        """Create from dictionary (e.g., from YAML)."""
        defaults = cls()
        return cls(
            schedule_url=data.get("schedule_url") or defaults.schedule_url,
            user_agent=data.get("user_agent") or defaults.user_agent,
            timeout=float(data.get("timeout", defaults.timeout)),
            backend=data.get("backend") or defaults.backend,
            lookback_days=int(data.get("lookback_days", defaults.lookback_days)),
            lookahead_days=int(data.get("lookahead_days", defaults.lookahead_days)),
            backfill_start=_parse_date(
                data.get("backfill_start", defaults.backfill_start), "backfill_start"
            ),
        )


@dataclass
class CacheSettings:
    """Cache lifetime and the key scrape results are stored under."""

    ttl_seconds: float = 3600.0
    key: str = "stocking-data"

    @classmethod
    def from_dict(cls, data: dict) -> "CacheSettings":
        return cls(
            ttl_seconds=float(data.get("ttl_seconds", 3600.0)),
            key=data.get("key") or "stocking-data",
        )


@dataclass
class StorageSettings:
    """SQLite database used by the sync job."""

    database: str = "stocking.db"

    @classmethod
    def from_dict(cls, data: dict) -> "StorageSettings":
        return cls(database=data.get("database") or "stocking.db")


@dataclass
class Settings:
    """All settings sections."""

    scraper: ScraperSettings = field(default_factory=ScraperSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        return cls(
            scraper=ScraperSettings.from_dict(data.get("scraper") or {}),
            cache=CacheSettings.from_dict(data.get("cache") or {}),
            storage=StorageSettings.from_dict(data.get("storage") or {}),
        )


class ConfigLoader:
    """
    Configuration loader for scraper settings.

    Loads YAML config files and validates them.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
                       (defaults to package config directory)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path(__file__).parent

    def load_file(self, filename: str) -> dict:
        """
        Load YAML config file.

        Args:
            filename: Config file name (relative to config_dir)

        Returns:
            Parsed config dict
        """
        filepath = self.config_dir / filename

        if not filepath.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        logger.info("loading_config", file=str(filepath))

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()

        content = substitute_env_vars(content)

        try:
            config = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {filepath}: {e}") from e

        if config is not None and not isinstance(config, dict):
            raise ConfigError(f"Expected a mapping at the top of {filepath}")

        return config or {}

    def load_settings(self, filename: str = DEFAULT_SETTINGS_FILE) -> Settings:
        """
        Load and validate settings.

        Args:
            filename: Settings file name

        Returns:
            Settings object

        Raises:
            ConfigError: If a value is invalid
        """
        from stocking_scraper.parsers import BACKENDS

        try:
            settings = Settings.from_dict(self.load_file(filename))
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid settings: {e}") from e

        if settings.scraper.backend not in BACKENDS:
            raise ConfigError(
                f"Unknown table backend: {settings.scraper.backend!r} "
                f"(expected one of {sorted(BACKENDS)})"
            )

        logger.debug(
            "settings_loaded",
            schedule_url=settings.scraper.schedule_url,
            backend=settings.scraper.backend,
            cache_ttl=settings.cache.ttl_seconds,
        )

        return settings


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Convenience function to load settings.

    Args:
        config_path: Optional path to a settings YAML file

    Returns:
        Settings object
    """
    if config_path:
        loader = ConfigLoader(str(Path(config_path).parent))
        return loader.load_settings(Path(config_path).name)
    else:
        loader = ConfigLoader()
        return loader.load_settings()
