"""
In-memory key/value cache with per-entry TTL.

Entries are evicted lazily: the first read that sees an expired entry
removes it. There is no background sweep.
"""

import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import structlog

from .models import CacheEntry, CacheStatus
from .normalizer import to_iso_timestamp

logger = structlog.get_logger(__name__)


DEFAULT_TTL_SECONDS = 60 * 60


def _isoformat(epoch_seconds: float) -> str:
    return to_iso_timestamp(datetime.fromtimestamp(epoch_seconds, tz=timezone.utc))


class CacheManager:
    """
    TTL cache for scrape results.

    Construct one instance at process start and hand it to every
    consumer. Concurrent writes to one key are last-write-wins.

    Usage:
        cache = CacheManager(default_ttl=3600)
        cache.set("stocking-data", events)
        events = cache.get("stocking-data")
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize cache.

        Args:
            default_ttl: TTL in seconds used when `set` gets none
            clock: Returns the current time in epoch seconds
        """
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store value under key, replacing any existing entry."""
        timestamp = self._clock()
        expires_at = timestamp + (ttl if ttl is not None else self.default_ttl)
        self._entries[key] = CacheEntry(value=value, timestamp=timestamp, expires_at=expires_at)
        logger.debug("cache_set", key=key, expires_at=_isoformat(expires_at))

    def _live_entry(self, key: str) -> tuple[Optional[CacheEntry], float]:
        """Return the entry for key unless expired (evicting it if so)."""
        now = self._clock()
        entry = self._entries.get(key)

        if entry is None:
            return None, now

        if now > entry.expires_at:
            del self._entries[key]
            logger.debug("cache_expired", key=key)
            return None, now

        return entry, now

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        entry, _ = self._live_entry(key)
        return entry.value if entry else None

    def get_status(self, key: str) -> CacheStatus:
        """Describe the freshness of key without returning its value."""
        entry, now = self._live_entry(key)

        if entry is None:
            return CacheStatus(is_cached=False)

        return CacheStatus(
            is_cached=True,
            last_updated=_isoformat(entry.timestamp),
            expires_at=_isoformat(entry.expires_at),
            age=now - entry.timestamp,
        )

    def clear(self, key: str) -> None:
        """Drop a single entry."""
        self._entries.pop(key, None)

    def clear_all(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def has(self, key: str) -> bool:
        """Check whether key holds a live value."""
        entry, _ = self._live_entry(key)
        return entry is not None
