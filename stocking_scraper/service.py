"""
Cached access to stocking events for API callers.

Fronts the scraper with the cache: results are stored under one key and
refreshed when the entry expires or a caller forces a refresh.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from .config.loader import Settings
from .core.cache import CacheManager
from .core.events import filter_by_range
from .core.models import CacheStatus, StockingEvent
from .orchestrator import StockingScraper

logger = structlog.get_logger(__name__)


DEFAULT_CACHE_KEY = "stocking-data"


@dataclass
class StockingResponse:
    """Events plus cache staleness, as returned to API clients."""

    events: list[StockingEvent]
    cache: CacheStatus

    @property
    def count(self) -> int:
        return len(self.events)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "data": [event.to_dict() for event in self.events],
            "cache": self.cache.to_dict(),
            "count": self.count,
        }


class StockingDataService:
    """
    Cache-aside access to scraped events.

    Both collaborators are injected so one cache instance can be shared
    across services and swapped out in tests.
    """

    def __init__(
        self,
        scraper: StockingScraper,
        cache: CacheManager,
        cache_key: str = DEFAULT_CACHE_KEY,
        ttl: Optional[float] = None,
    ):
        """
        Initialize service.

        Args:
            scraper: Initialized scraper
            cache: Shared cache
            cache_key: Key the scrape results are stored under
            ttl: Entry TTL in seconds (cache default when None)
        """
        self.scraper = scraper
        self.cache = cache
        self.cache_key = cache_key
        self.ttl = ttl

    async def get_events(self, refresh: bool = False) -> list[StockingEvent]:
        """
        Return cached events, scraping when missing, expired or forced.

        Raises:
            ScrapeError: If a scrape is needed and the page is unreachable
        """
        if not refresh:
            events = self.cache.get(self.cache_key)
            if events is not None:
                logger.debug("cache_hit", key=self.cache_key, events=len(events))
                return list(events)

        logger.info("fetching_fresh_data", key=self.cache_key, forced=refresh)
        events = await self.scraper.scrape(self.scraper.default_range())
        self.cache.set(self.cache_key, events, self.ttl)
        logger.info("events_cached", key=self.cache_key, events=len(events))

        return list(events)

    async def refresh(self) -> list[StockingEvent]:
        """Drop the cached entry and scrape again."""
        self.cache.clear(self.cache_key)
        return await self.get_events(refresh=True)

    async def query(
        self,
        start: Optional[str] = None,
        end: Optional[str] = None,
        refresh: bool = False,
    ) -> StockingResponse:
        """
        Events within an optional ISO date range, with cache status.

        Args:
            start: Inclusive lower bound
            end: Inclusive upper bound
            refresh: Bypass the cache

        Returns:
            StockingResponse
        """
        events = await self.get_events(refresh=refresh)

        if start or end:
            events = filter_by_range(events, start, end)

        if not events:
            logger.warning("no_events_found", start=start, end=end)

        return StockingResponse(events=events, cache=self.status())

    def status(self) -> CacheStatus:
        """Cache status of the stored scrape."""
        return self.cache.get_status(self.cache_key)


def build_service(
    settings: Settings,
    scraper: StockingScraper,
    cache: Optional[CacheManager] = None,
) -> StockingDataService:
    """
    Compose the cached service from settings.

    Args:
        settings: Loaded settings (cache TTL and key are taken from here)
        scraper: Initialized scraper
        cache: Shared cache; a new one with the configured TTL when omitted

    Returns:
        StockingDataService
    """
    if cache is None:
        cache = CacheManager(default_ttl=settings.cache.ttl_seconds)

    return StockingDataService(scraper, cache, cache_key=settings.cache.key)
