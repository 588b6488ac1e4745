"""
Scrape orchestrator for the trout stocking schedule.

Coordinates:
- Fetching the schedule page (date-ranged, with a plain-page fallback)
- Table location and event extraction via the configured backend
"""

import json
from datetime import date, timedelta
from pathlib import Path
from typing import Optional

import httpx
import structlog

from .config.loader import ScraperSettings
from .core.http_client import HttpClient
from .core.models import DateRange, StockingEvent
from .parsers import TableBackend, get_backend, locate_events

logger = structlog.get_logger(__name__)


class ScrapeError(Exception):
    """The schedule page could not be fetched."""


def default_date_range(
    today: Optional[date] = None,
    lookback_days: int = 60,
    lookahead_days: int = 365,
) -> DateRange:
    """
    Default scan window: recent corrections plus upcoming stockings.

    Args:
        today: Reference date (defaults to today)
        lookback_days: Days before today to include
        lookahead_days: Days after today to include

    Returns:
        DateRange
    """
    today = today or date.today()
    return DateRange(
        start=today - timedelta(days=lookback_days),
        end=today + timedelta(days=lookahead_days),
    )


def backfill_date_range(
    today: Optional[date] = None,
    start: date = date(2015, 1, 1),
    lookahead_days: int = 365,
) -> DateRange:
    """Widest scan window, from a fixed early date to maximize history."""
    today = today or date.today()
    return DateRange(start=start, end=today + timedelta(days=lookahead_days))


class StockingScraper:
    """
    Fetch the stocking schedule and extract its events.

    Stateless apart from the HTTP client. Pass a shared client or use
    the scraper as an async context manager to own one.

    Usage:
        async with StockingScraper() as scraper:
            events = await scraper.scrape(default_date_range())
    """

    def __init__(
        self,
        settings: Optional[ScraperSettings] = None,
        http_client: Optional[HttpClient] = None,
        backend: Optional[TableBackend] = None,
    ):
        """
        Initialize scraper.

        Args:
            settings: Scraper settings (defaults apply when omitted)
            http_client: Shared HTTP client (creates own if not provided)
            backend: Table backend (defaults to settings.backend)
        """
        self.settings = settings or ScraperSettings()
        self.http_client = http_client
        self._owns_client = http_client is None
        self.backend = backend or get_backend(self.settings.backend)
        self.logger = logger.bind(backend=self.backend.get_backend_name())

    async def __aenter__(self) -> "StockingScraper":
        """Enter async context."""
        if self._owns_client:
            self.http_client = HttpClient(
                timeout=self.settings.timeout,
                user_agent=self.settings.user_agent,
            )
            await self.http_client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._owns_client and self.http_client:
            await self.http_client.__aexit__(exc_type, exc_val, exc_tb)
            self.http_client = None

    def default_range(self, today: Optional[date] = None) -> DateRange:
        """Default scan window from settings."""
        return default_date_range(
            today,
            lookback_days=self.settings.lookback_days,
            lookahead_days=self.settings.lookahead_days,
        )

    def backfill_range(self, today: Optional[date] = None) -> DateRange:
        """Backfill scan window from settings."""
        return backfill_date_range(
            today,
            start=self.settings.backfill_start,
            lookahead_days=self.settings.lookahead_days,
        )

    async def fetch_html(self, date_range: Optional[DateRange] = None) -> str:
        """
        Fetch the schedule page.

        A date-ranged request that fails falls back once to the plain
        page.

        Args:
            date_range: Optional range sent as search parameters

        Returns:
            Page HTML

        Raises:
            ScrapeError: If the page cannot be fetched
        """
        if not self.http_client:
            raise RuntimeError("Scraper not initialized. Use 'async with' context.")

        url = self.settings.schedule_url
        headers = {"Referer": url}

        if date_range is not None:
            params = date_range.to_query_params()
            self.logger.info("fetching_schedule", url=url, **params)
            try:
                return await self.http_client.get_text(url, params=params, headers=headers)
            except httpx.HTTPError as e:
                self.logger.warning(
                    "date_range_fetch_failed",
                    url=url,
                    error=str(e),
                    fallback="plain_page",
                )

        self.logger.info("fetching_schedule", url=url)
        try:
            return await self.http_client.get_text(url, headers=headers)
        except httpx.HTTPError as e:
            self.logger.error("fetch_failed", url=url, error=str(e))
            raise ScrapeError(f"Failed to fetch stocking schedule from {url}: {e}") from e

    def parse(self, html: str) -> list[StockingEvent]:
        """Extract events from schedule HTML."""
        return locate_events(html, self.backend)

    async def scrape(self, date_range: Optional[DateRange] = None) -> list[StockingEvent]:
        """
        Scrape stocking events.

        Args:
            date_range: Optional range to request from the page

        Returns:
            Events in page row order (possibly empty)

        Raises:
            ScrapeError: Only on transport failure
        """
        html = await self.fetch_html(date_range)
        events = self.parse(html)

        self.logger.info(
            "scrape_complete",
            events=len(events),
            date_range=date_range.to_dict() if date_range else None,
        )

        return events


def save_events(
    events: list[StockingEvent],
    path: str,
    output_format: str = "json",
) -> str:
    """
    Save events to a JSON or JSONL file.

    Args:
        events: Events to save
        path: Output file path (parent directories are created)
        output_format: "json" (one array) or "jsonl" (one object per line)

    Returns:
        Path to saved file
    """
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", encoding="utf-8") as f:
        if output_format == "jsonl":
            for event in events:
                f.write(json.dumps(event.to_dict(), ensure_ascii=False) + "\n")
        else:
            json.dump([e.to_dict() for e in events], f, ensure_ascii=False, indent=2)

    logger.info("saved_events", path=str(filepath), format=output_format, events=len(events))
    return str(filepath)
