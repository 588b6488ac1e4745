"""
Data models for the stocking scraper.

StockingEvent is the primary output of the scraping pipeline.
"""

import hashlib
from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Optional

from .normalizer import format_date_for_url


@dataclass
class StockingEvent:
    """
    A single release of fish into a named water body on a given date.

    `date` is an ISO-8601 UTC timestamp string, so events compare and sort
    lexically in chronological order.
    """

    id: str
    water_body: str
    county: str
    species: str
    date: str

    pounds: Optional[int] = None
    number_of_fish: Optional[int] = None
    category: Optional[str] = None

    @property
    def stocking_date(self) -> str:
        """Calendar date part of the event timestamp (YYYY-MM-DD)."""
        return self.date.split("T")[0]

    @property
    def content_hash(self) -> str:
        """SHA-256 over the (date, water body, species) triple."""
        content = f"{self.stocking_date}|{self.water_body.lower().strip()}|{self.species.lower()}"
        return hashlib.sha256(content.encode("utf-8")).hexdigest()

    def to_dict(self) -> dict:
        """Convert to the external camelCase schema, omitting absent fields."""
        data = {
            "id": self.id,
            "waterBody": self.water_body,
            "county": self.county,
            "species": self.species,
            "date": self.date,
            "pounds": self.pounds,
            "numberOfFish": self.number_of_fish,
            "category": self.category,
        }
        return {k: v for k, v in data.items() if v is not None}

    def to_record(self) -> dict:
        """Convert to a row for the trout_stocking_events table."""
        return {
            "stocking_date": self.stocking_date,
            "location": self.water_body,
            "county": self.county,
            "species": self.species,
            "size": self.category or None,
            "number_of_fish": self.number_of_fish,
        }


@dataclass
class CacheEntry:
    """Cached value with creation and expiry instants (epoch seconds)."""
    value: Any
    timestamp: float
    expires_at: float


@dataclass
class CacheStatus:
    """Staleness information for a cache key."""
    is_cached: bool
    last_updated: Optional[str] = None
    expires_at: Optional[str] = None
    age: Optional[float] = None  # seconds

    def to_dict(self) -> dict:
        data = {
            "isCached": self.is_cached,
            "lastUpdated": self.last_updated,
            "expiresAt": self.expires_at,
            "age": self.age,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar range requested from the schedule page."""
    start: date
    end: date

    def to_query_params(self) -> dict[str, str]:
        """Render as the page's search form parameters."""
        return {
            "start_date": format_date_for_url(self.start),
            "end_date": format_date_for_url(self.end),
        }

    def to_dict(self) -> dict:
        return {k: v.isoformat() for k, v in asdict(self).items()}
