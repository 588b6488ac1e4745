"""
Sync scraped events into a SQLite table.

The table is unique on (stocking_date, location, species); inserting an
event that is already stored counts as a duplicate and is skipped.
"""

import sqlite3
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Iterable, Optional

import structlog

from .core.models import DateRange, StockingEvent
from .core.normalizer import to_iso_timestamp
from .orchestrator import StockingScraper

logger = structlog.get_logger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS trout_stocking_events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    stocking_date TEXT NOT NULL,
    location TEXT NOT NULL,
    county TEXT,
    species TEXT NOT NULL,
    size TEXT,
    number_of_fish INTEGER,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (stocking_date, location, species)
)
"""

INSERT_SQL = """
INSERT INTO trout_stocking_events
(stocking_date, location, county, species, size, number_of_fish)
VALUES (:stocking_date, :location, :county, :species, :size, :number_of_fish)
"""


class StockingStore:
    """SQLite store for stocking events."""

    def __init__(self, database: str = "stocking.db"):
        """
        Open (and create if needed) the database.

        Args:
            database: SQLite path, or ":memory:"
        """
        self.database = database
        self.conn = sqlite3.connect(database)
        self.conn.execute(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "StockingStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def insert(self, event: StockingEvent) -> bool:
        """
        Insert one event.

        Returns:
            True if stored, False if the triple was already present
        """
        try:
            with self.conn:
                self.conn.execute(INSERT_SQL, event.to_record())
        except sqlite3.IntegrityError:
            return False
        return True

    def count(self) -> int:
        """Total stored events."""
        return self.conn.execute("SELECT COUNT(*) FROM trout_stocking_events").fetchone()[0]

    def records(self) -> list[dict]:
        """All stored rows, oldest stocking date first."""
        cursor = self.conn.execute(
            "SELECT stocking_date, location, county, species, size, number_of_fish "
            "FROM trout_stocking_events ORDER BY stocking_date, location"
        )
        columns = [c[0] for c in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]


@dataclass
class SyncResult:
    """Outcome of one sync run."""
    scraped_events: int
    new_records: int
    duplicates: int
    total_records: int
    last_sync: str

    def to_dict(self) -> dict:
        return asdict(self)


class SyncJob:
    """
    Scrape the schedule and store every event not already present.

    Meant to run on a schedule (e.g. daily) over the default scan window.
    """

    def __init__(self, scraper: StockingScraper, store: StockingStore):
        self.scraper = scraper
        self.store = store

    def store_events(self, events: Iterable[StockingEvent]) -> tuple[int, int]:
        """
        Insert events, skipping duplicates.

        Returns:
            (new_records, duplicates)
        """
        new_records = 0
        duplicates = 0
        seen: set[str] = set()

        for event in events:
            if event.content_hash in seen:
                duplicates += 1
                continue
            seen.add(event.content_hash)

            if self.store.insert(event):
                new_records += 1
            else:
                duplicates += 1

        return new_records, duplicates

    async def run(self, date_range: Optional[DateRange] = None) -> SyncResult:
        """
        Run one sync.

        Args:
            date_range: Range to scrape (scraper default range if None)

        Returns:
            SyncResult

        Raises:
            ScrapeError: If the page cannot be fetched
        """
        date_range = date_range or self.scraper.default_range()
        logger.info("sync_started", **date_range.to_dict())

        events = await self.scraper.scrape(date_range)
        if not events:
            logger.warning("sync_no_events", hint="the page layout may have changed")

        new_records, duplicates = self.store_events(events)

        result = SyncResult(
            scraped_events=len(events),
            new_records=new_records,
            duplicates=duplicates,
            total_records=self.store.count(),
            last_sync=to_iso_timestamp(datetime.now(timezone.utc)),
        )

        logger.info("sync_complete", **result.to_dict())

        return result
