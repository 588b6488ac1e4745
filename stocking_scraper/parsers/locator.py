"""
Table locator, column mapper and row extractor.

The schedule page's markup is not a stable contract, so the locator
scores header text by keyword instead of relying on fixed positions,
and takes the first table that yields at least one event.
"""

import re
from dataclasses import dataclass, fields
from typing import Iterator, Optional

import structlog

from stocking_scraper.core.models import StockingEvent
from stocking_scraper.core.normalizer import (
    parse_date,
    parse_species_list,
    format_species,
    extract_number,
)

from .base import HtmlTable, Row, TableBackend

logger = structlog.get_logger(__name__)


UNKNOWN_COUNTY = "Unknown"

# Resolution order matters: a column is not offered to a later field whose
# only matches lie inside an earlier field's keyword there ("county" contains
# "count", "location" contains "cat").
COLUMN_KEYWORDS = {
    "date": ("date", "when"),
    "water_body": ("water", "location", "stream", "lake", "waterbody"),
    "county": ("county",),
    "species": ("species", "fish", "stocked"),
    "category": ("category", "cat"),
    "pounds": ("pound", "lbs", "weight"),
    "number_of_fish": ("number", "count", "qty"),
}


@dataclass
class ColumnMapping:
    """Column index for each logical field; None when the table lacks it."""

    date: Optional[int] = None
    water_body: Optional[int] = None
    county: Optional[int] = None
    species: Optional[int] = None
    category: Optional[int] = None
    pounds: Optional[int] = None
    number_of_fish: Optional[int] = None

    @property
    def is_viable(self) -> bool:
        """A table needs at least a date and a water body column."""
        return self.date is not None and self.water_body is not None

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def map_columns(header: Row) -> ColumnMapping:
    """
    Resolve logical fields to columns by header keywords.

    Args:
        header: Header row cell texts

    Returns:
        ColumnMapping (fields without a matching header are None)
    """
    header_texts = [text.strip().lower() for text in header]
    mapping = ColumnMapping()
    claimed: dict[int, list[str]] = {}

    for field_name, keywords in COLUMN_KEYWORDS.items():
        for index, text in enumerate(header_texts):
            hits = [keyword for keyword in keywords if keyword in text]
            if not hits:
                continue
            taken = claimed.get(index)
            if taken and all(any(hit in other for other in taken) for hit in hits):
                continue
            setattr(mapping, field_name, index)
            claimed.setdefault(index, []).extend(hits)
            break

    return mapping


def _cell(cells: Row, index: Optional[int]) -> str:
    if index is None or index >= len(cells):
        return ""
    return cells[index]


def make_event_id(water_body: str, date: str, row_index: int) -> str:
    """Lower-cased "<water body>-<date>-<row>" with whitespace runs as hyphens."""
    return re.sub(r"\s+", "-", f"{water_body}-{date}-{row_index}").lower()


def build_event(cells: Row, mapping: ColumnMapping, row_index: int) -> Optional[StockingEvent]:
    """
    Build one event from a data row.

    Args:
        cells: Row cell texts
        mapping: Column mapping for the table
        row_index: Ordinal of the row within the table (header is 0)

    Returns:
        StockingEvent, or None when the water body or date is missing
        or the date does not parse
    """
    date_text = _cell(cells, mapping.date)
    water_body = _cell(cells, mapping.water_body)

    if not date_text or not water_body:
        return None

    date = parse_date(date_text)
    if not date:
        return None

    event = StockingEvent(
        id=make_event_id(water_body, date, row_index),
        water_body=water_body,
        county=_cell(cells, mapping.county) or UNKNOWN_COUNTY,
        species=format_species(parse_species_list(_cell(cells, mapping.species))),
        date=date,
    )

    if mapping.pounds is not None:
        event.pounds = extract_number(_cell(cells, mapping.pounds))
    if mapping.number_of_fish is not None:
        event.number_of_fish = extract_number(_cell(cells, mapping.number_of_fish))
    if mapping.category is not None:
        event.category = _cell(cells, mapping.category) or None

    return event


def extract_events(table: HtmlTable, mapping: ColumnMapping) -> Iterator[StockingEvent]:
    """
    Lazily yield events from the data rows of a table.

    Invalid rows are skipped; an unexpected error in one row never stops
    the rest of the table. Call again to restart from the first row.
    """
    for row_index, cells in enumerate(table.rows):
        if row_index == 0 or not cells:
            continue

        try:
            event = build_event(cells, mapping, row_index)
        except Exception as e:
            logger.warning(
                "row_failed",
                table=table.index,
                row=row_index,
                error=str(e),
            )
            continue

        if event is None:
            logger.debug("row_skipped", table=table.index, row=row_index, cells=list(cells))
            continue

        yield event


def locate_events(html: str, backend: TableBackend) -> list[StockingEvent]:
    """
    Find the stocking table in a document and extract its events.

    Tables are tried in document order. A table is a candidate when its
    header has both a date and a water body column; the first candidate
    that yields at least one event wins and later tables are ignored.

    Args:
        html: Raw HTML text
        backend: Table parsing backend

    Returns:
        Events in row order; empty when no table qualifies
    """
    tables_seen = 0

    for table in backend.iter_tables(html):
        tables_seen += 1
        mapping = map_columns(table.header)

        if not mapping.is_viable:
            logger.debug("table_not_candidate", table=table.index, header=list(table.header))
            continue

        events = list(extract_events(table, mapping))

        if events:
            logger.info(
                "table_selected",
                table=table.index,
                header=list(table.header),
                columns=mapping.to_dict(),
                events=len(events),
            )
            return events

        logger.debug("table_without_events", table=table.index)

    if tables_seen == 0:
        logger.warning("no_tables_found", backend=backend.get_backend_name())
    else:
        logger.warning("no_stocking_events_found", tables=tables_seen)

    return []
