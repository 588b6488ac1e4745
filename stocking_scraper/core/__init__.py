"""
Core layer - stable foundation for the scraping system.

Components:
- models: StockingEvent, CacheEntry, CacheStatus, DateRange dataclasses
- normalizer: date, species and number normalization
- http_client: Async HTTP client with a browser User-Agent
- cache: TTL cache for scrape results
- events: Range filtering and grouping of scraped events
"""

from .models import StockingEvent, CacheEntry, CacheStatus, DateRange
from .normalizer import (
    parse_date,
    normalize_species,
    parse_species_list,
    format_species,
    extract_number,
    format_date_for_url,
    clean_cell_text,
)
from .cache import CacheManager
from .events import filter_by_range, group_by_water_body

__all__ = [
    "StockingEvent",
    "CacheEntry",
    "CacheStatus",
    "DateRange",
    "parse_date",
    "normalize_species",
    "parse_species_list",
    "format_species",
    "extract_number",
    "format_date_for_url",
    "clean_cell_text",
    "CacheManager",
    "filter_by_range",
    "group_by_water_body",
]
