"""
Parsing layer for the stocking schedule page.

Backends reduce HTML to plain tables; the locator picks the stocking
table, maps its columns and builds events.

Backends:
- SoupTableBackend: BeautifulSoup + lxml DOM parsing
- RegexTableBackend: regex scanning for parser-less environments
"""

from .base import HtmlTable, TableBackend
from .soup_backend import SoupTableBackend
from .regex_backend import RegexTableBackend
from .locator import (
    ColumnMapping,
    map_columns,
    build_event,
    extract_events,
    locate_events,
)

# Backend registry
BACKENDS = {
    SoupTableBackend.name: SoupTableBackend,
    RegexTableBackend.name: RegexTableBackend,
}


def get_backend(name: str) -> TableBackend:
    """
    Create a backend by registry name.

    Raises:
        ValueError: If the name is not registered
    """
    try:
        return BACKENDS[name]()
    except KeyError:
        raise ValueError(f"Unknown table backend: {name!r} (expected one of {sorted(BACKENDS)})") from None


__all__ = [
    "HtmlTable",
    "TableBackend",
    "SoupTableBackend",
    "RegexTableBackend",
    "BACKENDS",
    "get_backend",
    "ColumnMapping",
    "map_columns",
    "build_event",
    "extract_events",
    "locate_events",
]
