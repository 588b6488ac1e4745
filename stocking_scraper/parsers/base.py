"""
Base class for table parsing backends.

A backend turns raw HTML into plain tables: every <table> in document
order, each row an ordered tuple of trimmed cell strings. The locator
works only with these values and never sees a parser's object model.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator

import structlog

logger = structlog.get_logger(__name__)


Row = tuple[str, ...]


@dataclass(frozen=True)
class HtmlTable:
    """A table reduced to rows of cell text."""

    index: int  # ordinal of the table within the document
    rows: tuple[Row, ...]

    @property
    def header(self) -> Row:
        """First row, used as the header."""
        return self.rows[0] if self.rows else ()

    @property
    def body(self) -> tuple[Row, ...]:
        """Data rows (everything after the header)."""
        return self.rows[1:]


class TableBackend(ABC):
    """
    Abstract base class for table parsing backends.

    Implementations:
    - SoupTableBackend: DOM parsing with BeautifulSoup + lxml
    - RegexTableBackend: pure regex scanning, no parser dependency
    """

    name: str = ""

    def __init__(self):
        self.logger = logger.bind(backend=self.__class__.__name__)

    @abstractmethod
    def iter_tables(self, html: str) -> Iterator[HtmlTable]:
        """
        Yield every table in the document, in document order.

        Args:
            html: Raw HTML text

        Yields:
            HtmlTable values; tables without rows are still yielded
        """
        pass

    def get_backend_name(self) -> str:
        """Return human-readable backend name."""
        return self.name or self.__class__.__name__
