"""
DOM table backend built on BeautifulSoup with the lxml parser.
"""

from typing import Iterator

from bs4 import BeautifulSoup, Tag

from stocking_scraper.core.normalizer import clean_cell_text

from .base import HtmlTable, Row, TableBackend


CELL_TAGS = ["th", "td"]


def cell_text(cell: Tag) -> str:
    """Visible text of a cell with markup stripped."""
    return clean_cell_text(cell.get_text(" ", strip=True))


class SoupTableBackend(TableBackend):
    """Parse tables from a BeautifulSoup document tree."""

    name = "soup"

    def __init__(self, features: str = "lxml"):
        """
        Initialize backend.

        Args:
            features: BeautifulSoup tree builder
        """
        super().__init__()
        self.features = features

    def iter_tables(self, html: str) -> Iterator[HtmlTable]:
        soup = BeautifulSoup(html, self.features)

        for elem in soup.find_all(["script", "style"]):
            elem.decompose()

        for index, table in enumerate(soup.find_all("table")):
            rows: list[Row] = []
            for tr in table.find_all("tr"):
                cells = tr.find_all(CELL_TAGS, recursive=False)
                rows.append(tuple(cell_text(cell) for cell in cells))

            self.logger.debug("table_parsed", index=index, rows=len(rows))
            yield HtmlTable(index=index, rows=tuple(rows))
