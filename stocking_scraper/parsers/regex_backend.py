"""
Regex table backend for environments without a DOM parser.

Scans <table>, <tr> and <th>/<td> elements with non-greedy patterns.
Expects explicitly closed rows and cells; nested tables are cut at the
first closing </table>.
"""

import html as html_lib
import re
from typing import Iterator

from stocking_scraper.core.normalizer import clean_cell_text

from .base import HtmlTable, TableBackend


FLAGS = re.IGNORECASE | re.DOTALL

NOISE_PATTERN = re.compile(r"<!--.*?-->|<script\b.*?</script\s*>|<style\b.*?</style\s*>", FLAGS)
TABLE_PATTERN = re.compile(r"<table\b[^>]*>(.*?)</table\s*>", FLAGS)
ROW_PATTERN = re.compile(r"<tr\b[^>]*>(.*?)</tr\s*>", FLAGS)
CELL_PATTERN = re.compile(r"<t([hd])\b[^>]*>(.*?)</t\1\s*>", FLAGS)
TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_markup(fragment: str) -> str:
    """Remove tags, decode entities and collapse whitespace."""
    text = TAG_PATTERN.sub(" ", fragment)
    return clean_cell_text(html_lib.unescape(text))


class RegexTableBackend(TableBackend):
    """Parse tables with regular expressions only."""

    name = "regex"

    def iter_tables(self, html: str) -> Iterator[HtmlTable]:
        html = NOISE_PATTERN.sub("", html)

        for index, table_match in enumerate(TABLE_PATTERN.finditer(html)):
            rows = tuple(
                tuple(strip_markup(cell.group(2)) for cell in CELL_PATTERN.finditer(row.group(1)))
                for row in ROW_PATTERN.finditer(table_match.group(1))
            )

            self.logger.debug("table_parsed", index=index, rows=len(rows))
            yield HtmlTable(index=index, rows=rows)
