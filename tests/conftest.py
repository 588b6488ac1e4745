"""Shared fixtures for stocking scraper tests."""

import httpx
import pytest

from stocking_scraper.core.models import StockingEvent


SCHEDULE_URL = "https://example.com/trout-stocking-schedule/"


def make_table(header, rows, attrs=""):
    """Render a simple HTML table."""
    head = "".join(f"<th>{h}</th>" for h in header)
    body = "".join(
        "<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>"
        for row in rows
    )
    return f"<table{attrs}><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


def make_page(*tables):
    """Wrap tables in a minimal page."""
    return "<html><body><h1>Trout Stocking Schedule</h1>" + "".join(tables) + "</body></html>"


@pytest.fixture
def schedule_html():
    """Two-row schedule where the second row has an unparseable date."""
    return make_page(
        make_table(
            ["Date", "Water Body", "County", "Species"],
            [
                ["June 1, 2024", "Smith Creek", "Bath", "Rainbow Trout"],
                ["not a date", "Jones Lake", "Bath", "Brown"],
            ],
        )
    )


@pytest.fixture
def full_schedule_html():
    """Schedule with every optional column."""
    return make_page(
        make_table(
            ["Date", "Waterbody", "County", "Category", "Species Stocked", "Pounds", "Number of Fish"],
            [
                ["March 4, 2024", "Back Creek", "Highland", "A", "Rainbow/Brown", "1,250 lbs", "2,000"],
                ["March 5, 2024", "Bullpasture River", "Highland", "B", "Rainbow TroutBrook Trout", "300", "n/a"],
                ["March 6, 2024", "Lake Robertson", "Rockbridge", "", "", "", ""],
            ],
        )
    )


@pytest.fixture
def sample_events():
    """Events spanning two water bodies and three dates."""
    return [
        StockingEvent(
            id="smith-creek-2024-03-01t00:00:00.000z-1",
            water_body="Smith Creek",
            county="Bath",
            species="Rainbow Trout",
            date="2024-03-01T00:00:00.000Z",
        ),
        StockingEvent(
            id="jones-lake-2024-04-15t00:00:00.000z-2",
            water_body="Jones Lake",
            county="Bath",
            species="Brown Trout",
            date="2024-04-15T00:00:00.000Z",
            number_of_fish=500,
        ),
        StockingEvent(
            id="smith-creek-2024-05-20t00:00:00.000z-3",
            water_body="Smith Creek",
            county="Bath",
            species="Rainbow Trout + Brook Trout",
            date="2024-05-20T00:00:00.000Z",
            category="B",
        ),
    ]


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class RecordingHandler:
    """
    httpx.MockTransport handler that records requests.

    `responder(request)` returns an httpx.Response or raises an httpx error.
    """

    def __init__(self, responder):
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)
