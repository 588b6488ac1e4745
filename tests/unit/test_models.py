"""Tests for data models."""

from datetime import date

from stocking_scraper.core.models import StockingEvent, CacheStatus, DateRange


def make_event(**overrides):
    data = dict(
        id="smith-creek-2024-06-01t00:00:00.000z-1",
        water_body="Smith Creek",
        county="Bath",
        species="Rainbow Trout",
        date="2024-06-01T00:00:00.000Z",
    )
    data.update(overrides)
    return StockingEvent(**data)


class TestStockingEvent:
    """Tests for StockingEvent serialization and identity."""

    def test_to_dict_omits_absent_fields(self):
        """Test only present fields are rendered."""
        assert make_event().to_dict() == {
            "id": "smith-creek-2024-06-01t00:00:00.000z-1",
            "waterBody": "Smith Creek",
            "county": "Bath",
            "species": "Rainbow Trout",
            "date": "2024-06-01T00:00:00.000Z",
        }

    def test_to_dict_includes_optional_fields(self):
        """Test optional fields use camelCase keys."""
        data = make_event(pounds=1250, number_of_fish=2000, category="A").to_dict()

        assert data["pounds"] == 1250
        assert data["numberOfFish"] == 2000
        assert data["category"] == "A"

    def test_zero_is_kept(self):
        """Test a zero count is not mistaken for an absent one."""
        assert make_event(number_of_fish=0).to_dict()["numberOfFish"] == 0

    def test_stocking_date(self):
        """Test the calendar date part of the timestamp."""
        assert make_event().stocking_date == "2024-06-01"

    def test_to_record(self):
        """Test the store row shape."""
        record = make_event(category="B", number_of_fish=500).to_record()

        assert record == {
            "stocking_date": "2024-06-01",
            "location": "Smith Creek",
            "county": "Bath",
            "species": "Rainbow Trout",
            "size": "B",
            "number_of_fish": 500,
        }

    def test_content_hash_ignores_row_position(self):
        """Test the same stocking seen in different rows hashes the same."""
        first = make_event(id="smith-creek-2024-06-01t00:00:00.000z-1")
        second = make_event(id="smith-creek-2024-06-01t00:00:00.000z-9", water_body=" smith creek ")

        assert first.content_hash == second.content_hash

    def test_content_hash_differs_by_species(self):
        """Test species is part of the hash."""
        assert make_event().content_hash != make_event(species="Brown Trout").content_hash

    def test_content_hash_differs_by_day(self):
        """Test the stocking day is part of the hash."""
        other = make_event(date="2024-06-02T00:00:00.000Z")
        assert make_event().content_hash != other.content_hash


class TestCacheStatus:
    """Tests for CacheStatus.to_dict."""

    def test_not_cached(self):
        """Test a miss renders only isCached."""
        assert CacheStatus(is_cached=False).to_dict() == {"isCached": False}

    def test_cached(self):
        """Test a hit renders every field."""
        status = CacheStatus(
            is_cached=True,
            last_updated="2024-06-01T00:00:00.000Z",
            expires_at="2024-06-01T01:00:00.000Z",
            age=12.5,
        )

        assert status.to_dict() == {
            "isCached": True,
            "lastUpdated": "2024-06-01T00:00:00.000Z",
            "expiresAt": "2024-06-01T01:00:00.000Z",
            "age": 12.5,
        }


class TestDateRange:
    """Tests for DateRange rendering."""

    def test_query_params(self):
        """Test search form parameters use long month names."""
        date_range = DateRange(start=date(2015, 1, 1), end=date(2025, 6, 30))

        assert date_range.to_query_params() == {
            "start_date": "January 1, 2015",
            "end_date": "June 30, 2025",
        }

    def test_to_dict(self):
        """Test ISO rendering of both bounds."""
        date_range = DateRange(start=date(2024, 3, 1), end=date(2024, 3, 31))
        assert date_range.to_dict() == {"start": "2024-03-01", "end": "2024-03-31"}
