"""
Stocking Scraper - trout stocking schedule extraction.

Architecture:
- core/: Stable foundation (models, normalizers, HTTP client, cache)
- parsers/: Table backends and the table locator / row extractor
- config/: YAML-driven settings
- orchestrator: Fetch + parse of the schedule page
- service: Cached access for API callers
- sync: Storing scraped events in SQLite
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
