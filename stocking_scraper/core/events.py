"""
Helpers over scraped event lists.
"""

from typing import Iterable, Optional

from .models import StockingEvent


def filter_by_range(
    events: Iterable[StockingEvent],
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> list[StockingEvent]:
    """
    Keep events whose date lies within [start, end].

    Bounds are compared lexically against the ISO date strings, which
    sort in chronological order. Omitted bounds are open.

    Args:
        events: Events to filter
        start: Inclusive lower bound (ISO string)
        end: Inclusive upper bound (ISO string)

    Returns:
        Matching events in input order
    """
    result = []
    for event in events:
        if start and event.date < start:
            continue
        if end and event.date > end:
            continue
        result.append(event)
    return result


def group_by_water_body(events: Iterable[StockingEvent]) -> dict[str, list[StockingEvent]]:
    """Group events by water body, preserving first-seen order."""
    groups: dict[str, list[StockingEvent]] = {}
    for event in events:
        groups.setdefault(event.water_body, []).append(event)
    return groups
