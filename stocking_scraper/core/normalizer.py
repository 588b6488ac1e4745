"""
Normalization utilities for stocking schedule cell text.

Handles:
- Free-form calendar dates ("June 1, 2024", "6/1/2024", "2024-06-01")
- Trout species names, including cells listing several species
- Counts and weights embedded in text ("1,250 lbs")
"""

import re
from datetime import date, datetime, timezone
from typing import Optional

import structlog
from dateutil import parser as date_parser

logger = structlog.get_logger(__name__)


MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

UNKNOWN_SPECIES = "Unknown"

SPECIES_MAP = {
    "rainbow": "Rainbow Trout",
    "rainbow trout": "Rainbow Trout",
    "brown": "Brown Trout",
    "brown trout": "Brown Trout",
    "brook": "Brook Trout",
    "brook trout": "Brook Trout",
    "golden": "Golden Trout",
    "golden trout": "Golden Trout",
    "tiger": "Tiger Trout",
    "tiger trout": "Tiger Trout",
}

# Longest first so a shorter name never claims part of a longer one
KNOWN_SPECIES = sorted(set(SPECIES_MAP.values()), key=lambda name: (-len(name), name))

SPECIES_DELIMITERS = re.compile(r"[+/,]")
NUMBER_PATTERN = re.compile(r"\d[\d,]*")


def to_iso_timestamp(value: datetime) -> str:
    """
    Format a datetime as an ISO-8601 UTC timestamp with milliseconds.

    Naive values are taken to be UTC already.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def parse_date(text: Optional[str]) -> Optional[str]:
    """
    Parse a calendar date from free text.

    Missing components default to January 1st of the current year.
    Text without any digit is rejected, so a bare month name or a
    word like "TBD" never becomes a date.

    Args:
        text: Raw cell text

    Returns:
        ISO-8601 timestamp string or None if parsing fails
    """
    if not text:
        return None

    cleaned = text.strip()
    if not re.search(r"\d", cleaned):
        return None

    default = datetime(datetime.now().year, 1, 1)
    try:
        # UTC conversion can overflow for aware values at the calendar limits
        return to_iso_timestamp(date_parser.parse(cleaned, default=default))
    except (ValueError, OverflowError) as e:
        logger.debug("invalid_date", text=cleaned, error=str(e))
        return None


def format_date_for_url(value: date) -> str:
    """Format a date the way the schedule search form expects ("January 1, 2015")."""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def normalize_species(species: str) -> str:
    """
    Map a species variant to its canonical name.

    "rainbow", "Rainbow Trout" and "RAINBOW TROUT" all become
    "Rainbow Trout". Unrecognized text is returned unchanged.
    """
    return SPECIES_MAP.get(species.strip().lower(), species)


def _is_unknown(species: str) -> bool:
    return not species or species.lower() == UNKNOWN_SPECIES.lower()


def parse_species_list(text: Optional[str]) -> list[str]:
    """
    Parse a species cell that may name several species.

    Strategies, in order:
    1. Split on "+", "/" or "," when any of them is present
    2. Scan for known canonical names inside concatenated text
       ("Rainbow TroutBrown Trout")
    3. Normalize the whole cell as a single species

    Args:
        text: Raw species cell text

    Returns:
        Deduplicated canonical names in order of appearance;
        empty when nothing (or only "Unknown") was listed
    """
    if not text or not text.strip():
        return []

    cleaned = text.strip()
    parsed: list[str] = []

    if SPECIES_DELIMITERS.search(cleaned):
        for part in SPECIES_DELIMITERS.split(cleaned):
            part = part.strip()
            if not part:
                continue
            name = normalize_species(part)
            if not _is_unknown(name) and name not in parsed:
                parsed.append(name)
        return parsed

    # Matched text is masked rather than cut out so neighbours never fuse
    # into a new name and match positions stay stable.
    remaining = cleaned.lower()
    found: list[tuple[int, str]] = []
    for species in KNOWN_SPECIES:
        needle = species.lower()
        index = remaining.find(needle)
        if index != -1:
            found.append((index, species))
            remaining = remaining[:index] + "\x00" * len(needle) + remaining[index + len(needle):]

    if found:
        return [species for _, species in sorted(found)]

    name = normalize_species(cleaned)
    return [] if _is_unknown(name) else [name]


def format_species(species: list[str]) -> str:
    """Join species for display; "Unknown" when the list is empty."""
    return " + ".join(species) if species else UNKNOWN_SPECIES


def extract_number(text: Optional[str]) -> Optional[int]:
    """
    Extract the first integer from text.

    "1,250 lbs" -> 1250, "no data" -> None.
    """
    if not text:
        return None

    match = NUMBER_PATTERN.search(text)
    if not match:
        return None

    return int(match.group(0).replace(",", ""))


def clean_cell_text(text: Optional[str]) -> str:
    """Collapse whitespace runs (including non-breaking spaces) and trim."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()
