"""
Date Utilities

This module provides helpers for reading Canvas timestamps and comparing
them against "now" in the date-range filters of the insight accessors.
"""

import logging
from datetime import UTC, datetime, timedelta

# Configure logging
logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24


def utc_now() -> datetime:
    return datetime.now(UTC)


def parse_canvas_datetime(date_string: str | None) -> datetime | None:
    """
    Parse a Canvas ISO-8601 timestamp.

    Args:
        date_string: Timestamp such as "2024-09-15T23:59:59Z", or None

    Returns:
        Timezone-aware datetime (UTC assumed when no offset is given), or
        None if the value is empty or unparseable
    """
    if not date_string:
        return None

    try:
        parsed = datetime.fromisoformat(date_string.replace("Z", "+00:00"))
    except (ValueError, TypeError, AttributeError):
        logger.debug(f"Could not parse Canvas date: {date_string!r}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def is_date_in_range(
    date_string: str | None, start: datetime, end: datetime
) -> bool:
    """
    Check whether a Canvas timestamp falls inside [start, end].

    Returns:
        True if the date parses and lies within the range, False otherwise
    """
    date = parse_canvas_datetime(date_string)
    if date is None:
        return False
    return start <= date <= end


def days_overdue(due_string: str | None, now: datetime | None = None) -> int:
    """Whole days elapsed since a due date; 0 if not yet due or unknown."""
    due = parse_canvas_datetime(due_string)
    if due is None:
        return 0
    now = now or utc_now()
    return max(0, int((now - due).total_seconds() // SECONDS_PER_DAY))


def days_from_now(days: int, now: datetime | None = None) -> datetime:
    return (now or utc_now()) + timedelta(days=days)


def sort_key(date_string: str | None) -> float:
    """Epoch seconds for sorting; missing dates sort first."""
    date = parse_canvas_datetime(date_string)
    return date.timestamp() if date else 0.0
