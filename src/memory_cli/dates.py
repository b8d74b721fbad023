"""
Date parsing for search filters.

Turns a user-supplied term into a calendar day:
- localized "today" / "yesterday" words (case-insensitive)
- fixed formats, tried in order: YYYY-MM-DD, then DD.MM.YYYY

Also holds the timestamp helpers used by entries, so that "creation
instant" and "calendar day" are computed in exactly one place.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

TODAY_TERMS = ("today", "heute", "oggi", "hoy", "aujourd'hui")
YESTERDAY_TERMS = ("yesterday", "gestern", "ieri", "ayer", "hier")

DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y")


def local_today() -> date:
    """Current calendar day in the local timezone."""
    return datetime.now().astimezone().date()


def parse_date_term(term: str, today: Optional[Callable[[], date]] = None) -> Optional[date]:
    """
    Normalize a date filter term into a calendar day.

    Args:
        term: "today", "gestern", "2026-02-10", "10.02.2026", ...
        today: Clock override (returns the current local day)

    Returns:
        The calendar day, or None if the term is not recognized.
    """
    if term is None:
        return None

    text = term.strip()
    lowered = text.lower()
    current_day = (today or local_today)()

    if lowered in TODAY_TERMS:
        return current_day
    if lowered in YESTERDAY_TERMS:
        return current_day - timedelta(days=1)

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def utc_now_iso() -> str:
    """Creation instant as ISO-8601 UTC with millisecond precision ("...Z")."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def timestamp_to_local(timestamp: str) -> datetime:
    """Parse a stored ISO-8601 timestamp into a local-timezone datetime.

    Naive timestamps (no offset) are taken as local time already.
    """
    parsed = datetime.fromisoformat(timestamp)
    if parsed.tzinfo is None:
        return parsed
    return parsed.astimezone()


def timestamp_to_local_day(timestamp: str) -> date:
    """Local calendar day of a stored timestamp."""
    return timestamp_to_local(timestamp).date()
