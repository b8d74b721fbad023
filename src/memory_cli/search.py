"""
Search engine: filters entries by text pattern and calendar day.

Pattern semantics are "loose wildcard over regex": every ``*`` becomes
``.*`` and the rest of the pattern is used as a regular expression
verbatim, case-insensitively. ``a.b`` therefore also matches ``axb``.
"""

import re
from datetime import date
from typing import Iterable, List, Optional, Pattern

from .entries import Entry
from .errors import InvalidSearchPatternError

MATCH_ALL = "*"


def compile_pattern(pattern: Optional[str] = MATCH_ALL) -> Pattern:
    """Compile a search pattern into a case-insensitive regex."""
    if pattern is None:
        pattern = MATCH_ALL
    try:
        return re.compile(pattern.replace("*", ".*"), re.IGNORECASE)
    except re.error as e:
        raise InvalidSearchPatternError(f"Invalid search pattern {pattern!r}: {e}")


def matches_text(entry: Entry, regex: Pattern) -> bool:
    """True if the regex matches the content or any tag.

    Encrypted entries only expose their placeholder content here.
    """
    if regex.search(entry.content):
        return True
    return any(regex.search(tag) for tag in entry.tags)


def matches_day(entry: Entry, day: Optional[date]) -> bool:
    if day is None:
        return True
    return entry.day == day


def search(
    entries: Iterable[Entry],
    pattern: Optional[str] = MATCH_ALL,
    day: Optional[date] = None,
) -> List[Entry]:
    """
    Filter entries, preserving input order.

    Args:
        entries: Entries to filter
        pattern: Wildcard/regex pattern (default matches everything)
        day: Optional calendar day the entry must have been created on

    Returns:
        Matching entries (possibly empty)
    """
    regex = compile_pattern(pattern)
    return [
        entry for entry in entries
        if matches_text(entry, regex) and matches_day(entry, day)
    ]
