"""Tests for the search engine: loose wildcard-over-regex patterns and day filters."""

from datetime import date, datetime, timedelta

import pytest

from memory_cli.entries import ENCRYPTED_PLACEHOLDER, Entry, EntryStore
from memory_cli.errors import InvalidSearchPatternError
from memory_cli.search import compile_pattern, search


def _entry(entry_id, content, tags=None, timestamp="2026-02-10T12:00:00", encrypted=False):
    return Entry(id=entry_id, content=content, tags=tags or [], timestamp=timestamp, encrypted=encrypted)


@pytest.fixture
def entries():
    return [
        _entry(100, "React hook", ["frontend"]),
        _entry(101, "React useEffect", ["frontend", "hooks"]),
        _entry(102, "JavaScript closures", ["js"]),
        _entry(103, "docker system prune -af", ["docker", "cleanup"], timestamp="2026-02-11T08:30:00"),
        _entry(104, ENCRYPTED_PLACEHOLDER, ["aws"], encrypted=True),
    ]


class TestTextMatching:

    def test_star_returns_everything_in_order(self, entries):
        assert search(entries, "*") == entries

    def test_default_pattern_matches_all(self, entries):
        assert search(entries) == entries
        assert search(entries, None) == entries

    def test_literal_is_case_insensitive_substring(self, entries):
        assert [e.id for e in search(entries, "react")] == [100, 101]

    def test_wildcard(self, entries):
        ids = [e.id for e in search(entries, "Rea*")]
        assert 101 in ids
        assert 102 not in ids

    def test_matches_tags(self, entries):
        assert [e.id for e in search(entries, "cleanup")] == [103]

    def test_tag_and_content_match_counted_once(self, entries):
        assert [e.id for e in search(entries, "hook")] == [100, 101]

    def test_regex_metacharacters_are_live(self, entries):
        assert [e.id for e in search(entries, "^java")] == [102]
        assert [e.id for e in search(entries, "use(Effect|State)")] == [101]

    def test_dot_is_any_character(self):
        entries = [_entry(1, "a.b"), _entry(2, "axb"), _entry(3, "ab")]
        assert [e.id for e in search(entries, "a.b")] == [1, 2]

    def test_encrypted_content_only_exposes_placeholder(self, entries):
        assert [e.id for e in search(entries, "ENCRYPTED")] == [104]
        assert [e.id for e in search(entries, "aws")] == [104]

    def test_no_match_is_empty_list(self, entries):
        assert search(entries, "kubernetes") == []

    def test_invalid_regex_raises(self, entries):
        with pytest.raises(InvalidSearchPatternError):
            search(entries, "react(")

    def test_compile_replaces_every_star(self):
        assert compile_pattern("a*b*").pattern == "a.*b.*"

    def test_accepts_entry_store(self):
        store = EntryStore()
        store.add("React hook")
        assert [e.content for e in search(store, "react")] == ["React hook"]


class TestDayFilter:

    def test_exact_day(self, entries):
        assert [e.id for e in search(entries, "*", date(2026, 2, 11))] == [103]

    def test_day_and_text_both_required(self, entries):
        assert search(entries, "react", date(2026, 2, 11)) == []
        assert [e.id for e in search(entries, "react", date(2026, 2, 10))] == [100, 101]

    def test_day_without_entries(self, entries):
        assert search(entries, "*", date(2030, 1, 1)) == []

    def test_utc_timestamp_compared_in_local_time(self):
        now = datetime.now().astimezone()
        stamp = now.isoformat()
        entries = [_entry(1, "now", timestamp=stamp)]
        assert search(entries, "*", now.date()) == entries
        assert search(entries, "*", now.date() - timedelta(days=1)) == []
