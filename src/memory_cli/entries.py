# Memory CLI - Entry Store
#
# In-memory collection of Entry records, persisted as a flat list.
# Owns id assignment, CRUD and usage counters.
#
# Encrypted entries keep only ENCRYPTED_PLACEHOLDER as content; the real
# content lives in the SecretVault under the same id.

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .dates import timestamp_to_local_day, utc_now_iso
from .errors import EntryNotFoundError, InvariantViolationError

logger = logging.getLogger(__name__)

ENCRYPTED_PLACEHOLDER = "*** ENCRYPTED ***"
FIRST_ID = 100


def parse_tags(text: Optional[str]) -> List[str]:
    """Split comma-separated tag text into trimmed, non-empty tags."""
    if not text:
        return []
    return clean_tags(text.split(","))


def clean_tags(tags: Iterable[str]) -> List[str]:
    """Trim tags and drop empty ones, keeping order and duplicates."""
    return [tag.strip() for tag in tags if tag and tag.strip()]


@dataclass
class Entry:
    """A stored note/snippet with its metadata."""
    id: int
    content: str
    tags: List[str] = field(default_factory=list)
    timestamp: str = field(default_factory=utc_now_iso)
    encrypted: bool = False
    usage_count: int = 0

    @property
    def day(self):
        """Local calendar day of creation."""
        return timestamp_to_local_day(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        # camelCase keys: on-disk format shared with existing db.json files
        return {
            "id": self.id,
            "content": self.content,
            "tags": list(self.tags),
            "timestamp": self.timestamp,
            "encrypted": self.encrypted,
            "usageCount": self.usage_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        tags = data.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            raise ValueError(f"Entry {data.get('id')}: tags must be a list of strings")
        return cls(
            id=int(data["id"]),
            content=data.get("content", ""),
            tags=list(tags),
            timestamp=data["timestamp"],
            encrypted=bool(data.get("encrypted", False)),
            usage_count=int(data.get("usageCount") or 0),
        )


class EntryStore:
    """
    Ordered collection of entries.

    Ids: 100 for an empty store, otherwise max(existing ids) + 1, recomputed
    on every call. Deleting the current maximum frees that id again.
    """

    def __init__(self, entries: Optional[Iterable[Entry]] = None):
        self._entries: List[Entry] = list(entries or [])

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[Entry]:
        """Snapshot of the entries in insertion order."""
        return list(self._entries)

    def next_id(self) -> int:
        if not self._entries:
            return FIRST_ID
        return max(entry.id for entry in self._entries) + 1

    def add(
        self,
        content: str,
        tags: Optional[Iterable[str]] = None,
        encrypted: bool = False,
        timestamp: Optional[str] = None,
    ) -> Entry:
        """
        Create and append a new entry.

        For encrypted entries the caller has already put the ciphertext in
        the vault and passes ENCRYPTED_PLACEHOLDER as content.
        """
        entry = Entry(
            id=self.next_id(),
            content=content,
            tags=clean_tags(tags or []),
            timestamp=timestamp or utc_now_iso(),
            encrypted=encrypted,
            usage_count=0,
        )
        self._check_entry(entry)
        self._entries.append(entry)
        logger.debug(f"Added entry {entry.id} (encrypted={encrypted})")
        return entry

    def find(self, entry_id: int) -> Optional[Entry]:
        """Exact id lookup; None if absent."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def require(self, entry_id: int) -> Entry:
        """Like find(), but raises EntryNotFoundError when absent."""
        entry = self.find(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def touch(self, entry_id: int) -> Entry:
        """Increment the usage counter of an entry."""
        entry = self.require(entry_id)
        entry.usage_count += 1
        return entry

    def update_content_and_tags(
        self,
        entry_id: int,
        new_content: Optional[str],
        new_tags: Iterable[str],
    ) -> Entry:
        """
        Replace content and tags of an entry.

        Tags are replaced wholesale. For encrypted entries the new content
        goes to the vault instead, so new_content must be None here.
        """
        entry = self.require(entry_id)

        if entry.encrypted and new_content is not None:
            raise InvariantViolationError(
                f"Entry {entry_id} is encrypted; its content lives in the vault"
            )

        if new_content is not None:
            entry.content = new_content
        entry.tags = clean_tags(new_tags)
        self._check_entry(entry)
        return entry

    def remove(self, entry_id: int) -> bool:
        """Delete an entry. Returns True if it existed."""
        before = len(self._entries)
        self._entries = [entry for entry in self._entries if entry.id != entry_id]
        return len(self._entries) != before

    def all_tags(self) -> Dict[str, int]:
        """
        Tag frequencies, most frequent first.

        A tag repeated within one entry counts once per occurrence. Ties keep
        first-encounter order.
        """
        counts = Counter(tag for entry in self._entries for tag in entry.tags)
        ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return dict(ordered)

    def to_list(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_list(cls, data: Iterable[Dict[str, Any]]) -> "EntryStore":
        return cls(Entry.from_dict(item) for item in data)

    @staticmethod
    def _check_entry(entry: Entry) -> None:
        if entry.encrypted and entry.content != ENCRYPTED_PLACEHOLDER:
            raise InvariantViolationError(
                f"Encrypted entry {entry.id} must not hold plaintext content"
            )
