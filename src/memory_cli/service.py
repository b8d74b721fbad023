# Memory CLI - Memory Service
#
# Operation surface of the store: add, find, get, edit, tags, delete.
# Works on an already-loaded MemoryState and never touches the disk; the
# caller saves the state afterwards (both collections together).
#
# Entry/Vault consistency:
# - add: encrypt first, vault record next, then the entry (placeholder)
# - get/edit: decrypt with a freshly requested password; any failure
#   aborts before anything is mutated
# - delete: entry and vault record go together; a missing record is fine

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from .core import EventSeverity, EventType, get_audit_logger
from .dates import parse_date_term
from .entries import ENCRYPTED_PLACEHOLDER, Entry, clean_tags, parse_tags
from .errors import (
    DecryptionFailedError,
    EmptyContentError,
    InvalidDateTermError,
    InvariantViolationError,
    MalformedVaultBlobError,
)
from .providers import EditPrompt, PasswordPrompt, PasswordProvider
from .search import MATCH_ALL, search
from .state import MemoryState
from .vault import EncryptionService

logger = logging.getLogger(__name__)

TagsInput = Union[str, Iterable[str], None]


@dataclass
class Retrieved:
    """Result of get(): the entry and its readable content."""
    entry: Entry
    content: str


class MemoryService:
    """
    Operations on a loaded MemoryState.

    Args:
        state: Loaded Entry Store + Secret Vault (mutated in place)
        passwords: Asked for a password whenever encryption or decryption
            is needed, right before the crypto call
    """

    def __init__(self, state: MemoryState, passwords: PasswordProvider):
        self.state = state
        self.passwords = passwords
        self.audit = get_audit_logger()

    @property
    def entries(self):
        return self.state.entries

    @property
    def vault(self):
        return self.state.vault

    # ── Operations ──────────────────────────────────────────────────

    def add(self, content: str, tags: TagsInput = None, encrypt: bool = False) -> Entry:
        """
        Store a new entry.

        Raises:
            EmptyContentError: Content is empty after trimming
        """
        text = (content or "").strip()
        if not text:
            raise EmptyContentError("Nothing to store: content is empty")
        tag_list = _to_tags(tags)

        entry_id = self.entries.next_id()
        if not encrypt and entry_id in self.vault:
            # Orphan left behind by an older, inconsistent save
            logger.warning(f"Dropping orphaned vault record {entry_id}")
            self.vault.remove(entry_id)

        if encrypt:
            password = self.passwords.request(PasswordPrompt.SET)
            blob = EncryptionService.encrypt(text, password)
            self.vault.put(entry_id, blob)
            try:
                entry = self.entries.add(ENCRYPTED_PLACEHOLDER, tag_list, encrypted=True)
            except Exception:
                self.vault.remove(entry_id)
                raise
        else:
            entry = self.entries.add(text, tag_list)

        self._check_consistency(entry)
        self.audit.log_entry_event(
            EventType.ENTRY_ADDED, entry.id, "added",
            details={"encrypted": entry.encrypted, "tag_count": len(entry.tags)}
        )
        return entry

    def find(self, pattern: Optional[str] = MATCH_ALL, date_term: Optional[str] = None) -> List[Entry]:
        """
        Search entries by wildcard/regex pattern and optional date term.

        Raises:
            InvalidDateTermError: date_term given but not recognized
            InvalidSearchPatternError: pattern is not a valid expression
        """
        day = None
        if date_term:
            day = parse_date_term(date_term)
            if day is None:
                raise InvalidDateTermError(date_term)

        results = search(self.entries, pattern, day)
        self.audit.log_event(
            event_type=EventType.ENTRY_SEARCHED,
            severity=EventSeverity.INFO,
            message=f"Search returned {len(results)} entries",
            details={"date_filter": day.isoformat() if day else None, "results": len(results)}
        )
        return results

    def get(self, entry_id: int) -> Retrieved:
        """
        Read an entry, decrypting it if needed, and count the use.

        The usage counter only moves after a successful decryption.
        """
        entry = self.entries.require(entry_id)
        content = entry.content
        if entry.encrypted:
            content = self._unlock(entry, PasswordPrompt.ENTER)

        self.entries.touch(entry_id)
        self.audit.log_entry_event(
            EventType.ENTRY_ACCESSED, entry_id, "accessed",
            details={"encrypted": entry.encrypted, "usage_count": entry.usage_count}
        )
        return Retrieved(entry=entry, content=content)

    def edit(self, entry_id: int, prompt: EditPrompt) -> Entry:
        """
        Replace the content and tags of an entry.

        Encrypted entries are unlocked first, and the new content is
        encrypted under a newly requested password. Nothing changes unless
        every step succeeds.
        """
        entry = self.entries.require(entry_id)
        current = entry.content
        if entry.encrypted:
            current = self._unlock(entry, PasswordPrompt.EDIT)

        result = prompt.request(current, list(entry.tags))
        new_content = (result.content or "").strip()
        if not new_content:
            raise EmptyContentError("Nothing to store: content is empty")
        new_tags = parse_tags(result.tags_text)

        if entry.encrypted:
            password = self.passwords.request(PasswordPrompt.REENCRYPT)
            blob = EncryptionService.encrypt(new_content, password)
            self.entries.update_content_and_tags(entry_id, None, new_tags)
            self.vault.put(entry_id, blob)
        else:
            self.entries.update_content_and_tags(entry_id, new_content, new_tags)

        self._check_consistency(entry)
        self.audit.log_entry_event(
            EventType.ENTRY_EDITED, entry_id, "edited",
            details={"encrypted": entry.encrypted, "tag_count": len(new_tags)}
        )
        return entry

    def tags(self) -> Dict[str, int]:
        """Tag frequencies across all entries, most frequent first."""
        return self.entries.all_tags()

    def delete(self, entry_id: int) -> bool:
        """
        Remove an entry and its vault record.

        Returns:
            True if an entry was removed
        """
        removed = self.entries.remove(entry_id)
        had_secret = self.vault.remove(entry_id)

        if removed or had_secret:
            self.audit.log_entry_event(
                EventType.ENTRY_DELETED, entry_id, "deleted",
                details={"had_secret": had_secret}
            )
        return removed

    # ── Helpers ─────────────────────────────────────────────────────

    def _unlock(self, entry: Entry, prompt: PasswordPrompt) -> str:
        blob = self.vault.get(entry.id)
        if not EncryptionService.is_well_formed(blob):
            self.audit.log_entry_event(
                EventType.VAULT_RECORD_MALFORMED, entry.id, "vault record missing or malformed",
                severity=EventSeverity.WARNING
            )
            raise MalformedVaultBlobError(f"Vault record for entry {entry.id} is missing or malformed")

        password = self.passwords.request(prompt)
        plaintext = EncryptionService.decrypt(blob, password)
        if plaintext is None:
            self.audit.log_entry_event(
                EventType.VAULT_DECRYPT_FAILED, entry.id, "decryption failed",
                severity=EventSeverity.WARNING
            )
            raise DecryptionFailedError("Wrong password or corrupt data")
        return plaintext

    def _check_consistency(self, entry: Entry) -> None:
        if entry.encrypted != (entry.id in self.vault):
            raise InvariantViolationError(
                f"Entry {entry.id} encrypted={entry.encrypted} but vault record "
                f"{'present' if entry.id in self.vault else 'absent'}"
            )


def _to_tags(tags: TagsInput) -> List[str]:
    if tags is None:
        return []
    if isinstance(tags, str):
        return parse_tags(tags)
    return clean_tags(tags)
