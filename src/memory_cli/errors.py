"""
Memory CLI Exception Classes

Every error raised by the core is recoverable at the operation boundary:
the command reports it and nothing is written back to storage.
"""


class MemoryCLIError(Exception):
    """Base exception for memory store operations."""


class EmptyContentError(MemoryCLIError):
    """Raised when there is nothing to store (empty or whitespace content)."""


class EntryNotFoundError(MemoryCLIError):
    """Raised when an id does not resolve to an entry."""

    def __init__(self, entry_id: int):
        super().__init__(f"Entry {entry_id} not found")
        self.entry_id = entry_id


class DecryptionFailedError(MemoryCLIError):
    """Raised on wrong password or corrupt ciphertext (indistinguishable)."""


class InvalidDateTermError(MemoryCLIError):
    """Raised when a date filter term is not recognized."""

    def __init__(self, term: str):
        super().__init__(f"Unrecognized date: {term!r}")
        self.term = term


class InvalidSearchPatternError(MemoryCLIError):
    """Raised when a search pattern does not compile as a regular expression."""


class MalformedVaultBlobError(MemoryCLIError):
    """Raised when a vault record is missing or structurally invalid."""


class InvariantViolationError(MemoryCLIError):
    """Raised when a mutation would break the encrypted-entry rules."""


class PersistenceError(MemoryCLIError):
    """Raised when the storage medium cannot be read or written."""
