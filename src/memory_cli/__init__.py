# Memory CLI - Main Package
#
# Personal command-line memory: short snippets, notes and secrets with
# tags and timestamps, found again by wildcard/regex search and date.
# Secret entries are encrypted per entry; ciphertext lives in a separate
# vault file, the entry list only keeps a placeholder.

__version__ = "1.0.0"
__author__ = "Memory CLI Team"
__description__ = "Personal command-line memory with encrypted entries"

from .entries import ENCRYPTED_PLACEHOLDER, Entry, EntryStore
from .errors import (
    DecryptionFailedError,
    EmptyContentError,
    EntryNotFoundError,
    InvalidDateTermError,
    InvalidSearchPatternError,
    InvariantViolationError,
    MalformedVaultBlobError,
    MemoryCLIError,
    PersistenceError,
)
from .search import search
from .service import MemoryService, Retrieved
from .state import MemoryState
from .storage import JsonStorage
from .vault import EncryptionService, SecretVault

__all__ = [
    "__version__",
    # Data model
    "Entry",
    "EntryStore",
    "SecretVault",
    "MemoryState",
    "ENCRYPTED_PLACEHOLDER",
    # Operations
    "EncryptionService",
    "MemoryService",
    "Retrieved",
    "JsonStorage",
    "search",
    # Errors
    "MemoryCLIError",
    "EmptyContentError",
    "EntryNotFoundError",
    "DecryptionFailedError",
    "InvalidDateTermError",
    "InvalidSearchPatternError",
    "MalformedVaultBlobError",
    "InvariantViolationError",
    "PersistenceError",
]
