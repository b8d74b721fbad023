"""Loaded collections passed explicitly into every operation."""

from dataclasses import dataclass, field

from .entries import EntryStore
from .vault import SecretVault


@dataclass
class MemoryState:
    """Entry Store + Secret Vault, always loaded and saved together."""
    entries: EntryStore = field(default_factory=EntryStore)
    vault: SecretVault = field(default_factory=SecretVault)
