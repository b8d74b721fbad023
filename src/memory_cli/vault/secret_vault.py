# Memory CLI - Secret Vault
#
# In-memory mapping entry id -> ciphertext blob, persisted separately
# from the entry list (vault.json). One record per encrypted entry.

from typing import Dict, Iterator, Optional, Tuple


class SecretVault:
    """
    Ciphertext records keyed by entry id.

    Keys are ints in memory. On disk they are strings (JSON object keys),
    so ``from_dict``/``to_dict`` convert at the boundary.
    """

    def __init__(self, secrets: Optional[Dict[int, str]] = None):
        self._secrets: Dict[int, str] = dict(secrets or {})

    def get(self, entry_id: int) -> Optional[str]:
        """Return the ciphertext blob for an entry, or None."""
        return self._secrets.get(entry_id)

    def put(self, entry_id: int, blob: str) -> None:
        """Store (or replace) the ciphertext blob for an entry."""
        self._secrets[entry_id] = blob

    def remove(self, entry_id: int) -> bool:
        """Delete a record. Returns True if one existed; absence is not an error."""
        return self._secrets.pop(entry_id, None) is not None

    def __contains__(self, entry_id: int) -> bool:
        return entry_id in self._secrets

    def __len__(self) -> int:
        return len(self._secrets)

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        return iter(self._secrets.items())

    def to_dict(self) -> Dict[str, str]:
        return {str(entry_id): blob for entry_id, blob in self._secrets.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "SecretVault":
        return cls({int(key): blob for key, blob in data.items()})
