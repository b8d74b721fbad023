# Memory CLI - JSON Storage
#
# Durable read/write of the two collections as whole-file snapshots:
#   db.json    {"entries": [...]}
#   vault.json {"secrets": {"<id>": "salt_hex:iv_hex:ciphertext_hex"}}
#
# Single writer (one CLI invocation). Each file is written to a temp file
# and renamed into place; concurrent invocations race, last write wins.

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core import EventSeverity, EventType, get_audit_logger
from .entries import EntryStore
from .errors import PersistenceError
from .state import MemoryState
from .vault import SecretVault

logger = logging.getLogger(__name__)


class JsonStorage:
    """Loads and saves MemoryState from/to a pair of JSON files."""

    def __init__(self, db_path: Union[str, Path], vault_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self.vault_path = Path(vault_path)

    @classmethod
    def from_config(cls, config) -> "JsonStorage":
        """Storage at the paths of a MemoryConfig."""
        return cls(config.db_path, config.vault_path)

    def locations(self) -> Dict[str, Path]:
        """Where the collections live on disk."""
        return {"db": self.db_path, "vault": self.vault_path}

    def load(self) -> MemoryState:
        """
        Load both collections. Missing files load as empty collections.

        Raises:
            PersistenceError: If a file cannot be read or is not valid
        """
        db_data = self._read_json(self.db_path, {"entries": []})
        vault_data = self._read_json(self.vault_path, {"secrets": {}})

        try:
            entries = EntryStore.from_list(db_data.get("entries", []))
            vault = SecretVault.from_dict(vault_data.get("secrets", {}))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            self._log_failure("load", e)
            raise PersistenceError(f"Invalid data in {self.db_path.parent}: {e}") from e

        get_audit_logger().log_event(
            event_type=EventType.STORAGE_LOADED,
            severity=EventSeverity.INFO,
            message="Collections loaded",
            details={"entries": len(entries), "secrets": len(vault)}
        )
        return MemoryState(entries=entries, vault=vault)

    def save(self, state: MemoryState) -> None:
        """
        Write both collections (vault first, then entries).

        If the entries file cannot be written, the previous vault file is
        put back so the pair on disk stays as it was.

        Raises:
            PersistenceError: If a file cannot be written
        """
        previous_vault = self._read_bytes(self.vault_path)
        self._write_json(self.vault_path, {"secrets": state.vault.to_dict()})
        try:
            self._write_json(self.db_path, {"entries": state.entries.to_list()})
        except PersistenceError:
            self._restore(self.vault_path, previous_vault)
            raise

        get_audit_logger().log_event(
            event_type=EventType.STORAGE_SAVED,
            severity=EventSeverity.INFO,
            message="Collections saved",
            details={"entries": len(state.entries), "secrets": len(state.vault)}
        )

    def _read_json(self, path: Path, default: Dict[str, Any]) -> Dict[str, Any]:
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._log_failure("read", e, path)
            raise PersistenceError(f"Failed to read {path}: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceError(f"Failed to read {path}: expected a JSON object")
        return data

    def _write_json(self, path: Path, data: Dict[str, Any]) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a temp file first, then rename for atomicity
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            self._log_failure("write", e, path)
            raise PersistenceError(f"Failed to write {path}: {e}") from e

    def _read_bytes(self, path: Path) -> Optional[bytes]:
        """Current file content, None if the file does not exist yet."""
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            self._log_failure("read", e, path)
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def _restore(self, path: Path, content: Optional[bytes]) -> None:
        """Put a file back to an earlier snapshot (None: it did not exist)."""
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            if content is None:
                path.unlink(missing_ok=True)
                return
            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            self._log_failure("restore", e, path)

    def _log_failure(self, action: str, error: Exception, path: Optional[Path] = None) -> None:
        logger.error(f"Storage {action} failed for {path or self.db_path.parent}: {error}")
        get_audit_logger().log_event(
            event_type=EventType.STORAGE_ERROR,
            severity=EventSeverity.ERROR,
            message=f"Storage {action} failed",
            details={"path": str(path) if path else None, "error": type(error).__name__}
        )

