"""
Configuration for the memory store.

All settings come from environment variables; a ``.env`` file in the
working directory is loaded first (real environment variables win).

Environment Variables:
- MEMORY_CLI_SAVE_LOCATION: Data directory (default: ~/.memory-cli-data)
- MEMORY_CLI_AUDIT_LOG: Enable the audit log, 1/0 (default: 1)
- MEMORY_CLI_AUDIT_DIR: Audit log directory (default: <save dir>/audit_logs)
- MEMORY_CLI_LOG_LEVEL: Diagnostic log level (default: WARNING)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_SAVE_DIR = Path.home() / ".memory-cli-data"
DB_FILENAME = "db.json"
VAULT_FILENAME = "vault.json"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Configuration-related errors."""


@dataclass
class MemoryConfig:
    """Resolved settings for one CLI invocation."""
    save_dir: Path
    audit_enabled: bool = True
    audit_dir: Optional[Path] = None
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.audit_dir is None:
            self.audit_dir = self.save_dir / "audit_logs"

    @property
    def db_path(self) -> Path:
        return self.save_dir / DB_FILENAME

    @property
    def vault_path(self) -> Path:
        return self.save_dir / VAULT_FILENAME


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Invalid {name}: {value!r}. Use 1/0, true/false, yes/no or on/off")


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[Path] = None,
) -> MemoryConfig:
    """
    Build a MemoryConfig from the environment.

    Args:
        environ: Mapping to read instead of os.environ (tests)
        dotenv_path: .env file to load into os.environ (default: ./.env);
            ignored when an explicit environ is given

    Raises:
        ConfigError: If a value is invalid
    """
    if environ is None:
        load_dotenv(dotenv_path or Path.cwd() / ".env", override=False)
        environ = os.environ

    save_location = environ.get("MEMORY_CLI_SAVE_LOCATION")
    save_dir = Path(save_location).expanduser() if save_location else DEFAULT_SAVE_DIR

    audit_enabled = _parse_bool(
        "MEMORY_CLI_AUDIT_LOG", environ.get("MEMORY_CLI_AUDIT_LOG", "1")
    )

    audit_location = environ.get("MEMORY_CLI_AUDIT_DIR")
    audit_dir = Path(audit_location).expanduser() if audit_location else None

    log_level = environ.get("MEMORY_CLI_LOG_LEVEL", "WARNING").upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(f"Invalid MEMORY_CLI_LOG_LEVEL: {log_level}. Must be one of {list(VALID_LOG_LEVELS)}")

    return MemoryConfig(
        save_dir=save_dir,
        audit_enabled=audit_enabled,
        audit_dir=audit_dir,
        log_level=log_level,
    )
