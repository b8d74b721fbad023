# Memory CLI - Audit Logging
#
# Append-only structured log of every store operation: entries added,
# read, edited and deleted, failed decryptions, storage load/save.
# Events carry ids, flags and counts only; never content or passwords.

import json
import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

import structlog

AUDIT_LOGGER_NAME = "memory_cli.audit"


class EventType(str, Enum):
    """Types of events recorded in the audit log."""
    # Entry Events
    ENTRY_ADDED = "entry.added"
    ENTRY_ACCESSED = "entry.accessed"
    ENTRY_EDITED = "entry.edited"
    ENTRY_DELETED = "entry.deleted"
    ENTRY_SEARCHED = "entry.searched"

    # Vault Events
    VAULT_DECRYPT_FAILED = "vault.decrypt.failed"
    VAULT_RECORD_MALFORMED = "vault.record.malformed"

    # Storage Events
    STORAGE_LOADED = "storage.loaded"
    STORAGE_SAVED = "storage.saved"
    STORAGE_ERROR = "storage.error"

    # System Events
    COMMAND_START = "command.start"
    COMMAND_FAILED = "command.failed"


class EventSeverity(str, Enum):
    """
    Severity levels for audit events.

    - INFO: Normal activity
    - WARNING: Operation refused (wrong password, unknown id, ...)
    - ERROR: Storage could not be read or written
    """
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditLogger:
    """
    Append-only audit logger backed by structlog.

    Features:
    - Structured JSON lines, one file per day (audit_YYYY-MM-DD.log)
    - Automatic timestamp and event ID
    - Query support over the written files
    """

    def __init__(self, log_dir: Optional[Path] = None, enabled: bool = True):
        """
        Initialize audit logger.

        Args:
            log_dir: Directory for audit logs (default: ./audit_logs)
            enabled: When False, events are accepted but not written
        """
        self.log_dir = Path(log_dir) if log_dir else Path("./audit_logs")
        self.enabled = enabled

        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer()
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        self._setup_file_handler()

        self.logger = structlog.get_logger(AUDIT_LOGGER_NAME)

    def _setup_file_handler(self):
        """Attach a daily file handler to the audit logger (replacing old ones)."""
        stdlib_logger = logging.getLogger(AUDIT_LOGGER_NAME)
        for handler in stdlib_logger.handlers[:]:
            stdlib_logger.removeHandler(handler)
            handler.close()
        stdlib_logger.propagate = False

        if not self.enabled:
            stdlib_logger.addHandler(logging.NullHandler())
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(self.current_log_file(), mode='a', encoding='utf-8')
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter('%(message)s'))  # structlog handles formatting

        stdlib_logger.addHandler(file_handler)
        stdlib_logger.setLevel(logging.INFO)

    def current_log_file(self) -> Path:
        today = datetime.now().strftime("%Y-%m-%d")
        return self.log_dir / f"audit_{today}.log"

    def log_event(
        self,
        event_type: EventType,
        severity: EventSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Log an audit event.

        Args:
            event_type: Type of event (from EventType enum)
            severity: Severity level (from EventSeverity enum)
            message: Human-readable event description
            details: Additional event details (ids, flags, counts)

        Returns:
            str: Event ID (UUID) for reference
        """
        event_id = str(uuid4())

        event_data = {
            "event_id": event_id,
            "event_type": event_type.value,
            "severity": severity.value,
            "message": message,
            "details": details or {},
            "platform": sys.platform,
        }

        if self.enabled:
            self.logger.info("memory_event", **event_data)

        return event_id

    def log_entry_event(
        self,
        event_type: EventType,
        entry_id: int,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: EventSeverity = EventSeverity.INFO,
    ) -> str:
        """Log an event about a single entry."""
        event_details = dict(details or {})
        event_details["entry_id"] = entry_id
        return self.log_event(
            event_type=event_type,
            severity=severity,
            message=f"Entry {entry_id}: {message}",
            details=event_details,
        )

    def query_events(
        self,
        event_types: Optional[List[EventType]] = None,
        severity: Optional[EventSeverity] = None,
        limit: int = 100
    ) -> List[Dict[str, Any]]:
        """
        Read back events from the audit files, oldest first.

        Args:
            event_types: Filter by event types
            severity: Filter by severity level
            limit: Maximum number of events to return (most recent kept)
        """
        if not self.log_dir.exists():
            return []

        wanted = {t.value for t in event_types} if event_types else None
        events = []
        for log_file in sorted(self.log_dir.glob("audit_*.log")):
            with open(log_file, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        record = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    if record.get("event") != "memory_event":
                        continue
                    if wanted and record.get("event_type") not in wanted:
                        continue
                    if severity and record.get("severity") != severity.value:
                        continue
                    events.append(record)

        return events[-limit:] if limit else events


# Global logger instance
_audit_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """
    Get global audit logger (singleton pattern).

    Until configure_audit_logger() is called the logger is disabled, so
    library use never creates files on its own.
    """
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger(enabled=False)
    return _audit_logger


def configure_audit_logger(log_dir: Optional[Path] = None, enabled: bool = True) -> AuditLogger:
    """Replace the global audit logger (CLI startup, tests)."""
    global _audit_logger
    _audit_logger = AuditLogger(log_dir=log_dir, enabled=enabled)
    return _audit_logger
