"""
Shared pytest fixtures for the memory-cli test suite.

The autouse fixture below points the global audit logger at a temp
directory, so tests never append events to a real audit log.
"""

import pytest

from memory_cli.entries import EntryStore
from memory_cli.state import MemoryState
from memory_cli.vault import SecretVault


@pytest.fixture(autouse=True)
def audit_dir(tmp_path):
    """Redirect the global AuditLogger to a temp directory for every test."""
    import memory_cli.core.audit_log as audit_mod

    old_logger = audit_mod._audit_logger
    log_dir = tmp_path / "audit_logs"
    audit_mod._audit_logger = audit_mod.AuditLogger(log_dir=log_dir)

    yield log_dir

    audit_mod._audit_logger = old_logger


class FakePasswords:
    """PasswordProvider answering from a fixed list, recording each prompt."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def request(self, prompt):
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"Unexpected password prompt: {prompt}")
        return self.answers.pop(0)


@pytest.fixture
def make_passwords():
    return FakePasswords


@pytest.fixture
def state():
    return MemoryState(entries=EntryStore(), vault=SecretVault())
