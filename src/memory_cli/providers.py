"""
Collaborators the core asks for input: passwords, content and edits.

Each is a small Protocol so tests (or another front end) can supply
their own. The console implementations block until the user answers.
"""

import getpass
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

import pyperclip
from rich.prompt import Prompt

from .errors import EmptyContentError, MemoryCLIError

logger = logging.getLogger(__name__)


class PasswordPrompt(str, Enum):
    """Why a password is being requested."""
    SET = "set"            # encrypt a new entry
    ENTER = "enter"        # decrypt for get
    EDIT = "edit"          # decrypt before editing
    REENCRYPT = "reencrypt"  # encrypt edited content

    @property
    def message(self) -> str:
        return {
            PasswordPrompt.SET: "Set a password for this entry:",
            PasswordPrompt.ENTER: "Enter password:",
            PasswordPrompt.EDIT: "Password to unlock this entry for editing:",
            PasswordPrompt.REENCRYPT: "Password to encrypt the new content:",
        }[self]


class PasswordProvider(Protocol):
    def request(self, prompt: PasswordPrompt) -> str:
        ...


@dataclass
class EditResult:
    """New values collected for an edit."""
    content: str
    tags_text: str


class EditPrompt(Protocol):
    def request(self, current_content: str, current_tags: List[str]) -> EditResult:
        ...


class ConsolePasswordProvider:
    """Masked interactive password input."""

    def request(self, prompt: PasswordPrompt) -> str:
        return getpass.getpass(f"{prompt.message} ")


class ConsoleEditPrompt:
    """Asks for new content and tags, offering the current values as defaults."""

    def request(self, current_content: str, current_tags: List[str]) -> EditResult:
        content = Prompt.ask("New content", default=current_content)
        tags_text = Prompt.ask("New tags (comma separated)", default=", ".join(current_tags))
        return EditResult(content=content, tags_text=tags_text)


# ── Clipboard ────────────────────────────────────────────────────────


class ClipboardError(MemoryCLIError):
    """Raised when no clipboard mechanism is available or it fails."""


def read_clipboard() -> str:
    """Return the clipboard text."""
    try:
        return pyperclip.paste()
    except pyperclip.PyperclipException as e:
        logger.debug(f"Clipboard read failed: {e}")
        raise ClipboardError(f"Clipboard unavailable: {e}") from e


def write_clipboard(text: str) -> None:
    """Copy text to the clipboard."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.debug(f"Clipboard write failed: {e}")
        raise ClipboardError(f"Clipboard unavailable: {e}") from e


class ContentSource:
    """Resolves the text to store from an argument or the clipboard."""

    def __init__(self, clipboard_reader=read_clipboard):
        self._read_clipboard = clipboard_reader

    def resolve(self, explicit_text: Optional[str] = None, use_clipboard: bool = False) -> str:
        """
        Returns:
            Non-empty trimmed content

        Raises:
            EmptyContentError: Nothing to store
        """
        content = self._read_clipboard() if use_clipboard else explicit_text
        if not content or not content.strip():
            raise EmptyContentError("Nothing to store: content is empty")
        return content.strip()
