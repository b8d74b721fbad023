# Memory CLI - Main Entry Point
#
# Command-line front end: parses arguments, loads both collections,
# runs one MemoryService operation and writes the collections back.
# Nothing is written when an operation fails.

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from . import __version__
from .config import ConfigError, load_config
from .core import EventSeverity, EventType, configure_audit_logger, get_audit_logger
from .errors import EntryNotFoundError, MemoryCLIError
from .presenter import Presenter
from .providers import (
    ConsoleEditPrompt,
    ConsolePasswordProvider,
    ContentSource,
    EditPrompt,
    PasswordProvider,
    write_clipboard,
)
from .service import MemoryService
from .storage import JsonStorage

logger = logging.getLogger(__name__)


@dataclass
class CommandContext:
    """Collaborators used by the commands (swapped out in tests)."""
    storage: JsonStorage
    passwords: PasswordProvider = field(default_factory=ConsolePasswordProvider)
    content_source: ContentSource = field(default_factory=ContentSource)
    edit_prompt: EditPrompt = field(default_factory=ConsoleEditPrompt)
    presenter: Presenter = field(default_factory=Presenter)
    clipboard_writer: Callable[[str], None] = write_clipboard


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memory",
        description="Personal command-line memory: save snippets, notes and secrets, find them again",
    )
    parser.add_argument("--version", action="version", version=f"memory-cli {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show diagnostic logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p_add = sub.add_parser("add", aliases=["a"], help="Store a new entry")
    p_add.add_argument("text", nargs="?", help="Text to store")
    p_add.add_argument("-t", "--tags", default="", help="Comma separated tags")
    p_add.add_argument("-c", "--clipboard", action="store_true", help="Store the clipboard content")
    p_add.add_argument("-e", "--encrypted", action="store_true", help="Encrypt the entry with a password")
    p_add.set_defaults(handler=cmd_add)

    p_find = sub.add_parser("find", aliases=["search", "f"], help="Search entries (wildcards or regex)")
    p_find.add_argument("query", nargs="?", default="*", help="Search pattern (default: *)")
    p_find.add_argument("-t", "--table", action="store_true", help="Show results as a table")
    p_find.add_argument("-d", "--date", help="Only entries from this day (today, yesterday, YYYY-MM-DD, DD.MM.YYYY)")
    p_find.set_defaults(handler=cmd_find)

    p_get = sub.add_parser("get", aliases=["g"], help="Show an entry (decrypts if needed)")
    p_get.add_argument("id", type=int, help="Entry ID")
    p_get.add_argument("-c", "--clipboard", action="store_true", help="Copy the content to the clipboard")
    p_get.set_defaults(handler=cmd_get)

    p_edit = sub.add_parser("edit", aliases=["e"], help="Edit content and tags of an entry")
    p_edit.add_argument("id", type=int, help="Entry ID")
    p_edit.set_defaults(handler=cmd_edit)

    p_tags = sub.add_parser("tags", help="List all tags with their frequency")
    p_tags.set_defaults(handler=cmd_tags)

    p_loc = sub.add_parser("location", aliases=["loc"], help="Show where the data files are stored")
    p_loc.set_defaults(handler=cmd_location)

    p_del = sub.add_parser("delete", aliases=["rm"], help="Delete an entry")
    p_del.add_argument("id", type=int, help="Entry ID")
    p_del.set_defaults(handler=cmd_delete)

    return parser


# ── Commands ────────────────────────────────────────────────────────


def cmd_add(args, ctx: CommandContext) -> int:
    content = ctx.content_source.resolve(args.text, use_clipboard=args.clipboard)
    state = ctx.storage.load()
    entry = MemoryService(state, ctx.passwords).add(content, args.tags, encrypt=args.encrypted)
    ctx.storage.save(state)
    ctx.presenter.success(f"Entry saved with ID {entry.id}.")
    return 0


def cmd_find(args, ctx: CommandContext) -> int:
    state = ctx.storage.load()
    results = MemoryService(state, ctx.passwords).find(args.query, args.date)
    ctx.presenter.entries(results, as_table=args.table)
    return 0


def cmd_get(args, ctx: CommandContext) -> int:
    state = ctx.storage.load()
    retrieved = MemoryService(state, ctx.passwords).get(args.id)
    ctx.storage.save(state)
    ctx.presenter.retrieved(retrieved.entry, retrieved.content)
    if args.clipboard:
        ctx.clipboard_writer(retrieved.content)
        ctx.presenter.success("Copied to clipboard.")
    return 0


def cmd_edit(args, ctx: CommandContext) -> int:
    state = ctx.storage.load()
    MemoryService(state, ctx.passwords).edit(args.id, ctx.edit_prompt)
    ctx.storage.save(state)
    ctx.presenter.success(f"Entry {args.id} updated.")
    return 0


def cmd_tags(args, ctx: CommandContext) -> int:
    state = ctx.storage.load()
    ctx.presenter.tags(MemoryService(state, ctx.passwords).tags())
    return 0


def cmd_location(args, ctx: CommandContext) -> int:
    ctx.presenter.locations(ctx.storage.locations())
    return 0


def cmd_delete(args, ctx: CommandContext) -> int:
    state = ctx.storage.load()
    if not MemoryService(state, ctx.passwords).delete(args.id):
        raise EntryNotFoundError(args.id)
    ctx.storage.save(state)
    ctx.presenter.success(f"Entry {args.id} deleted.")
    return 0


def run_command(args: argparse.Namespace, ctx: CommandContext) -> int:
    """Run the selected command, reporting failures instead of raising."""
    get_audit_logger().log_event(
        event_type=EventType.COMMAND_START,
        severity=EventSeverity.INFO,
        message=f"Command {args.command}",
        details={"command": args.command}
    )
    try:
        return args.handler(args, ctx)
    except MemoryCLIError as e:
        ctx.presenter.error(str(e))
        get_audit_logger().log_event(
            event_type=EventType.COMMAND_FAILED,
            severity=EventSeverity.WARNING,
            message=f"Command {args.command} failed: {type(e).__name__}",
            details={"command": args.command, "error": type(e).__name__}
        )
        return 1
    except KeyboardInterrupt:
        ctx.presenter.error("Aborted.")
        return 130


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the memory command."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    configure_audit_logger(log_dir=config.audit_dir, enabled=config.audit_enabled)

    return run_command(args, CommandContext(storage=JsonStorage.from_config(config)))


if __name__ == "__main__":
    sys.exit(main())
