"""Terminal rendering of entries, tags and storage locations (rich)."""

from pathlib import Path
from typing import Dict, Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .dates import timestamp_to_local
from .entries import Entry


class Presenter:
    """Renders plain data returned by MemoryService."""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    # ── Messages ────────────────────────────────────────────────────

    def success(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]{escape(message)}[/red]")

    # ── Entries ─────────────────────────────────────────────────────

    def entries(self, entries: Iterable[Entry], as_table: bool = False) -> None:
        entries = list(entries)
        if not entries:
            self.warning("No matches found.")
            return
        if as_table:
            self._entries_table(entries)
        else:
            self._entries_plain(entries)

    def _entries_plain(self, entries) -> None:
        for entry in entries:
            when = timestamp_to_local(entry.timestamp).strftime("%Y-%m-%d %H:%M:%S")
            self.console.print(
                f"[cyan]ID: {entry.id}[/cyan][bright_black] | Usage: {entry.usage_count} | [/bright_black]"
                f"[magenta]{when}[/magenta]"
            )
            style = "yellow" if entry.encrypted else "white"
            self.console.print(f"[{style}]{escape(entry.content)}[/{style}]")
            self.console.print("[bright_black]---[/bright_black]")

    def _entries_table(self, entries) -> None:
        table = Table()
        table.add_column("ID", style="cyan")
        table.add_column("Date", style="magenta")
        table.add_column("Tags", style="magenta")
        table.add_column("Usage")
        table.add_column("Content", overflow="fold")

        for entry in entries:
            table.add_row(
                str(entry.id),
                timestamp_to_local(entry.timestamp).strftime("%Y-%m-%d"),
                escape(", ".join(entry.tags)),
                str(entry.usage_count),
                escape(entry.content),
            )
        self.console.print(table)

    def retrieved(self, entry: Entry, content: str) -> None:
        self.console.print(f"[cyan]Entry {entry.id} (used {entry.usage_count}x):[/cyan]")
        self.console.print(escape(content), style="white")

    # ── Tags / locations ────────────────────────────────────────────

    def tags(self, counts: Dict[str, int]) -> None:
        table = Table()
        table.add_column("Tag", style="magenta")
        table.add_column("Count", style="cyan")
        for tag, count in counts.items():
            table.add_row(escape(tag), str(count))
        self.console.print(table)

    def locations(self, paths: Dict[str, Path]) -> None:
        self.console.print(f"[cyan]DB: {escape(str(paths['db']))}\nVault: {escape(str(paths['vault']))}[/cyan]")
