"""
Rich console changelog renderer.

Prints one table per release, styled like the rest of the CLI output.
Rows are buffered per release and the table is printed when the next
release starts or the footer arrives.
"""

import sys
from typing import List, Optional, TextIO

from rich.console import Console
from rich.table import Table
from rich.markup import escape
from rich.text import Text
from rich import box

from ..domain import Commit, Tag
from .base import StreamRenderer


class ConsoleRenderer(StreamRenderer):
    """Human-readable tables on a terminal."""

    extension = 'txt'

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        owns_stream: bool = False,
        date_format: str = '%Y-%m-%d',
        width: Optional[int] = None
    ):
        super().__init__(stream or sys.stdout, owns_stream=owns_stream, date_format=date_format)
        self.console = Console(file=self.stream, width=width)
        self._table: Optional[Table] = None
        self._releases = 0
        self._commits = 0

    def _flush_table(self) -> None:
        if self._table is None:
            return
        if self._table.row_count:
            self.console.print(self._table)
        else:
            self.console.print(f"[bold]{self._table.title}[/bold] [dim](no commits)[/dim]")
        self._table = None

    def write_header(self, title: str) -> None:
        self.console.rule(f"[bold]{escape(title)}[/bold]")

    def write_release(self, name: str, tags: List[Tag]) -> None:
        tag = tags[0] if tags else None
        self._flush_table()
        self._releases += 1

        title = escape(name)
        if tag is not None and tag.date is not None:
            title += f" ({self.format_date(tag.date)})"

        table = Table(
            title=title,
            box=box.ROUNDED,
            show_header=True,
            header_style="bold magenta"
        )
        table.add_column("Commit", style="cyan", no_wrap=True)
        table.add_column("Date", style="dim", no_wrap=True)
        table.add_column("Author", style="green")
        table.add_column("Subject")
        self._table = table

    def write_commit(self, commit: Commit) -> None:
        self._commits += 1
        # Text() keeps [brackets] in subjects from being read as markup
        self._table.add_row(
            commit.short_id,
            self.format_date(commit.date),
            Text(commit.author),
            Text(commit.subject)
        )

    def write_footer(self) -> None:
        self._flush_table()
        if self._releases == 0:
            self.console.print("[yellow]No commits to display.[/yellow]")
            return
        self.console.print(f"\n[bold]Summary:[/bold] {self._commits} commits in {self._releases} releases")
