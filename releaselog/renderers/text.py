"""
Plain text and Markdown changelog writers.
"""

from typing import List

from ..domain import Commit, Tag
from .base import StreamRenderer


class PlainTextRenderer(StreamRenderer):
    """
    Plain text changelog.

    Example output:

        Changelog
        =========

        v1.1 (2024-03-01)
        -----------------
        3f2a1bc Fix crash on empty input
    """

    extension = 'txt'

    def write_header(self, title: str) -> None:
        self.write(f"{title}\n{'=' * len(title)}\n")

    def write_release(self, name: str, tags: List[Tag]) -> None:
        heading = name
        if tags and tags[0].date is not None:
            heading += f" ({self.format_date(tags[0].date)})"
        self.write(f"\n{heading}\n{'-' * len(heading)}\n")

    def write_commit(self, commit: Commit) -> None:
        self.write(f"{commit.short_id} {commit.subject}\n")


class MarkdownRenderer(StreamRenderer):
    """Markdown changelog: one `##` section per release, one bullet per commit."""

    extension = 'md'

    def __init__(self, stream, owns_stream: bool = False, date_format: str = '%Y-%m-%d',
                 show_author: bool = True):
        super().__init__(stream, owns_stream=owns_stream, date_format=date_format)
        self.show_author = show_author

    def write_header(self, title: str) -> None:
        self.write(f"# {title}\n")

    def write_release(self, name: str, tags: List[Tag]) -> None:
        tag = tags[0] if tags else None
        heading = f"## {name}"
        if tag is not None and tag.date is not None:
            heading += f" - {self.format_date(tag.date)}"
        self.write(f"\n{heading}\n\n")
        if tag is not None and tag.message and tag.message != tag.name:
            self.write(f"_{_escape(tag.message)}_\n\n")

    def write_commit(self, commit: Commit) -> None:
        line = f"* {_escape(commit.subject)} (`{commit.short_id}`)"
        if self.show_author and commit.author:
            line += f" - {_escape(commit.author)}"
        self.write(line + "\n")


def _escape(text: str) -> str:
    """Escape characters Markdown would treat as formatting or markup."""
    for char in ('\\', '*', '_', '`', '[', ']', '#', '<', '>'):
        text = text.replace(char, '\\' + char)
    # A leading - or + would start a nested list
    if text[:1] in ('-', '+'):
        text = '\\' + text
    return text
