"""
Simple HTML changelog writer.

Produces a standalone page: one heading per release followed by a
list of its commits.
"""

from html import escape
from typing import List

from ..domain import Commit, Tag
from .base import StreamRenderer


class HtmlRenderer(StreamRenderer):
    """Standalone HTML page with one <h2> and <ul> per release."""

    extension = 'html'

    def __init__(self, stream, owns_stream: bool = False, date_format: str = '%Y-%m-%d'):
        super().__init__(stream, owns_stream=owns_stream, date_format=date_format)
        self._list_open = False

    def _close_list(self) -> None:
        if self._list_open:
            self.write("</ul>\n")
            self._list_open = False

    def write_header(self, title: str) -> None:
        self.write(
            "<!DOCTYPE html>\n"
            "<html>\n"
            "<head>\n"
            "<meta charset=\"utf-8\">\n"
            f"<title>{escape(title)}</title>\n"
            "</head>\n"
            "<body>\n"
            f"<h1>{escape(title)}</h1>\n"
        )

    def write_release(self, name: str, tags: List[Tag]) -> None:
        tag = tags[0] if tags else None
        self._close_list()
        heading = escape(name)
        if tag is not None and tag.date is not None:
            heading += f" <small>{escape(self.format_date(tag.date))}</small>"
        self.write(f"<h2>{heading}</h2>\n")

    def write_commit(self, commit: Commit) -> None:
        if not self._list_open:
            self.write("<ul>\n")
            self._list_open = True
        self.write(
            f"<li><code>{escape(commit.short_id)}</code> {escape(commit.subject)}"
            f" <span class=\"author\">{escape(commit.author)}</span></li>\n"
        )

    def write_footer(self) -> None:
        self._close_list()
        self.write("</body>\n</html>\n")
