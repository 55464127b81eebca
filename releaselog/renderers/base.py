"""
Base classes for changelog renderers.

A renderer receives a fixed sequence of events from the render pipeline:

    render_header(title)
    render_tag(tag)*  render_commit(commit)*   (once per release)
    render_footer()
    close()

Renderer is the full interface. StreamRenderer adds output-stream
ownership and release tracking for the text-based writers.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO, Union

from ..domain import Commit, Tag

UNRELEASED = "Unreleased"


class Renderer(ABC):
    """Receives changelog events and writes them somewhere."""

    @abstractmethod
    def render_header(self, title: str) -> None:
        ...

    @abstractmethod
    def render_tag(self, tag: Tag) -> None:
        ...

    @abstractmethod
    def render_commit(self, commit: Commit) -> None:
        ...

    @abstractmethod
    def render_footer(self) -> None:
        ...

    def close(self) -> None:
        """Release any resources held by the renderer."""


class StreamRenderer(Renderer):
    """
    Renderer writing text to a stream.

    Commits arriving before any tag belong to unreleased work; the
    first of them opens an "Unreleased" section via write_release().
    Consecutive tags on the same commit are one release, written as a
    single heading naming all of them once the release has content or
    ends.

    Subclasses implement write_header, write_release, write_commit
    and optionally write_footer.
    """

    extension = 'txt'

    def __init__(
        self,
        stream: TextIO,
        owns_stream: bool = False,
        date_format: str = '%Y-%m-%d'
    ):
        self.stream = stream
        self.owns_stream = owns_stream
        self.date_format = date_format
        self._release_open = False
        self._pending: List[Tag] = []
        self._closed = False

    @classmethod
    def to_path(cls, path: Union[str, Path], **kwargs) -> 'StreamRenderer':
        """Create a renderer writing to a new file it owns."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        stream = open(path, 'w', encoding='utf-8')
        return cls(stream, owns_stream=True, **kwargs)

    def write(self, text: str) -> None:
        self.stream.write(text)

    def format_date(self, date: Optional[datetime]) -> str:
        if date is None:
            return ""
        return date.strftime(self.date_format)

    def render_header(self, title: str) -> None:
        self.write_header(title)

    def render_tag(self, tag: Tag) -> None:
        if self._pending and self._pending[0].commit_id == tag.commit_id:
            self._pending.append(tag)
            return
        self._open_release()
        self._pending = [tag]

    def render_commit(self, commit: Commit) -> None:
        self._open_release()
        if not self._release_open:
            self._release_open = True
            self.write_release(UNRELEASED, [])
        self.write_commit(commit)

    def render_footer(self) -> None:
        self._open_release()
        self.write_footer()

    def _open_release(self) -> None:
        """Write the heading for the tags seen since the last release."""
        if not self._pending:
            return
        tags, self._pending = self._pending, []
        self._release_open = True
        self.write_release(", ".join(tag.name for tag in tags), tags)

    @abstractmethod
    def write_header(self, title: str) -> None:
        ...

    @abstractmethod
    def write_release(self, name: str, tags: List[Tag]) -> None:
        """Start a release. tags is empty for unreleased work."""

    @abstractmethod
    def write_commit(self, commit: Commit) -> None:
        ...

    def write_footer(self) -> None:
        pass

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.owns_stream:
            self.stream.close()
        else:
            self.stream.flush()
