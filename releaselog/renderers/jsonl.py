"""
JSONL changelog writer.

Emits one JSON object per event, newline-delimited, for piping into
other tools:

    {"event": "header", "title": "Changelog"}
    {"event": "tag", "name": "v1.1", "commit": "3f2a...", ...}
    {"event": "commit", "id": "3f2a...", "subject": "...", ...}
    {"event": "footer"}
"""

import json
from typing import Any, Dict, List, Optional

from ..domain import Commit, Tag
from .base import StreamRenderer


class JsonlRenderer(StreamRenderer):
    """Newline-delimited JSON, one record per render event."""

    extension = 'jsonl'

    def _emit(self, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        record = {'event': event}
        if data:
            record.update(data)
        self.write(json.dumps(record, ensure_ascii=False) + "\n")

    def write_header(self, title: str) -> None:
        self._emit('header', {'title': title})

    def write_release(self, name: str, tags: List[Tag]) -> None:
        # One record per tag; unreleased work has none
        for tag in tags:
            self._emit('tag', tag.to_dict())

    def write_commit(self, commit: Commit) -> None:
        self._emit('commit', commit.to_dict())

    def write_footer(self) -> None:
        self._emit('footer')
