"""
Commit domain object for releaselog.

Commits are loaded once per generation run and never modified.
Buckets hold references to them, not copies.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, Tuple


@dataclass(frozen=True)
class Commit:
    """
    A single commit from the repository history.

    Attributes:
        id: Full commit hash
        timestamp: Committer time in seconds since the epoch
        parents: Hashes of the parent commits
        author: Author name
        email: Author email
        subject: First line of the commit message
    """

    id: str
    timestamp: int
    parents: Tuple[str, ...] = ()
    author: str = ""
    email: str = ""
    subject: str = ""

    @property
    def short_id(self) -> str:
        """Abbreviated hash, as shown by `git log --oneline`."""
        return self.id[:7]

    @property
    def date(self) -> datetime:
        """Commit time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'short_id': self.short_id,
            'timestamp': self.timestamp,
            'date': self.date.isoformat(),
            'parents': list(self.parents),
            'author': self.author,
            'email': self.email,
            'subject': self.subject,
        }

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other) -> bool:
        """Equality based on commit hash."""
        if not isinstance(other, Commit):
            return NotImplemented
        return self.id == other.id

    def __str__(self) -> str:
        return f"{self.short_id} {self.subject}"

    def __repr__(self) -> str:
        return f"Commit({self.short_id!r}, timestamp={self.timestamp})"
