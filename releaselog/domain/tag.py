"""
Tag domain object for releaselog.

A tag marks a release. The source reports every tag ref it finds,
peeled to the commit it points at:
- Annotated tags carry their own tagger, date and message
- Lightweight tags point straight at a commit and carry nothing else

Only annotated tags mark releases by default; lightweight ones are
skipped during bucketization.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class Tag:
    """
    A tag ref peeled to its target commit.

    Attributes:
        name: Short tag name (e.g., "v1.2.0")
        commit_id: Hash of the commit the tag points at
        annotated: True if the ref points at a tag object
        tagger: Tagger name (annotated tags only)
        email: Tagger email (annotated tags only)
        timestamp: Tagging time in seconds since the epoch, if known
        message: Tag message subject (annotated tags only)
    """

    name: str
    commit_id: str
    annotated: bool = True
    tagger: str = ""
    email: str = ""
    timestamp: Optional[int] = None
    message: str = ""

    @property
    def date(self) -> Optional[datetime]:
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        date = self.date
        return {
            'name': self.name,
            'commit': self.commit_id,
            'annotated': self.annotated,
            'tagger': self.tagger,
            'email': self.email,
            'date': date.isoformat() if date else None,
            'message': self.message,
        }

    def __str__(self) -> str:
        """String representation is just the tag name."""
        return self.name

    def __repr__(self) -> str:
        kind = "annotated" if self.annotated else "lightweight"
        return f"Tag({self.name!r}, {kind}, commit={self.commit_id[:7]!r})"
