"""
Domain layer for releaselog.

Contains pure domain objects with no I/O or side effects:
- Commit: A commit loaded from the repository history
- Tag: A tag ref peeled to the commit it marks
- ReleaseBucket: The commits that first became part of one release

Commits and tags are immutable value objects; buckets are filled
during bucketization and treated as read-only afterwards.
"""

from .commit import Commit
from .tag import Tag
from .bucket import ReleaseBucket

__all__ = [
    'Commit',
    'Tag',
    'ReleaseBucket',
]
