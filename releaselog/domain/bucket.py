"""
Release bucket domain object for releaselog.

A bucket groups the commits that first became part of one release.
Its anchor is the tagged commit (or the repository tip for work that
has not been released yet).
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List

from .commit import Commit
from .tag import Tag


@dataclass
class ReleaseBucket:
    """
    Commits assigned to a single release.

    Attributes:
        anchor: The tagged commit, or the tip for unreleased work
        tags: Tags pointing at the anchor, in the order they were collected
        commits: Commits assigned to this release, in source order
    """

    anchor: Commit
    tags: List[Tag] = field(default_factory=list)
    commits: List[Commit] = field(default_factory=list)

    @property
    def is_unreleased(self) -> bool:
        """True for the untagged tip bucket."""
        return not self.tags

    @property
    def name(self) -> str:
        """Display name: the first tag, or "Unreleased"."""
        if self.tags:
            return self.tags[0].name
        return "Unreleased"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'name': self.name,
            'anchor': self.anchor.id,
            'timestamp': self.anchor.timestamp,
            'tags': [tag.name for tag in self.tags],
            'commits': [commit.id for commit in self.commits],
        }

    def __repr__(self) -> str:
        return f"ReleaseBucket({self.name!r}, commits={len(self.commits)})"
