"""
Infrastructure layer for releaselog.

Contains abstractions for external systems:
- GitClient: Git command execution
- CommitWalk: The loaded commit graph for one generation run

These provide clean interfaces that can be mocked for testing.
"""

from .commit_walk import CommitWalk
from .git_client import GitClient

__all__ = [
    'GitClient',
    'CommitWalk',
]
