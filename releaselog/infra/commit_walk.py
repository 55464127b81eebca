"""
Commit walk: the loaded commit graph for one generation run.

A CommitWalk is created by GitClient.walk() and owned by whoever
created it. It answers the queries the bucketizer needs (listing,
tip resolution, ancestry) from memory, and is disposed once those
queries are done:

    with client.walk(path) as walk:
        buckets = bucketize(walk.list_commits(), walk.list_tags(),
                            walk.resolve_tip(), walk.is_ancestor)
    # walk is disposed here, before rendering starts
"""

from typing import Dict, FrozenSet, List, Optional
import logging

from ..domain import Commit, Tag
from ..exit_codes import WalkDisposedError

logger = logging.getLogger(__name__)


class CommitWalk:
    """
    In-memory view of the history reachable from the tip.

    Ancestry is answered by walking parent links. The ancestor set of
    the most recently queried descendant is kept, so asking about
    every commit against one anchor costs a single traversal.
    """

    def __init__(
        self,
        commits: List[Commit],
        tags: List[Tag],
        tip_id: Optional[str] = None,
        path: Optional[str] = None
    ):
        self.path = path
        self._tags = list(tags)
        self._index: Dict[str, Commit] = {c.id: c for c in commits}
        self._tip = self._index.get(tip_id) if tip_id else None
        self._reach_for: Optional[str] = None
        self._reach: FrozenSet[str] = frozenset()
        self._disposed = False

        # The graph may hold commits outside the tip's history; the pool
        # is limited to the tip's history.
        if self._tip is None:
            self._commits: List[Commit] = []
        else:
            history = self._ancestors_of(self._tip.id)
            self._commits = [c for c in commits if c.id in history]

    def __enter__(self) -> 'CommitWalk':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _check_open(self) -> None:
        if self._disposed:
            raise WalkDisposedError("Commit walk has already been disposed")

    def list_commits(self) -> List[Commit]:
        """Commits reachable from the tip, newest first."""
        self._check_open()
        return list(self._commits)

    def list_tags(self) -> List[Tag]:
        """Every tag ref, lightweight ones flagged with annotated=False."""
        self._check_open()
        return list(self._tags)

    def resolve_tip(self) -> Optional[Commit]:
        """The tip commit, or None for an empty repository."""
        self._check_open()
        return self._tip

    def lookup(self, commit_id: str) -> Optional[Commit]:
        """Find a loaded commit by full hash."""
        self._check_open()
        return self._index.get(commit_id)

    def is_ancestor(self, commit: Commit, descendant: Commit) -> bool:
        """
        Check whether commit is merged into descendant.

        A commit counts as its own ancestor, matching
        `git merge-base --is-ancestor`.
        """
        self._check_open()
        if commit.id == descendant.id:
            return True
        if self._reach_for != descendant.id:
            self._reach = self._ancestors_of(descendant.id)
            self._reach_for = descendant.id
        return commit.id in self._reach

    def _ancestors_of(self, commit_id: str) -> FrozenSet[str]:
        seen = {commit_id}
        stack = [commit_id]
        while stack:
            current = self._index.get(stack.pop())
            if current is None:
                # Parent outside the loaded history (shallow clone)
                continue
            for parent in current.parents:
                if parent not in seen:
                    seen.add(parent)
                    stack.append(parent)
        return frozenset(seen)

    def dispose(self) -> None:
        """Release the loaded graph. Safe to call more than once."""
        if self._disposed:
            return
        logger.debug(f"Disposing commit walk over {len(self._commits)} commits")
        self._commits = []
        self._tags = []
        self._index = {}
        self._tip = None
        self._reach = frozenset()
        self._reach_for = None
        self._disposed = True
