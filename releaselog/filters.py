"""
Commit filtering for releaselog.

A FilterChain decides which commits are rendered. It holds an ordered
list of predicates; a commit is shown only if every predicate accepts
it. Predicates are plain callables taking a Commit and returning a bool,
so a lambda works as well as the classes below.

Usage:
    from releaselog.filters import FilterChain, MergeCommitFilter, MessagePatternFilter

    chain = FilterChain([MergeCommitFilter(), MessagePatternFilter(r'^\\[maven-release-plugin\\]')])
    if chain.include(commit):
        ...
"""

import re
from typing import Callable, Iterable, List, Optional
import logging

from .domain import Commit

logger = logging.getLogger(__name__)

CommitPredicate = Callable[[Commit], bool]


def predicate_name(predicate: CommitPredicate) -> str:
    """Name used to identify a predicate in log messages."""
    name = getattr(predicate, '__name__', None)
    if name is None:
        return type(predicate).__name__
    return name


class FilterChain:
    """
    Ordered conjunction of commit predicates.

    Predicates run in registration order and evaluation stops at the
    first rejection. Filters never modify commits.
    """

    def __init__(self, predicates: Optional[Iterable[CommitPredicate]] = None):
        self.predicates: List[CommitPredicate] = list(predicates or [])

    def add(self, predicate: CommitPredicate) -> 'FilterChain':
        """Register a predicate after the existing ones."""
        self.predicates.append(predicate)
        return self

    def include(self, commit: Commit) -> bool:
        """Return True if every predicate accepts the commit."""
        for predicate in self.predicates:
            if not predicate(commit):
                logger.debug(f"Commit {commit.short_id} filtered out by {predicate_name(predicate)}")
                return False
        return True

    def __call__(self, commit: Commit) -> bool:
        return self.include(commit)

    def __repr__(self) -> str:
        names = ', '.join(predicate_name(p) for p in self.predicates)
        return f"FilterChain([{names}])"


class MergeCommitFilter:
    """Rejects merge commits (more than one parent)."""

    def __call__(self, commit: Commit) -> bool:
        return not commit.is_merge

    def __repr__(self) -> str:
        return "MergeCommitFilter()"


class MessagePatternFilter:
    """
    Rejects commits whose subject matches a regular expression.

    Useful for dropping release-tool noise such as
    "[maven-release-plugin] prepare release".
    """

    def __init__(self, pattern: str, flags: int = 0):
        self.pattern = re.compile(pattern, flags)

    def __call__(self, commit: Commit) -> bool:
        return self.pattern.search(commit.subject) is None

    def __repr__(self) -> str:
        return f"MessagePatternFilter({self.pattern.pattern!r})"


class AuthorFilter:
    """Rejects commits by any of the given author names or emails."""

    def __init__(self, authors: Iterable[str]):
        self.authors = {a.strip().lower() for a in authors if a.strip()}

    def __call__(self, commit: Commit) -> bool:
        return (commit.author.lower() not in self.authors
                and commit.email.lower() not in self.authors)

    def __repr__(self) -> str:
        return f"AuthorFilter({sorted(self.authors)!r})"


def build_filter_chain(
    exclude_merges: bool = False,
    exclude_pattern: Optional[str] = None,
    exclude_authors: Optional[Iterable[str]] = None
) -> FilterChain:
    """
    Build a FilterChain from configuration values.

    Args:
        exclude_merges: Drop merge commits
        exclude_pattern: Drop commits whose subject matches this regex
        exclude_authors: Drop commits by these authors (name or email)

    Returns:
        FilterChain with the requested predicates, in that order

    Raises:
        re.error: If exclude_pattern is not a valid regular expression
    """
    chain = FilterChain()
    if exclude_merges:
        chain.add(MergeCommitFilter())
    if exclude_pattern:
        chain.add(MessagePatternFilter(exclude_pattern))
    if exclude_authors:
        chain.add(AuthorFilter(exclude_authors))
    return chain
