"""
Release bucketing for releaselog.

Maps the commits reachable from the tip onto release buckets, one per
tagged commit plus one for the tip. A commit belongs to the earliest
release whose history contains it.

Anchors are processed oldest first, the tip last, and each one claims
every remaining commit merged into it, so a commit is never claimed by a
later release when an earlier one already contains it. Buckets are
returned newest first, which is the order changelogs are rendered in.
"""

from typing import Callable, Dict, Iterable, List, Optional
import logging

from ..domain import Commit, Tag, ReleaseBucket

logger = logging.getLogger(__name__)

# is_ancestor(commit, descendant) -> True if commit is merged into descendant
AncestryTest = Callable[[Commit, Commit], bool]
CommitLookup = Callable[[str], Optional[Commit]]


def bucketize(
    pool: Iterable[Commit],
    tags: Iterable[Tag],
    tip: Optional[Commit],
    is_ancestor: AncestryTest,
    cutoff: int = 0,
    lookup: Optional[CommitLookup] = None,
    include_lightweight: bool = False
) -> List[ReleaseBucket]:
    """
    Partition commits into release buckets.

    Args:
        pool: Commits reachable from the tip, in source order
        tags: Tag refs; lightweight ones are skipped unless include_lightweight
        tip: Current head commit, or None for an empty repository
        is_ancestor: Ancestry test, is_ancestor(commit, descendant)
        cutoff: Commits and anchors older than this timestamp are excluded
        lookup: Resolves a tag's target hash to a Commit. Defaults to
            searching the pool
        include_lightweight: Treat lightweight tags as releases too

    Returns:
        Buckets ordered newest first. Every pool commit at or after the
        cutoff is in exactly one bucket, unless the tip itself is older
        than the cutoff.
    """
    if tip is None:
        logger.debug("No tip commit; repository is empty")
        return []

    # Source order, without duplicates
    commits: Dict[str, Commit] = {}
    for commit in pool:
        if commit.timestamp >= cutoff:
            commits.setdefault(commit.id, commit)

    anchors = _collect_anchors(
        tip, tags, lookup or commits.get, is_ancestor, include_lightweight
    )

    buckets = []
    for bucket in anchors:
        if bucket.anchor.timestamp < cutoff:
            logger.debug(f"Dropping release {bucket.name}: anchor older than cutoff")
            continue
        buckets.append(bucket)

    # Every other anchor is in the tip's history, so the tip claims last
    buckets.sort(key=lambda b: (b.anchor.id == tip.id, b.anchor.timestamp, b.anchor.id))

    remaining = list(commits.values())
    for bucket in buckets:
        anchor = bucket.anchor
        claimed = []
        unclaimed = []
        for commit in remaining:
            if commit.timestamp <= anchor.timestamp and is_ancestor(commit, anchor):
                claimed.append(commit)
            else:
                unclaimed.append(commit)
        bucket.commits = claimed
        remaining = unclaimed
        logger.debug(f"Release {bucket.name}: {len(claimed)} commits")

    if remaining:
        _attach_leftovers(buckets, tip, remaining, list(commits))

    buckets.reverse()
    return buckets


def _collect_anchors(
    tip: Commit,
    tags: Iterable[Tag],
    lookup: CommitLookup,
    is_ancestor: AncestryTest,
    include_lightweight: bool
) -> List[ReleaseBucket]:
    """Build one bucket per distinct tagged commit in the tip's history, plus the tip."""
    # Add the tip first. Tags pointing at it are attached below.
    anchors: Dict[str, ReleaseBucket] = {tip.id: ReleaseBucket(anchor=tip)}

    for tag in tags:
        if not tag.annotated and not include_lightweight:
            logger.debug(f"Light-weight tags not supported. Skipping {tag.name}")
            continue

        bucket = anchors.get(tag.commit_id)
        if bucket is None:
            target = lookup(tag.commit_id)
            if target is None:
                logger.debug(f"Tag {tag.name} points outside the loaded history. Skipping")
                continue
            if not is_ancestor(target, tip):
                logger.debug(f"Tag {tag.name} is not merged into the tip. Skipping")
                continue
            bucket = anchors[target.id] = ReleaseBucket(anchor=target)
        bucket.tags.append(tag)

    return list(anchors.values())


def _attach_leftovers(
    buckets: List[ReleaseBucket],
    tip: Commit,
    leftovers: List[Commit],
    source_order: List[str]
) -> None:
    """Give commits no release claimed to the tip bucket, if it survived."""
    tip_bucket = next((b for b in buckets if b.anchor.id == tip.id), None)
    if tip_bucket is None:
        logger.warning(
            f"Discarding {len(leftovers)} commits not reachable from any release "
            f"newer than the cutoff"
        )
        return

    logger.debug(f"Attaching {len(leftovers)} unclaimed commits to {tip_bucket.name}")
    position = {commit_id: i for i, commit_id in enumerate(source_order)}
    tip_bucket.commits = sorted(
        tip_bucket.commits + leftovers,
        key=lambda c: position[c.id]
    )
