"""
Changelog generation for releaselog.

ChangelogGenerator is the entry point tying the pieces together:

    GitClient.walk() -> bucketize() -> RenderPipeline.run()

One generate() call is one run: the history is loaded, bucketed,
the commit walk is disposed, and only then are the renderers driven.
Nothing is kept between runs.
"""

from contextlib import ExitStack
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union
import logging

from ..domain import ReleaseBucket
from ..filters import CommitPredicate, FilterChain
from ..infra import GitClient
from ..renderers import Renderer
from .bucketizer import bucketize
from .pipeline import RenderPipeline

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Cutoff = Union[datetime, int, float, None]


def to_timestamp(value: Cutoff) -> int:
    """
    Convert a cutoff to seconds since the epoch.

    Naive datetimes are taken as local time, like the ones
    parse_timespec() returns.
    """
    if value is None:
        return 0
    if isinstance(value, datetime):
        return int(value.timestamp())
    return int(value)


class ChangelogGenerator:
    """
    Generates a release-grouped changelog for one repository.

    Example:
        generator = ChangelogGenerator(
            "/path/to/repo",
            renderers=[MarkdownRenderer.to_path("CHANGELOG.md")],
            filters=[MergeCommitFilter()],
        )
        generator.generate("Changelog", include_commits_after=datetime(2024, 1, 1))
    """

    def __init__(
        self,
        path: str = '.',
        renderers: Optional[Iterable[Renderer]] = None,
        filters: Optional[Iterable[CommitPredicate]] = None,
        client: Optional[GitClient] = None,
        include_lightweight_tags: bool = False
    ):
        """
        Initialize ChangelogGenerator.

        Args:
            path: Any path inside the repository
            renderers: Renderers to drive, in order
            filters: Commit predicates (or a FilterChain)
            client: Git client instance (creates default if None)
            include_lightweight_tags: Treat lightweight tags as releases
        """
        self.path = path
        self.renderers: List[Renderer] = list(renderers or [])
        if isinstance(filters, FilterChain):
            self.filter_chain = filters
        else:
            self.filter_chain = FilterChain(filters)
        self.client = client or GitClient()
        self.include_lightweight_tags = include_lightweight_tags

    def load_releases(self, include_commits_after: Cutoff = EPOCH) -> List[ReleaseBucket]:
        """
        Load the history and partition it into releases.

        The commit walk is disposed before this returns.

        Returns:
            Release buckets, newest first

        Raises:
            RepositoryUnavailableError: If no repository is found
            GitCommandError: If reading the history fails
        """
        cutoff = to_timestamp(include_commits_after)

        with self.client.walk(self.path) as walk:
            tip = walk.resolve_tip()
            buckets = bucketize(
                walk.list_commits(),
                walk.list_tags(),
                tip,
                walk.is_ancestor,
                cutoff=cutoff,
                lookup=walk.lookup,
                include_lightweight=self.include_lightweight_tags
            )

        logger.debug(f"Found {len(buckets)} releases since {cutoff}")
        return buckets

    def generate(self, title: str, include_commits_after: Cutoff = EPOCH) -> int:
        """
        Generate the changelog through every renderer.

        Args:
            title: Report title
            include_commits_after: Cutoff; older commits and releases are left out

        Returns:
            Number of commits rendered
        """
        with ExitStack() as stack:
            # Close the renderers if loading fails; the pipeline owns them after
            for renderer in reversed(self.renderers):
                stack.callback(renderer.close)
            buckets = self.load_releases(include_commits_after)
            stack.pop_all()

        return RenderPipeline(self.renderers).run(title, buckets, self.filter_chain)
