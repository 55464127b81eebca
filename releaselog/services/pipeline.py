"""
Render pipeline for releaselog.

Drives every renderer through the same event sequence:

    render_header(title)
    for each release, newest first:
        render_tag(tag) for each tag on the release
        render_commit(commit) for each commit the filter chain includes
    render_footer()
    close()

Each event is sent to every renderer before the pipeline moves on.
close() is called on every renderer even if rendering, or closing
another renderer, fails.
"""

from contextlib import ExitStack
from typing import Iterable, List, Optional, Sequence
import logging

from ..domain import ReleaseBucket
from ..filters import FilterChain
from ..renderers import Renderer

logger = logging.getLogger(__name__)


class RenderPipeline:
    """
    Fans changelog events out to an ordered list of renderers.

    Example:
        pipeline = RenderPipeline([MarkdownRenderer.to_path("CHANGELOG.md")])
        pipeline.run("Changelog", buckets, FilterChain([MergeCommitFilter()]))
    """

    def __init__(self, renderers: Iterable[Renderer]):
        self.renderers: List[Renderer] = list(renderers)

    def run(
        self,
        title: str,
        buckets: Sequence[ReleaseBucket],
        filter_chain: Optional[FilterChain] = None
    ) -> int:
        """
        Render a changelog.

        Args:
            title: Report title passed to render_header
            buckets: Releases, newest first
            filter_chain: Decides which commits are rendered (all if None)

        Returns:
            Number of commits rendered
        """
        filter_chain = filter_chain or FilterChain()
        rendered = 0

        with ExitStack() as stack:
            # Callbacks run in reverse, so register in reverse to close in order
            for renderer in reversed(self.renderers):
                stack.callback(renderer.close)

            for renderer in self.renderers:
                renderer.render_header(title)

            for bucket in buckets:
                for tag in bucket.tags:
                    for renderer in self.renderers:
                        renderer.render_tag(tag)

                for commit in bucket.commits:
                    if not filter_chain.include(commit):
                        continue
                    rendered += 1
                    for renderer in self.renderers:
                        renderer.render_commit(commit)

            for renderer in self.renderers:
                renderer.render_footer()

        logger.debug(f"Rendered {rendered} commits in {len(buckets)} releases")
        return rendered
