"""
releaselog - Release-grouped changelogs from git history.

releaselog walks a repository's history and lists every commit under
the oldest release (tag) whose history contains it. Commits not yet in
any release are grouped as unreleased work.

Quick Start:
    from releaselog import ChangelogGenerator, MarkdownRenderer, MergeCommitFilter

    generator = ChangelogGenerator(
        "~/projects/myrepo",
        renderers=[MarkdownRenderer.to_path("CHANGELOG.md")],
        filters=[MergeCommitFilter()],
    )
    generator.generate("Changelog")

    # Only the partition, without rendering
    for bucket in generator.load_releases():
        print(bucket.name, len(bucket.commits))

Domain Objects:
    Commit - A commit from the history
    Tag - A tag ref peeled to its commit
    ReleaseBucket - The commits first released under one tag

Services:
    bucketize - Partition commits into releases
    RenderPipeline - Drive renderers through the changelog events
    ChangelogGenerator - Load, bucket and render in one run
"""

__version__ = "0.3.0"

# Domain objects
from .domain import Commit, Tag, ReleaseBucket

# Infrastructure
from .infra import GitClient, CommitWalk

# Filters
from .filters import (
    FilterChain,
    MergeCommitFilter,
    MessagePatternFilter,
    AuthorFilter,
    build_filter_chain,
)

# Renderers
from .renderers import (
    Renderer,
    StreamRenderer,
    PlainTextRenderer,
    MarkdownRenderer,
    HtmlRenderer,
    JsonlRenderer,
    ConsoleRenderer,
    create_renderer,
)

# Services
from .services import bucketize, RenderPipeline, ChangelogGenerator

# Errors
from .exit_codes import (
    CommandError,
    RepositoryUnavailableError,
    GitCommandError,
    ConfigError,
    WalkDisposedError,
)

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "Commit",
    "Tag",
    "ReleaseBucket",
    # Infrastructure
    "GitClient",
    "CommitWalk",
    # Filters
    "FilterChain",
    "MergeCommitFilter",
    "MessagePatternFilter",
    "AuthorFilter",
    "build_filter_chain",
    # Renderers
    "Renderer",
    "StreamRenderer",
    "PlainTextRenderer",
    "MarkdownRenderer",
    "HtmlRenderer",
    "JsonlRenderer",
    "ConsoleRenderer",
    "create_renderer",
    # Services
    "bucketize",
    "RenderPipeline",
    "ChangelogGenerator",
    # Errors
    "CommandError",
    "RepositoryUnavailableError",
    "GitCommandError",
    "ConfigError",
    "WalkDisposedError",
]
