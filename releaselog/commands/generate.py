"""
Changelog generation command for releaselog.

Reads the repository history, groups commits by the release that first
contained them, and writes the result in one or more formats.
"""

import re
from pathlib import Path
from typing import List, Optional

import click
import logging

from ..config import load_config, configure_logging
from ..exit_codes import (
    CommandError, ConfigError, INTERRUPTED, USAGE_ERROR,
    exit_with_code, get_exit_code_for_exception
)
from ..filters import build_filter_chain
from ..infra import GitClient
from ..renderers import FORMATS, StreamRenderer, create_renderer, output_filename
from ..services import ChangelogGenerator
from ..utils import parse_timespec

logger = logging.getLogger(__name__)


def resolve_cutoff(since: Optional[str]):
    """Parse a --since value; None means no cutoff."""
    if not since:
        return None
    try:
        return parse_timespec(str(since))
    except ValueError as e:
        raise ConfigError(str(e)) from e


def build_renderers(
    formats: List[str],
    output_dir: Optional[str],
    date_format: str
) -> List[StreamRenderer]:
    """Create one renderer per format; at most one may write to stdout."""
    to_stdout = [f for f in formats if f == 'console' or output_dir is None]
    if len(to_stdout) > 1:
        raise CommandError(
            f"Formats {', '.join(to_stdout)} would all write to stdout; use --output-dir",
            USAGE_ERROR
        )

    renderers = []
    try:
        for fmt in formats:
            renderers.append(create_renderer(fmt, output_dir, date_format=date_format))
    except OSError as e:
        for renderer in renderers:
            renderer.close()
        raise CommandError(f"Cannot open output file: {e}", get_exit_code_for_exception(e)) from e
    return renderers


@click.command('generate')
@click.argument('path', default='.', type=click.Path(file_okay=False))
@click.option('--title', '-t',
              help='Changelog title (default from config: "Changelog")')
@click.option('--since', '-s',
              help='Only commits after this time (e.g., 30d, 2024-01-01, @1700000000)')
@click.option('--format', '-f', 'formats',
              multiple=True,
              type=click.Choice(FORMATS),
              help='Output format; repeat for several (default from config: markdown)')
@click.option('--output-dir', '-o',
              type=click.Path(file_okay=False),
              help='Write CHANGELOG.<ext> files here instead of stdout')
@click.option('--exclude-merges/--include-merges', default=None,
              help='Leave merge commits out')
@click.option('--exclude-pattern',
              help='Leave out commits whose subject matches this regex')
@click.option('--exclude-author', 'exclude_authors',
              multiple=True,
              help='Leave out commits by this author name or email (repeatable)')
@click.option('--include-lightweight-tags/--annotated-tags-only', default=None,
              help='Treat lightweight tags as releases too')
@click.option('--verbose', '-v', is_flag=True,
              help='Debug logging on stderr')
def generate_handler(path, title, since, formats, output_dir, exclude_merges, exclude_pattern,
                     exclude_authors, include_lightweight_tags, verbose):
    """
    Generate a changelog grouped by release.

    Each commit is listed under the oldest release (tag) whose history
    contains it. Commits not yet in any release are listed first, as
    unreleased work.

    \b
    Examples:
      # Markdown changelog on stdout
      releaselog generate

      # Last 90 days, without merge commits
      releaselog generate --since 90d --exclude-merges

      # Markdown and HTML files in docs/
      releaselog generate -f markdown -f html -o docs

      # Tables in the terminal
      releaselog generate -f console
    """
    try:
        config = load_config()
        configure_logging(config, verbose=verbose)

        changelog = config.get('changelog', {})
        filters = config.get('filters', {})

        title = title or changelog.get('title') or 'Changelog'
        formats = list(formats) or list(changelog.get('formats') or ['markdown'])
        output_dir = output_dir or changelog.get('output_dir')
        cutoff = resolve_cutoff(since or changelog.get('since'))

        if exclude_merges is None:
            exclude_merges = bool(filters.get('exclude_merges'))
        if include_lightweight_tags is None:
            include_lightweight_tags = bool(config.get('tags', {}).get('include_lightweight'))

        unknown = [f for f in formats if f not in FORMATS]
        if unknown:
            raise ConfigError(f"Unknown format(s) in config: {', '.join(unknown)}")

        try:
            filter_chain = build_filter_chain(
                exclude_merges=exclude_merges,
                exclude_pattern=exclude_pattern or filters.get('exclude_pattern'),
                exclude_authors=list(exclude_authors) or filters.get('exclude_authors')
            )
        except re.error as e:
            raise ConfigError(f"Invalid exclude pattern: {e}") from e

        client = GitClient(timeout=int(config.get('git', {}).get('timeout_seconds', 30)))

        # Fail on a missing repository before creating any output files
        client.find_repository(path)

        renderers = build_renderers(formats, output_dir, changelog.get('date_format', '%Y-%m-%d'))
        generator = ChangelogGenerator(
            path,
            renderers=renderers,
            filters=filter_chain,
            client=client,
            include_lightweight_tags=include_lightweight_tags
        )
        rendered = generator.generate(title, include_commits_after=cutoff)

        if output_dir:
            for fmt in formats:
                if fmt != 'console':
                    click.echo(f"Wrote {Path(output_dir) / output_filename(fmt)}", err=True)
        logger.info(f"Rendered {rendered} commits")

    except CommandError as e:
        exit_with_code(e.exit_code, f"Error: {e}")

    except OSError as e:
        # Writing a changelog file failed part way
        exit_with_code(get_exit_code_for_exception(e), f"Error: {e}")

    except KeyboardInterrupt:
        exit_with_code(INTERRUPTED, "\nInterrupted")
