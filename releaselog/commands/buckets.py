"""
Release bucket inspection command for releaselog.

Prints how commits were partitioned into releases, without rendering
a changelog. Output is JSONL by default for scripting; --pretty shows
a table.
"""

import json

import click
from rich.console import Console
from rich.table import Table
from rich import box

from ..config import load_config, configure_logging
from ..exit_codes import CommandError, INTERRUPTED, exit_with_code
from ..infra import GitClient
from ..services import ChangelogGenerator
from .generate import resolve_cutoff


@click.command('buckets')
@click.argument('path', default='.', type=click.Path(file_okay=False))
@click.option('--since', '-s',
              help='Only commits after this time (e.g., 30d, 2024-01-01)')
@click.option('--include-lightweight-tags/--annotated-tags-only', default=None,
              help='Treat lightweight tags as releases too')
@click.option('--pretty', '-p', is_flag=True,
              help='Human-readable table output (default: JSONL)')
@click.option('--verbose', '-v', is_flag=True,
              help='Debug logging on stderr')
def buckets_handler(path, since, include_lightweight_tags, pretty, verbose):
    """
    Show which commits belong to which release.

    One record per release, newest first:

    \b
      {"name": "v1.1", "anchor": "...", "timestamp": ..., "tags": [...], "commits": [...]}
    """
    try:
        config = load_config()
        configure_logging(config, verbose=verbose)

        if include_lightweight_tags is None:
            include_lightweight_tags = bool(config.get('tags', {}).get('include_lightweight'))

        client = GitClient(timeout=int(config.get('git', {}).get('timeout_seconds', 30)))
        generator = ChangelogGenerator(
            path,
            client=client,
            include_lightweight_tags=include_lightweight_tags
        )
        buckets = generator.load_releases(resolve_cutoff(since or config.get('changelog', {}).get('since')))

        if pretty:
            _render_buckets_table(buckets)
        else:
            for bucket in buckets:
                click.echo(json.dumps(bucket.to_dict(), ensure_ascii=False))

    except CommandError as e:
        exit_with_code(e.exit_code, f"Error: {e}")

    except KeyboardInterrupt:
        exit_with_code(INTERRUPTED, "\nInterrupted")


def _render_buckets_table(buckets) -> None:
    console = Console()
    if not buckets:
        console.print("[yellow]No releases found.[/yellow]")
        return

    table = Table(
        title="Releases",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Release", style="cyan")
    table.add_column("Anchor", style="dim")
    table.add_column("Date", style="green")
    table.add_column("Commits", justify="right")

    for bucket in buckets:
        table.add_row(
            ", ".join(tag.name for tag in bucket.tags) or bucket.name,
            bucket.anchor.short_id,
            bucket.anchor.date.strftime('%Y-%m-%d'),
            str(len(bucket.commits))
        )

    console.print(table)
