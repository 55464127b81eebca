#!/usr/bin/env python3

import click

from releaselog import __version__
from releaselog.commands.generate import generate_handler
from releaselog.commands.buckets import buckets_handler
from releaselog.commands.config import config_cmd


@click.group()
@click.version_option(version=__version__)
def cli():
    """releaselog - Release-grouped changelogs from git history.

    Lists every commit under the oldest release (tag) whose history
    contains it, newest release first.
    """
    pass


cli.add_command(generate_handler, name='generate')
cli.add_command(buckets_handler, name='buckets')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
