"""
Changelog renderers for releaselog.

Available formats:
- plain: Plain text with underlined release headings
- markdown: One `##` section per release
- html: Standalone HTML page
- jsonl: One JSON record per render event
- console: Rich tables on the terminal

Any object implementing the Renderer interface can be passed to the
render pipeline; these are the stock ones.
"""

import sys
from pathlib import Path
from typing import Dict, Optional, Type, Union

from .base import Renderer, StreamRenderer, UNRELEASED
from .text import PlainTextRenderer, MarkdownRenderer
from .html import HtmlRenderer
from .jsonl import JsonlRenderer
from .console import ConsoleRenderer

RENDERERS: Dict[str, Type[StreamRenderer]] = {
    'plain': PlainTextRenderer,
    'markdown': MarkdownRenderer,
    'html': HtmlRenderer,
    'jsonl': JsonlRenderer,
    'console': ConsoleRenderer,
}

FORMATS = list(RENDERERS)


def output_filename(fmt: str, basename: str = 'CHANGELOG') -> str:
    """File name a format is written to, e.g. CHANGELOG.md."""
    return f"{basename}.{RENDERERS[fmt].extension}"


def create_renderer(
    fmt: str,
    output_dir: Optional[Union[str, Path]] = None,
    basename: str = 'CHANGELOG',
    **options
) -> StreamRenderer:
    """
    Create a stock renderer by format name.

    Args:
        fmt: One of FORMATS
        output_dir: Write to <output_dir>/<basename>.<ext>; stdout if None.
            The console format always writes to stdout.
        basename: Output file name without extension
        **options: Passed to the renderer (e.g., date_format)

    Returns:
        A renderer ready for the pipeline

    Raises:
        ValueError: If fmt is not a known format
    """
    if fmt not in RENDERERS:
        raise ValueError(f"Unknown format {fmt!r}; expected one of {', '.join(FORMATS)}")

    renderer_cls = RENDERERS[fmt]
    if fmt == 'console' or output_dir is None:
        return renderer_cls(sys.stdout, **options)

    return renderer_cls.to_path(Path(output_dir) / output_filename(fmt, basename), **options)


__all__ = [
    'Renderer',
    'StreamRenderer',
    'UNRELEASED',
    'PlainTextRenderer',
    'MarkdownRenderer',
    'HtmlRenderer',
    'JsonlRenderer',
    'ConsoleRenderer',
    'RENDERERS',
    'FORMATS',
    'create_renderer',
    'output_filename',
]
