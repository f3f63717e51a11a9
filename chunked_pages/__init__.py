"""Convert annotated markdown into sectioned HTML content chunks.

This package exposes the CLI entry points used by ``chunk-pages`` together
with the rendering API for embedding the conversion in other tools.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``render_markdown``: Render a markdown string into chunked HTML.

Examples
--------
>>> from chunked_pages import render_markdown
>>> html = render_markdown("## Intro {#intro}\\nHello", extensions=[])
>>> 'aria-labelledby="intro"' in html
True
"""

from __future__ import annotations

from .cli import app, main
from .pipeline import render_markdown

__all__ = ["app", "main", "render_markdown"]
