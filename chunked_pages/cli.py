"""Cyclopts CLI entrypoint for converting annotated markdown into chunked HTML.

The ``chunk-pages`` console script defined here renders one HTML page per
markdown source, wrapping every ``##`` heading and its content in a
``content-chunk`` section and attaching frontmatter questions to the matching
chunks. Typical usage involves running ``chunk-pages convert content/`` locally
or in CI, and ``chunk-pages inspect`` to check how a document will be split.

Examples
--------
Convert every markdown file in a directory:

>>> from chunked_pages.cli import app
>>> app(["convert", "content", "--output-dir", "dist"])  # doctest: +SKIP

List the chunks of a single document:

>>> app(["inspect", "content/2-program-structure.md"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_converter_config
from .converter import DocumentConverter, collect_sources

app = App(name="chunk-pages", config=cyclopts.config.Env("CHUNKED_PAGES_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    """Send library log records to stderr at the requested verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command(help="Convert markdown files into sectioned HTML pages.")
def convert(
    paths: typ.Annotated[
        list[Path], Parameter(help="Markdown files or directories to convert")
    ],
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to converter config")
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    strict_frontmatter: typ.Annotated[
        bool | None,
        Parameter(help="Fail a document whose frontmatter is malformed"),
    ] = None,
    standalone: typ.Annotated[
        bool | None, Parameter(help="Wrap fragments in a full HTML document")
    ] = None,
    manifest: typ.Annotated[
        bool | None, Parameter(help="Write a chunk manifest beside each page")
    ] = None,
    jobs: typ.Annotated[
        int | None, Parameter(help="Number of documents converted in parallel")
    ] = None,
    verbose: bool = False,
) -> None:
    """Convert markdown sources and report every written artifact.

    Parameters
    ----------
    paths : list[Path]
        Markdown files, or directories searched with the configured pattern.
    config : Path or None, optional
        Path to a ``chunked-pages.yaml`` file. When omitted the default file
        is used if present, otherwise built-in defaults apply.
    output_dir : Path or None, optional
        Override the configured output directory.
    strict_frontmatter : bool or None, optional
        Override the configured frontmatter policy.
    standalone : bool or None, optional
        Override whether fragments are wrapped in ``page.jinja``.
    manifest : bool or None, optional
        Override whether chunk manifests are written.
    jobs : int or None, optional
        Override the number of worker threads.
    verbose : bool, optional
        Emit debug logging.

    Returns
    -------
    None
        Prints ``wrote <path>`` for every artifact and ``failed <path>`` to
        stderr for every document that could not be converted.

    Raises
    ------
    SystemExit
        With status 1 when no sources were found or any document failed.
    """
    _configure_logging(verbose=verbose)
    settings = load_converter_config(config, required=config is not None)
    settings = settings.with_overrides(
        output_dir=output_dir,
        strict_frontmatter=strict_frontmatter,
        standalone=standalone,
        write_manifest=manifest,
        jobs=jobs,
    )
    sources = collect_sources(
        paths, pattern=settings.pattern, recursive=settings.recursive
    )
    if not sources:
        print("no markdown sources found", file=sys.stderr)
        sys.exit(1)

    result = DocumentConverter(settings).convert_all(sources)
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    for failure in result.failures:
        print(
            f"failed {_format_path(failure.source)}: {failure.message}",
            file=sys.stderr,
        )
    if not result.ok:
        sys.exit(1)


@app.command(name="inspect", help="List the content chunks a markdown file produces.")
def inspect_chunks(
    path: typ.Annotated[Path, Parameter(help="Markdown file to inspect")],
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to converter config")
    ] = None,
    strict_frontmatter: typ.Annotated[
        bool | None,
        Parameter(help="Fail when the frontmatter is malformed"),
    ] = None,
) -> None:
    """Print one line per chunk: slug (or ``-``), title, and a question marker.

    The document is rendered with the same settings ``convert`` would use,
    so heading levels, extensions and the frontmatter policy agree.
    """
    settings = load_converter_config(config, required=config is not None)
    settings = settings.with_overrides(strict_frontmatter=strict_frontmatter)
    renderer = DocumentConverter(settings).renderer
    document = renderer.render(path.read_text(encoding="utf-8"), source=path)
    if document.context.frontmatter_error:
        print(f"warning: {document.context.frontmatter_error}", file=sys.stderr)
    for chunk in document.chunks:
        marker = " [question]" if chunk.has_question else ""
        print(f"{chunk.slug or '-'} {chunk.title}{marker}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``chunk-pages`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
