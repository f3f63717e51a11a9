"""Typed dataclasses describing chunked_pages converter configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from chunked_pages.pipeline.extension import DEFAULT_ATTRIBUTE_LEVELS
from chunked_pages.pipeline.renderer import DEFAULT_EXTENSIONS


class ConverterConfigError(ValueError):
    """Raised when the converter configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ConverterConfig:
    """A fully resolved converter definition sourced from YAML config.

    Attributes
    ----------
    output_dir : Path
        Directory receiving the generated HTML files.
    pattern : str
        Glob applied when a directory is passed as input.
    recursive : bool
        Whether directory inputs are searched recursively.
    strict_frontmatter : bool
        Abort a document on malformed frontmatter instead of skipping its
        questions.
    pygments_style : str
        Pygments style used for highlighted code blocks.
    extensions : list[str]
        python-markdown extensions applied before the chunking stages.
    attribute_levels : list[int]
        Heading levels whose brace annotations are parsed.
    standalone : bool
        Wrap each fragment in the ``page.jinja`` HTML document.
    write_manifest : bool
        Write a ``<stem>.chunks.json`` index beside each HTML file.
    jobs : int
        Number of worker threads used for batch conversion.
    """

    output_dir: Path = Path("public")
    pattern: str = "*.md"
    recursive: bool = False
    strict_frontmatter: bool = False
    pygments_style: str = "monokai"
    extensions: list[str] = dc.field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    attribute_levels: list[int] = dc.field(
        default_factory=lambda: list(DEFAULT_ATTRIBUTE_LEVELS)
    )
    standalone: bool = False
    write_manifest: bool = False
    jobs: int = 1

    def with_overrides(self, **overrides: object) -> ConverterConfig:
        """Return a copy with every non-``None`` override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dc.replace(self, **changes)


__all__ = ["ConverterConfig", "ConverterConfigError"]
