"""Render annotated markdown into sectioned HTML fragments."""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from .extension import DEFAULT_ATTRIBUTE_LEVELS, ChunkedSectionsExtension
from .models import ProcessingContext, RenderedDocument

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

DEFAULT_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists")
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)


class ChunkRenderer:
    """Convert markdown documents into ``content-chunk`` HTML."""

    def __init__(
        self,
        *,
        extensions: cabc.Sequence[str] = DEFAULT_EXTENSIONS,
        pygments_style: str = "monokai",
        attribute_levels: cabc.Iterable[int] = DEFAULT_ATTRIBUTE_LEVELS,
        strict_frontmatter: bool = False,
    ) -> None:
        """Initialize a renderer with the markdown extensions to apply.

        Parameters
        ----------
        extensions : Sequence[str], optional
            python-markdown extension names loaded alongside the chunking
            extension. Defaults to fenced code, codehilite, tables, and sane
            lists.
        pygments_style : str, optional
            Pygments style used by ``codehilite``. Defaults to ``"monokai"``.
        attribute_levels : Iterable[int], optional
            Heading levels whose ``{#id .class}`` annotations are parsed.
        strict_frontmatter : bool, optional
            Raise :class:`~chunked_pages.pipeline.frontmatter.FrontmatterError`
            instead of rendering without questions when the frontmatter is
            malformed.
        """
        self.extensions = list(extensions)
        self.pygments_style = pygments_style
        self.attribute_levels = tuple(attribute_levels)
        self.strict_frontmatter = strict_frontmatter
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def highlights_code(self) -> bool:
        """Return whether fenced code is syntax highlighted."""
        return "codehilite" in self.extensions

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def render(self, text: str, *, source: Path | None = None) -> RenderedDocument:
        """Render ``text`` and return the HTML with its processing context.

        Parameters
        ----------
        text : str
            Raw markdown, optionally opening with a frontmatter block. A
            leading byte order mark is ignored.
        source : Path, optional
            File the markdown came from; only used in log messages.

        Returns
        -------
        RenderedDocument
            Sectioned HTML fragment and the context holding the question
            table and chunk index.
        """
        context = ProcessingContext(
            strict_frontmatter=self.strict_frontmatter, source=source
        )
        md = self._build_markdown(context)
        text = text.removeprefix("\ufeff")
        html = md.convert(self._normalize_fenced_blocks(text))
        return RenderedDocument(html=html, context=context)

    def _build_markdown(self, context: ProcessingContext) -> Markdown:
        """Return a Markdown instance wired to ``context``."""
        extensions: list[Extension | str] = [
            *self.extensions,
            ChunkedSectionsExtension(context, attribute_levels=self.attribute_levels),
        ]
        extension_configs: dict[str, dict[str, typ.Any]] = {}
        if self.highlights_code:
            extension_configs["codehilite"] = {
                "linenums": False,
                "guess_lang": False,
                "css_class": "codehilite",
                "pygments_style": self.pygments_style,
            }
        return Markdown(extensions=extensions, extension_configs=extension_configs)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        """Dedent fence markers and drop ``,no_run``-style fence labels."""
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            return f"{fence}{language or ''}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


def render_markdown(text: str, **options: typ.Any) -> str:
    """Render ``text`` with a default :class:`ChunkRenderer` and return HTML."""
    return ChunkRenderer(**options).render(text).html


__all__ = ["DEFAULT_EXTENSIONS", "ChunkRenderer", "render_markdown"]
