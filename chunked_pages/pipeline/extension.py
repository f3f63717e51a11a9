"""python-markdown extension bundling every chunking stage."""

from __future__ import annotations

import typing as typ

from markdown.extensions import Extension

from .attributes import HeadingAttributeTreeprocessor
from .frontmatter import FrontmatterPreprocessor
from .models import ProcessingContext
from .questions import QuestionTreeprocessor
from .sections import ChunkIndexTreeprocessor, SectionTreeprocessor

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any

DEFAULT_ATTRIBUTE_LEVELS = (2, 3)


class ChunkedSectionsExtension(Extension):
    """Turn annotated markdown into ``content-chunk`` sections.

    Register a fresh instance per document: the stages share the
    :class:`ProcessingContext` handed to the constructor, which carries the
    frontmatter question table from the preprocessor to the tree stages and
    collects the chunk index once rendering finishes.

    Stage order follows python-markdown priorities: frontmatter before
    whitespace normalisation, heading attributes after inline parsing,
    grouping after prettify, then the question join and the chunk index.
    """

    def __init__(
        self,
        context: ProcessingContext | None = None,
        *,
        attribute_levels: cabc.Iterable[int] = DEFAULT_ATTRIBUTE_LEVELS,
    ) -> None:
        super().__init__()
        self.context = context or ProcessingContext()
        self.attribute_levels = tuple(attribute_levels)

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the chunking processors on the Markdown instance."""
        md.preprocessors.register(
            FrontmatterPreprocessor(md, self.context), "chunked_frontmatter", 40
        )
        md.treeprocessors.register(
            HeadingAttributeTreeprocessor(md, self.attribute_levels),
            "chunked_heading_attributes",
            15,
        )
        md.treeprocessors.register(SectionTreeprocessor(md), "chunked_sections", 8)
        md.treeprocessors.register(
            QuestionTreeprocessor(md, self.context), "chunked_questions", 7
        )
        md.treeprocessors.register(
            ChunkIndexTreeprocessor(md, self.context), "chunked_index", 6
        )


__all__ = ["DEFAULT_ATTRIBUTE_LEVELS", "ChunkedSectionsExtension"]
