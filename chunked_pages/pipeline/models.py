"""Shared dataclasses used by the markdown chunking pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


@dc.dataclass(slots=True, frozen=True)
class QuestionAnswer:
    """Constructed-response metadata attached to a content chunk.

    Attributes
    ----------
    slug : str
        Identifier of the chunk the question belongs to.
    question : str
        Prompt shown to the reader.
    answer : str
        Reference answer for the prompt.
    """

    slug: str
    question: str
    answer: str


@dc.dataclass(slots=True)
class HeadingAttributes:
    """Attributes parsed from a trailing ``{#id .class key=value}`` annotation.

    Attributes
    ----------
    id : str or None
        First ``#`` token, when present.
    classes : list[str]
        Every ``.`` token in order of appearance.
    data : dict[str, str]
        ``key=value`` pairs in order of appearance.
    """

    id: str | None = None
    classes: list[str] = dc.field(default_factory=list)
    data: dict[str, str] = dc.field(default_factory=dict)

    def properties(self) -> dict[str, str]:
        """Return the property bag keyed by camel-cased property names."""
        bag: dict[str, str] = {}
        if self.id:
            bag["id"] = self.id
        if self.classes:
            bag["class"] = " ".join(self.classes)
        for key, value in self.data.items():
            bag[f"data{key[:1].upper()}{key[1:]}"] = value
        return bag


@dc.dataclass(slots=True)
class ChunkSummary:
    """Index entry describing one rendered content chunk."""

    slug: str | None
    title: str
    classes: list[str] = dc.field(default_factory=list)
    has_question: bool = False

    def as_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-serializable mapping for the chunk manifest."""
        return {
            "slug": self.slug,
            "title": self.title,
            "classes": list(self.classes),
            "has_question": self.has_question,
        }


@dc.dataclass(slots=True)
class ProcessingContext:
    """Per-document state threaded through every markdown stage.

    Attributes
    ----------
    questions : dict[str, QuestionAnswer] or None
        Lookup table built from the frontmatter block; ``None`` when the
        document has no frontmatter.
    strict_frontmatter : bool
        Abort the document when the frontmatter block is malformed instead of
        skipping question enrichment.
    source : Path or None
        Originating file, used in log messages.
    chunks : list[ChunkSummary]
        Chunk index filled once sections have been grouped.
    frontmatter_error : str or None
        Message describing a tolerated malformed frontmatter block.
    """

    questions: dict[str, QuestionAnswer] | None = None
    strict_frontmatter: bool = False
    source: Path | None = None
    chunks: list[ChunkSummary] = dc.field(default_factory=list)
    frontmatter_error: str | None = None

    def lookup(self, slug: str) -> QuestionAnswer | None:
        """Return the question registered for ``slug``, if any."""
        if not self.questions:
            return None
        return self.questions.get(slug)


@dc.dataclass(slots=True)
class RenderedDocument:
    """HTML produced for one document together with its processing context."""

    html: str
    context: ProcessingContext

    @property
    def chunks(self) -> list[ChunkSummary]:
        """Return the chunk index recorded while rendering."""
        return self.context.chunks


__all__ = [
    "ChunkSummary",
    "HeadingAttributes",
    "ProcessingContext",
    "QuestionAnswer",
    "RenderedDocument",
]
