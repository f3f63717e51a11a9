"""Regroup a flat markdown tree into ``<section>`` content chunks.

Each top-level ``h2`` opens a chunk that collects every following sibling up
to the next top-level ``h2``. Content preceding the first ``h2`` does not
belong to any chunk and is dropped. The chunk wrapper is keyed on the
heading id::

    <section class="content-chunk" data-chunk-slug="intro" aria-labelledby="intro">
    <h2 id="intro">Intro</h2>
    <p>Body</p>
    </section>
"""

from __future__ import annotations

import typing as typ
from xml.etree.ElementTree import Element

from markdown.treeprocessors import Treeprocessor

from chunked_pages._constants import (
    QUESTION_TAG,
    SECTION_CLASS,
    SECTION_HEADING_TAG,
    SECTION_SEPARATOR,
    SECTION_TAG,
)

from .models import ChunkSummary

if typ.TYPE_CHECKING:
    from markdown import Markdown

    from .models import ProcessingContext
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    ProcessingContext = typ.Any


def _open_section(heading: Element) -> Element:
    """Build a chunk wrapper around a fresh copy of ``heading``.

    The heading's children are moved (not shared) into the new ``h2``.
    """
    slug = heading.get("id")
    attrib = {"class": SECTION_CLASS}
    if slug:
        attrib["data-chunk-slug"] = slug
        attrib["aria-labelledby"] = slug
    section = Element(SECTION_TAG, attrib)
    section.text = "\n\n"

    title = Element(SECTION_HEADING_TAG, dict(heading.attrib))
    title.text = heading.text
    for child in list(heading):
        heading.remove(child)
        title.append(child)
    title.tail = "\n"
    section.append(title)
    return section


def group_sections(root: Element) -> list[Element]:
    """Replace the children of ``root`` with one section per top-level ``h2``.

    Parameters
    ----------
    root : Element
        Container whose direct children form the document flow.

    Returns
    -------
    list[Element]
        The section elements now attached to ``root``, in heading order.
        Sibling sections are separated by a blank-line tail.
    """
    sections: list[Element] = []
    current: Element | None = None
    for node in list(root):
        if node.tag == SECTION_HEADING_TAG:
            if current is not None:
                sections.append(current)
            current = _open_section(node)
        elif current is not None:
            current.append(node)
    if current is not None:
        sections.append(current)

    for node in list(root):
        root.remove(node)
    root.text = None
    for index, section in enumerate(sections):
        section.tail = SECTION_SEPARATOR if index < len(sections) - 1 else None
        root.append(section)
    return sections


def summarize_sections(root: Element) -> list[ChunkSummary]:
    """Return a chunk index entry for every section directly under ``root``."""
    summaries: list[ChunkSummary] = []
    for section in root:
        if section.tag != SECTION_TAG:
            continue
        heading = section.find(SECTION_HEADING_TAG)
        title = "".join(heading.itertext()).strip() if heading is not None else ""
        classes = (heading.get("class") or "").split() if heading is not None else []
        summaries.append(
            ChunkSummary(
                slug=section.get("aria-labelledby"),
                title=title,
                classes=classes,
                has_question=section.find(QUESTION_TAG) is not None,
            )
        )
    return summaries


class SectionTreeprocessor(Treeprocessor):
    """Wrap each top-level ``h2`` and its trailing content in a section."""

    def run(self, root: Element) -> Element:
        """Group the document flow into content chunks."""
        group_sections(root)
        return root


class ChunkIndexTreeprocessor(Treeprocessor):
    """Record the rendered chunks on the processing context."""

    def __init__(self, md: Markdown, context: ProcessingContext) -> None:
        super().__init__(md)
        self.context = context

    def run(self, root: Element) -> Element:
        """Store one summary per section on the context."""
        self.context.chunks = summarize_sections(root)
        return root


__all__ = [
    "ChunkIndexTreeprocessor",
    "SectionTreeprocessor",
    "group_sections",
    "summarize_sections",
]
