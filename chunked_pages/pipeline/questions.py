"""Attach frontmatter questions to the content chunks they belong to."""

from __future__ import annotations

import typing as typ
from xml.etree.ElementTree import Element, SubElement

from markdown.treeprocessors import Treeprocessor

from chunked_pages._constants import QUESTION_TAG, QUESTION_TRAILER, SECTION_TAG

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown import Markdown

    from .models import ProcessingContext, QuestionAnswer
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    ProcessingContext = typ.Any


def attach_questions(
    root: Element, questions: cabc.Mapping[str, QuestionAnswer] | None
) -> int:
    """Append an ``i-question`` element to every section with a known slug.

    Parameters
    ----------
    root : Element
        Grouped document tree.
    questions : Mapping[str, QuestionAnswer] or None
        Lookup table keyed by slug; ``None`` or empty leaves the tree as is.

    Returns
    -------
    int
        Number of question elements appended. Sections sharing a slug each
        receive their own element.
    """
    if not questions:
        return 0
    attached = 0
    for section in list(root.iter(SECTION_TAG)):
        slug = section.get("aria-labelledby")
        if not slug or slug not in questions:
            continue
        item = questions[slug]
        if len(section):
            last = section[-1]
            last.tail = last.tail or "\n"
        marker = SubElement(
            section, QUESTION_TAG, {"question": item.question, "answer": item.answer}
        )
        marker.tail = QUESTION_TRAILER
        attached += 1
    return attached


class QuestionTreeprocessor(Treeprocessor):
    """Join the context's question table onto grouped sections."""

    def __init__(self, md: Markdown, context: ProcessingContext) -> None:
        super().__init__(md)
        self.context = context

    def run(self, root: Element) -> Element:
        """Attach questions when the document carried a frontmatter table."""
        attach_questions(root, self.context.questions)
        return root


__all__ = ["QuestionTreeprocessor", "attach_questions"]
