r"""Read the YAML frontmatter block that carries chunk questions.

Documents may open with a block delimited by ``---`` lines whose ``cri``
field lists constructed-response questions keyed by chunk slug::

    ---
    cri:
      - slug: intro
        question: "What is X?"
        answer: "X is Y."
    ---

:func:`read_frontmatter` turns that block into a slug lookup table and
returns the remaining markdown. :class:`FrontmatterPreprocessor` does the same
inside python-markdown, storing the table on the shared
:class:`~chunked_pages.pipeline.models.ProcessingContext`.

Example
-------
>>> from chunked_pages.pipeline.frontmatter import read_frontmatter
>>> table, body = read_frontmatter(
...     "---\ncri:\n  - slug: a\n    question: Q\n    answer: A\n---\n## Hi"
... )
>>> table["a"].question, body
('Q', '## Hi')
"""

from __future__ import annotations

import logging
import re
import typing as typ

from markdown.preprocessors import Preprocessor
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .models import QuestionAnswer

if typ.TYPE_CHECKING:
    from markdown import Markdown

    from .models import ProcessingContext
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    ProcessingContext = typ.Any

logger = logging.getLogger(__name__)

FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)
QUESTION_FIELDS = ("slug", "question", "answer")


class FrontmatterError(ValueError):
    """Raised when the frontmatter block is not a valid question table."""


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Return the raw frontmatter block (or ``None``) and the remaining text."""
    match = FRONTMATTER_PATTERN.match(text)
    if match is None:
        return None, text
    return match.group(1), text[match.end() :]


def _build_entry(index: int, entry: object) -> QuestionAnswer:
    """Validate a single ``cri`` entry and convert it into a QuestionAnswer."""
    if not isinstance(entry, dict):
        msg = f"cri entry {index} must be a mapping, got {type(entry).__name__}"
        raise FrontmatterError(msg)
    missing = [field for field in QUESTION_FIELDS if entry.get(field) is None]
    if missing:
        msg = f"cri entry {index} is missing {', '.join(missing)}"
        raise FrontmatterError(msg)
    return QuestionAnswer(
        slug=str(entry["slug"]),
        question=str(entry["question"]),
        answer=str(entry["answer"]),
    )


def parse_question_table(block: str) -> dict[str, QuestionAnswer]:
    """Parse a frontmatter block into a question lookup table keyed by slug.

    Parameters
    ----------
    block : str
        YAML text found between the ``---`` delimiters.

    Returns
    -------
    dict[str, QuestionAnswer]
        Questions keyed by slug. Empty when the block is empty or has no
        ``cri`` field. A repeated slug keeps its last entry.

    Raises
    ------
    FrontmatterError
        If the block is not valid YAML, is not a mapping, its ``cri`` field
        is not a sequence, or an entry lacks ``slug``, ``question`` or
        ``answer``.
    """
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(block)
    except YAMLError as exc:
        msg = f"frontmatter is not valid YAML: {exc}"
        raise FrontmatterError(msg) from exc

    match loaded:
        case None:
            return {}
        case dict():
            entries = loaded.get("cri")
        case _:
            msg = "frontmatter must be a mapping."
            raise FrontmatterError(msg)

    if entries is None:
        return {}
    if not isinstance(entries, list):
        msg = "frontmatter field 'cri' must be a sequence."
        raise FrontmatterError(msg)

    table: dict[str, QuestionAnswer] = {}
    for index, entry in enumerate(entries):
        item = _build_entry(index, entry)
        table[item.slug] = item
    return table


def read_frontmatter(text: str) -> tuple[dict[str, QuestionAnswer] | None, str]:
    """Extract the question table and return it with the remaining markdown.

    The table is ``None`` when ``text`` does not open with a frontmatter
    block; in that case ``text`` is returned unchanged.
    """
    block, body = split_frontmatter(text)
    if block is None:
        return None, text
    return parse_question_table(block), body


class FrontmatterPreprocessor(Preprocessor):
    """Strip the frontmatter block and publish its questions on the context.

    A malformed block is tolerated by default: the warning is logged, the
    message is kept on ``context.frontmatter_error``, and the document renders
    without questions. With ``context.strict_frontmatter`` set the
    :class:`FrontmatterError` propagates and aborts the document.
    """

    def __init__(self, md: Markdown, context: ProcessingContext) -> None:
        super().__init__(md)
        self.context = context

    def run(self, lines: list[str]) -> list[str]:
        """Return the document lines that follow the frontmatter block."""
        block, body = split_frontmatter("\n".join(lines))
        if block is None:
            return lines
        try:
            self.context.questions = parse_question_table(block)
        except FrontmatterError as exc:
            if self.context.strict_frontmatter:
                raise
            source = self.context.source or "<string>"
            logger.warning("Ignoring frontmatter in %s: %s", source, exc)
            self.context.questions = {}
            self.context.frontmatter_error = str(exc)
        return body.split("\n")


__all__ = [
    "FrontmatterError",
    "FrontmatterPreprocessor",
    "parse_question_table",
    "read_frontmatter",
    "split_frontmatter",
]
