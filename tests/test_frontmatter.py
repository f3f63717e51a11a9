"""Unit tests for reading chunk questions from YAML frontmatter.

Usage
-----
Run ``pytest tests/test_frontmatter.py -v``. The preprocessor tests build a
bare ``markdown.Markdown`` instance and need no other fixtures.
"""

from __future__ import annotations

from textwrap import dedent

import pytest
from markdown import Markdown

from chunked_pages.pipeline import FrontmatterError, ProcessingContext, read_frontmatter
from chunked_pages.pipeline.frontmatter import (
    FrontmatterPreprocessor,
    parse_question_table,
    split_frontmatter,
)

VALID_DOCUMENT = dedent(
    """\
    ---
    cri:
      - slug: intro
        question: "What is X?"
        answer: "X is Y."
      - slug: usage
        question: How?
        answer: Like this.
    ---
    ## Intro {#intro}
    Some text.
    """
)


def test_question_table_is_keyed_by_slug() -> None:
    """Every ``cri`` entry becomes a lookup entry and the block is removed."""
    table, body = read_frontmatter(VALID_DOCUMENT)
    assert table is not None, "expected a question table"
    assert sorted(table) == ["intro", "usage"]
    assert table["intro"].question == "What is X?"
    assert table["intro"].answer == "X is Y."
    assert body == "## Intro {#intro}\nSome text.\n"


def test_document_without_frontmatter_passes_through() -> None:
    """Text not opening with ``---`` yields no table and stays unchanged."""
    text = "## Intro\n---\ncri: []\n---\n"
    table, body = read_frontmatter(text)
    assert table is None
    assert body == text


def test_block_without_questions_yields_empty_table() -> None:
    """Frontmatter lacking ``cri`` is valid and simply has no questions."""
    table, body = read_frontmatter("---\ntitle: Program structure\n---\n## A\n")
    assert table == {}
    assert body == "## A\n"


def test_empty_block_yields_empty_table() -> None:
    """A blank frontmatter block parses as an empty table."""
    assert parse_question_table("") == {}


def test_windows_line_endings_are_accepted() -> None:
    """CRLF delimiters are recognised."""
    block, body = split_frontmatter("---\r\ncri: []\r\n---\r\n## A")
    assert block == "cri: []"
    assert body == "## A"


def test_repeated_slug_keeps_last_entry() -> None:
    """Later entries replace earlier ones with the same slug."""
    table = parse_question_table(
        "cri:\n"
        "  - {slug: a, question: first, answer: one}\n"
        "  - {slug: a, question: second, answer: two}\n"
    )
    assert table["a"].question == "second"


def test_scalar_values_are_stringified() -> None:
    """Numbers and booleans in the YAML are kept as their text form."""
    table = parse_question_table("cri:\n  - {slug: 7, question: Q, answer: 42}\n")
    assert table["7"].answer == "42"


@pytest.mark.parametrize(
    ("block", "message"),
    [
        ("cri: [unclosed", "not valid YAML"),
        ("- just\n- a list", "must be a mapping"),
        ("cri: nope", "must be a sequence"),
        ("cri:\n  - plain string", "entry 0 must be a mapping"),
        ("cri:\n  - {slug: a, question: Q}", "entry 0 is missing answer"),
        ("cri:\n  - {question: Q, answer: A}", "entry 0 is missing slug"),
    ],
)
def test_malformed_blocks_raise(block: str, message: str) -> None:
    """Malformed question tables raise FrontmatterError with a helpful message."""
    with pytest.raises(FrontmatterError, match=message):
        parse_question_table(block)


def test_preprocessor_publishes_table_on_context() -> None:
    """The preprocessor strips the block and stores the questions."""
    context = ProcessingContext()
    processor = FrontmatterPreprocessor(Markdown(), context)
    lines = processor.run(VALID_DOCUMENT.split("\n"))
    assert lines[0] == "## Intro {#intro}"
    assert context.questions is not None
    assert context.lookup("usage").answer == "Like this."
    assert context.lookup("missing") is None


def test_preprocessor_leaves_plain_documents_alone() -> None:
    """Documents without frontmatter keep their lines and a ``None`` table."""
    context = ProcessingContext()
    lines = ["## Intro", "text"]
    assert FrontmatterPreprocessor(Markdown(), context).run(lines) == lines
    assert context.questions is None


def test_preprocessor_tolerates_malformed_block(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """By default a malformed block is logged and skipped."""
    context = ProcessingContext()
    processor = FrontmatterPreprocessor(Markdown(), context)
    with caplog.at_level("WARNING", logger="chunked_pages.pipeline.frontmatter"):
        lines = processor.run(["---", "cri: nope", "---", "## Intro"])
    assert lines == ["## Intro"], "expected the malformed block to be stripped"
    assert context.questions == {}
    assert context.frontmatter_error is not None
    assert "Ignoring frontmatter" in caplog.text


def test_preprocessor_raises_in_strict_mode() -> None:
    """Strict mode lets the FrontmatterError abort the document."""
    context = ProcessingContext(strict_frontmatter=True)
    processor = FrontmatterPreprocessor(Markdown(), context)
    with pytest.raises(FrontmatterError):
        processor.run(["---", "cri: nope", "---", "## Intro"])
