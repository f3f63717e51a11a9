"""Unit tests for attaching frontmatter questions to content chunks."""

from __future__ import annotations

from xml.etree.ElementTree import Element, SubElement

from chunked_pages.pipeline import QuestionAnswer, attach_questions

QUESTIONS = {"intro": QuestionAnswer(slug="intro", question="Q", answer="A")}


def _section(root: Element, slug: str | None) -> Element:
    attrib = {"class": "content-chunk"}
    if slug:
        attrib["aria-labelledby"] = slug
    section = SubElement(root, "section", attrib)
    SubElement(section, "h2").text = slug or "untitled"
    SubElement(section, "p").text = "body"
    return section


def test_matching_section_gains_one_question() -> None:
    """The question element is appended as the section's last child."""
    root = Element("div")
    section = _section(root, "intro")

    assert attach_questions(root, QUESTIONS) == 1

    marker = section[-1]
    assert marker.tag == "i-question"
    assert marker.attrib == {"question": "Q", "answer": "A"}
    assert len(marker) == 0, "expected a childless question element"
    assert len(section.findall("i-question")) == 1


def test_unknown_slug_is_left_unchanged() -> None:
    """Sections whose slug is absent from the table are not modified."""
    root = Element("div")
    section = _section(root, "other")
    before = [child.tag for child in section]

    assert attach_questions(root, QUESTIONS) == 0
    assert [child.tag for child in section] == before


def test_missing_table_is_a_no_op() -> None:
    """Without a lookup table nothing is attached."""
    root = Element("div")
    section = _section(root, "intro")
    assert attach_questions(root, None) == 0
    assert attach_questions(root, {}) == 0
    assert section.find("i-question") is None


def test_sections_without_slug_are_skipped() -> None:
    """Only sections carrying ``aria-labelledby`` take part in the join."""
    root = Element("div")
    section = _section(root, None)
    assert attach_questions(root, QUESTIONS) == 0
    assert section.find("i-question") is None


def test_duplicate_slugs_each_receive_a_question() -> None:
    """Sections sharing a slug are enriched independently."""
    root = Element("div")
    first = _section(root, "intro")
    second = _section(root, "intro")

    assert attach_questions(root, QUESTIONS) == 2
    assert first[-1].tag == "i-question"
    assert second[-1].tag == "i-question"
