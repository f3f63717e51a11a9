"""Unit tests for grouping a flat document flow into content chunks."""

from __future__ import annotations

from xml.etree.ElementTree import Element, SubElement

from chunked_pages.pipeline.sections import group_sections, summarize_sections


def _paragraph(parent: Element, text: str) -> Element:
    node = SubElement(parent, "p")
    node.text = text
    node.tail = "\n"
    return node


def _heading(parent: Element, text: str, **attrib: str) -> Element:
    node = SubElement(parent, "h2", attrib)
    node.text = text
    node.tail = "\n"
    return node


def _sample_root() -> Element:
    root = Element("div")
    root.text = "\n"
    _paragraph(root, "preamble")
    _heading(root, "Intro", id="intro", **{"class": "big"})
    _paragraph(root, "intro one")
    SubElement(root, "ul").tail = "\n"
    _heading(root, "Next")
    _paragraph(root, "next one")
    return root


def test_one_section_per_heading_in_order() -> None:
    """Each ``h2`` opens a section and sections keep heading order."""
    root = _sample_root()
    sections = group_sections(root)

    assert [child.tag for child in root] == ["section", "section"]
    assert len(sections) == 2, f"expected 2 sections, got {len(sections)}"
    first, second = sections
    assert first.get("class") == "content-chunk"
    assert first.get("data-chunk-slug") == "intro"
    assert first.get("aria-labelledby") == "intro"
    assert [child.tag for child in first] == ["h2", "p", "ul"]
    assert [child.tag for child in second] == ["h2", "p"]
    assert first[1].text == "intro one"
    assert second[1].text == "next one"


def test_content_before_first_heading_is_dropped() -> None:
    """The preamble paragraph never reaches the output tree."""
    root = _sample_root()
    group_sections(root)
    assert "preamble" not in "".join(root.itertext())
    assert root.text is None


def test_heading_without_id_has_no_slug_attributes() -> None:
    """Sections for unannotated headings only carry the chunk class."""
    root = _sample_root()
    second = group_sections(root)[1]
    assert second.attrib == {"class": "content-chunk"}


def test_heading_attributes_and_children_are_relocated() -> None:
    """The new heading copies attributes and takes over inline children."""
    root = Element("div")
    original = _heading(root, "The ", id="idea", **{"class": "lead"})
    emphasis = SubElement(original, "em")
    emphasis.text = "big"
    emphasis.tail = " idea"

    section = group_sections(root)[0]
    heading = section[0]

    assert heading is not original
    assert heading.attrib == {"id": "idea", "class": "lead"}
    assert heading.text == "The "
    assert list(heading) == [emphasis]
    assert len(original) == 0, "expected children to move rather than be shared"


def test_sections_are_separated_by_blank_lines() -> None:
    """Sibling sections get a separator tail, the last one does not."""
    root = _sample_root()
    first, second = group_sections(root)
    assert first.tail == "\n\n"
    assert second.tail is None


def test_document_without_headings_becomes_empty() -> None:
    """With no ``h2`` every node is pre-heading content and is dropped."""
    root = Element("div")
    _paragraph(root, "only text")
    assert group_sections(root) == []
    assert len(root) == 0


def test_nested_headings_are_not_section_boundaries() -> None:
    """Only direct children of the root split sections."""
    root = Element("div")
    _heading(root, "Intro", id="intro")
    quote = SubElement(root, "blockquote")
    _heading(quote, "Quoted")
    _paragraph(root, "after quote")

    sections = group_sections(root)

    assert len(sections) == 1
    assert [child.tag for child in sections[0]] == ["h2", "blockquote", "p"]
    assert sections[0][1][0].tag == "h2"


def test_summaries_follow_section_order() -> None:
    """The chunk index lists slug, title and classes per section."""
    root = _sample_root()
    group_sections(root)
    summaries = summarize_sections(root)
    assert [(item.slug, item.title) for item in summaries] == [
        ("intro", "Intro"),
        (None, "Next"),
    ]
    assert summaries[0].classes == ["big"]
    assert not any(item.has_question for item in summaries)
