r"""Parse trailing ``{#id .class key=value}`` annotations on headings.

Markdown authors tag chunk headings with a brace annotation that carries the
chunk slug, presentation classes, and arbitrary data attributes::

    ## Program structure {#program-structure .sr-only level=intro}

:func:`parse_heading_attributes` strips the annotation from the visible text
and returns the parsed :class:`HeadingAttributes`.
:class:`HeadingAttributeTreeprocessor` applies it to every heading in a
python-markdown tree, rendering the property bag as HTML attributes.

Example
-------
>>> from chunked_pages.pipeline.attributes import parse_heading_attributes
>>> text, attrs = parse_heading_attributes("Title {#intro .big key=val}")
>>> text, attrs.properties()
('Title', {'id': 'intro', 'class': 'big', 'dataKey': 'val'})
"""

from __future__ import annotations

import re
import typing as typ

from markdown.treeprocessors import Treeprocessor

from .models import HeadingAttributes

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

TRAILING_ATTRIBUTES_PATTERN = re.compile(r" \{([^}]+)\}$")
ID_TOKEN_PATTERN = re.compile(r"(?:^|\s)#([^\s}]+)")
CLASS_TOKEN_PATTERN = re.compile(r"(?:^|\s)\.([^\s}]+)")
DATA_TOKEN_PATTERN = re.compile(r"([^\s=#.}][^\s=}]*)\s*=\s*([^\s}]+)")
CAMEL_BOUNDARY_PATTERN = re.compile(r"[A-Z]")


def parse_attribute_span(span: str) -> HeadingAttributes:
    """Parse the inside of a brace annotation into heading attributes.

    The first ``#`` token wins; every ``.`` token and ``key=value`` pair is
    kept in order of appearance. Unrecognised tokens are ignored.
    """
    id_match = ID_TOKEN_PATTERN.search(span)
    return HeadingAttributes(
        id=id_match.group(1) if id_match else None,
        classes=[match.group(1) for match in CLASS_TOKEN_PATTERN.finditer(span)],
        data={
            match.group(1): match.group(2)
            for match in DATA_TOKEN_PATTERN.finditer(span)
        },
    )


def parse_heading_attributes(text: str) -> tuple[str, HeadingAttributes] | None:
    """Split heading text into visible text and its trailing annotation.

    Parameters
    ----------
    text : str
        Final text run of a heading.

    Returns
    -------
    tuple[str, HeadingAttributes] or None
        The text preceding the annotation together with the parsed
        attributes, or ``None`` when the (right-trimmed) text does not end
        with a `` {...}`` annotation.
    """
    trimmed = text.rstrip()
    match = TRAILING_ATTRIBUTES_PATTERN.search(trimmed)
    if match is None:
        return None
    return trimmed[: match.start()], parse_attribute_span(match.group(1))


def property_to_attribute(name: str) -> str:
    """Return the HTML attribute name for a camel-cased property name.

    >>> property_to_attribute("dataChunkLevel")
    'data-chunk-level'
    >>> property_to_attribute("class")
    'class'
    """
    if not name.startswith("data") or name == "data":
        return name
    rest = CAMEL_BOUNDARY_PATTERN.sub(lambda m: f"-{m.group(0).lower()}", name[4:])
    return f"data{rest}" if rest.startswith("-") else f"data-{rest}"


def extract_heading_attributes(heading: Element) -> HeadingAttributes | None:
    """Strip a trailing annotation from ``heading`` and return its attributes.

    Only the final text run is inspected: the heading's ``text`` when it has
    no child elements, otherwise the ``tail`` of its last child. Headings
    whose final run is missing or unannotated are left untouched.
    """
    children = list(heading)
    text = children[-1].tail if children else heading.text
    if not text:
        return None
    parsed = parse_heading_attributes(text)
    if parsed is None:
        return None
    visible, attributes = parsed
    if children:
        children[-1].tail = visible or None
    else:
        heading.text = visible
    return attributes


def apply_heading_attributes(heading: Element, attributes: HeadingAttributes) -> None:
    """Render the attribute property bag onto ``heading`` as HTML attributes."""
    for name, value in attributes.properties().items():
        heading.set(property_to_attribute(name), value)


class HeadingAttributeTreeprocessor(Treeprocessor):
    """Move heading brace annotations into element attributes."""

    def __init__(self, md: Markdown, levels: cabc.Iterable[int] = (2,)) -> None:
        super().__init__(md)
        self.tags = frozenset({"h2", *(f"h{level}" for level in levels)})

    def run(self, root: Element) -> Element:
        """Apply annotations found on headings of the configured levels."""
        for element in root.iter():
            if element.tag not in self.tags:
                continue
            attributes = extract_heading_attributes(element)
            if attributes is not None:
                apply_heading_attributes(element, attributes)
        return root


__all__ = [
    "HeadingAttributeTreeprocessor",
    "apply_heading_attributes",
    "extract_heading_attributes",
    "parse_attribute_span",
    "parse_heading_attributes",
    "property_to_attribute",
]
