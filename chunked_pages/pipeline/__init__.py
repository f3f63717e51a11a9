"""Markdown stages that turn annotated documents into content chunks."""

from .attributes import HeadingAttributeTreeprocessor, parse_heading_attributes
from .extension import ChunkedSectionsExtension
from .frontmatter import FrontmatterError, read_frontmatter
from .models import (
    ChunkSummary,
    HeadingAttributes,
    ProcessingContext,
    QuestionAnswer,
    RenderedDocument,
)
from .questions import attach_questions
from .renderer import ChunkRenderer, render_markdown
from .sections import group_sections

__all__ = [
    "ChunkRenderer",
    "ChunkSummary",
    "ChunkedSectionsExtension",
    "FrontmatterError",
    "HeadingAttributeTreeprocessor",
    "HeadingAttributes",
    "ProcessingContext",
    "QuestionAnswer",
    "RenderedDocument",
    "attach_questions",
    "group_sections",
    "parse_heading_attributes",
    "read_frontmatter",
    "render_markdown",
]
