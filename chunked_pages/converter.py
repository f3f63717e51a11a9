"""File-to-file orchestration for chunked HTML generation.

This module reads markdown sources from disk, renders them with
:class:`~chunked_pages.pipeline.ChunkRenderer`, and writes one HTML file per
source into the configured output directory. It exposes
:class:`DocumentConverter`, which consumes a
:class:`~chunked_pages.config.ConverterConfig`, optionally wraps fragments in
the ``page.jinja`` document, and persists a JSON chunk manifest next to each
page.

Documents are independent: a batch keeps going when one document fails and
reports every failure in the returned :class:`BatchResult`.

Example
-------
>>> from pathlib import Path
>>> from chunked_pages.config import ConverterConfig
>>> from chunked_pages.converter import DocumentConverter
>>> converter = DocumentConverter(ConverterConfig(output_dir=Path("dist")))
>>> converter.output_path_for(Path("content/2-program-structure.md"))
PosixPath('dist/2-program-structure.html')
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import tempfile
import typing as typ
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template

from ._constants import MANIFEST_TEMPLATE, OUTPUT_SUFFIX
from .pipeline import ChunkRenderer, FrontmatterError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import ConverterConfig
    from .pipeline import RenderedDocument

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class ConversionFailure:
    """A document that could not be converted."""

    source: Path
    message: str


@dc.dataclass(slots=True)
class BatchResult:
    """Outcome of converting several documents.

    Attributes
    ----------
    written : list[Path]
        Paths of every artifact written, in input order.
    failures : list[ConversionFailure]
        Documents that failed, in input order.
    """

    written: list[Path] = dc.field(default_factory=list)
    failures: list[ConversionFailure] = dc.field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return ``True`` when every document converted."""
        return not self.failures


def collect_sources(
    paths: cabc.Iterable[Path], *, pattern: str = "*.md", recursive: bool = False
) -> list[Path]:
    """Expand directories into matching files, keeping explicit files as given.

    Directory matches are sorted; duplicates are dropped while preserving the
    first occurrence.
    """
    found: list[Path] = []
    for path in paths:
        if path.is_dir():
            matches = path.rglob(pattern) if recursive else path.glob(pattern)
            found.extend(sorted(match for match in matches if match.is_file()))
        else:
            found.append(path)
    return list(dict.fromkeys(found))


def _write_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` through a temporary sibling file."""
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(text)
        temp_path.replace(path)
    except OSError:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


class DocumentConverter:
    """Convert markdown files into sectioned HTML pages."""

    def __init__(
        self, config: ConverterConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the converter with configuration and template location.

        Parameters
        ----------
        config : ConverterConfig
            Resolved converter settings.
        templates_dir : Path, optional
            Directory containing ``page.jinja``; defaults to the package
            templates. Only read when ``config.standalone`` is set.
        """
        self.config = config
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.renderer = ChunkRenderer(
            extensions=config.extensions,
            pygments_style=config.pygments_style,
            attribute_levels=config.attribute_levels,
            strict_frontmatter=config.strict_frontmatter,
        )
        self._template: Template | None = None

    @property
    def template(self) -> Template:
        """Return the page template, loading it on first use."""
        if self._template is None:
            env = Environment(
                loader=FileSystemLoader(self.templates_dir),
                autoescape=True,
                trim_blocks=True,
                lstrip_blocks=True,
            )
            self._template = env.get_template("page.jinja")
        return self._template

    def ensure_output_dir(self) -> Path:
        """Create the output directory if needed; safe to call repeatedly."""
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        return self.config.output_dir

    def output_path_for(self, source: Path) -> Path:
        """Return the HTML path for ``source``, dropping its directory prefix."""
        return self.config.output_dir / f"{source.stem}{OUTPUT_SUFFIX}"

    def manifest_path_for(self, source: Path) -> Path:
        """Return the chunk manifest path for ``source``."""
        return self.config.output_dir / MANIFEST_TEMPLATE.format(stem=source.stem)

    def render(self, text: str, *, source: Path | None = None) -> RenderedDocument:
        """Render markdown text into a sectioned HTML fragment."""
        return self.renderer.render(text, source=source)

    def convert_file(self, source: Path) -> list[Path]:
        """Convert a single markdown file and return the written paths.

        Returns
        -------
        list[Path]
            The HTML page, followed by the chunk manifest when enabled.

        Raises
        ------
        OSError
            If the source cannot be read or an output cannot be written.
        FrontmatterError
            If strict frontmatter handling is enabled and the block is
            malformed.
        """
        text = source.read_text(encoding="utf-8")
        document = self.render(text, source=source)
        html = self._wrap(document, source) if self.config.standalone else document.html
        if not html.endswith("\n"):
            html += "\n"
        manifest = (
            self._manifest_text(source, document)
            if self.config.write_manifest
            else None
        )

        self.ensure_output_dir()
        output_path = self.output_path_for(source)
        _write_atomic(output_path, html)
        written = [output_path]
        if manifest is not None:
            manifest_path = self.manifest_path_for(source)
            try:
                _write_atomic(manifest_path, manifest)
            except OSError:
                output_path.unlink(missing_ok=True)
                raise
            written.append(manifest_path)
        logger.debug(
            "Rendered %s into %d chunk(s) at %s",
            source,
            len(document.chunks),
            output_path,
        )
        return written

    def convert_all(self, sources: cabc.Iterable[Path]) -> BatchResult:
        """Convert every source, continuing past per-document failures.

        Sources whose output path is already claimed by an earlier source in
        the batch are reported as failures instead of overwriting it.
        """
        pending = list(sources)
        clashes = self._output_clashes(pending)
        self.ensure_output_dir()
        if self.config.jobs > 1 and len(pending) > 1:
            with ThreadPoolExecutor(max_workers=self.config.jobs) as pool:
                outcomes = list(pool.map(self._attempt, pending, clashes))
        else:
            outcomes = [
                self._attempt(source, clash)
                for source, clash in zip(pending, clashes, strict=True)
            ]

        result = BatchResult()
        for outcome in outcomes:
            if isinstance(outcome, ConversionFailure):
                result.failures.append(outcome)
            else:
                result.written.extend(outcome)
        return result

    def _output_clashes(
        self, sources: list[Path]
    ) -> list[ConversionFailure | None]:
        """Return a failure for each source whose output path is already taken."""
        claimed: dict[Path, Path] = {}
        clashes: list[ConversionFailure | None] = []
        for source in sources:
            target = self.output_path_for(source)
            if target not in claimed:
                claimed[target] = source
                clashes.append(None)
                continue
            message = f"output {target} is already written by {claimed[target]}"
            logger.warning("Skipping %s: %s", source, message)
            clashes.append(ConversionFailure(source=source, message=message))
        return clashes

    def _attempt(
        self, source: Path, clash: ConversionFailure | None = None
    ) -> list[Path] | ConversionFailure:
        """Convert ``source``, turning document-scoped errors into failures."""
        if clash is not None:
            return clash
        try:
            return self.convert_file(source)
        except (OSError, UnicodeDecodeError, FrontmatterError) as exc:
            logger.warning("Failed to convert %s: %s", source, exc)
            return ConversionFailure(source=source, message=str(exc))

    def _wrap(self, document: RenderedDocument, source: Path) -> str:
        """Render the standalone page around a chunk fragment."""
        chunks = document.chunks
        title = chunks[0].title if chunks and chunks[0].title else source.stem
        context = {
            "title": title,
            "body": document.html,
            "chunks": chunks,
            "stylesheet": self.renderer.stylesheet
            if self.renderer.highlights_code
            else "",
        }
        return self.template.render(**context)

    @staticmethod
    def _manifest_text(source: Path, document: RenderedDocument) -> str:
        """Return the chunk index JSON for ``source``."""
        payload = {
            "source": source.name,
            "chunks": [chunk.as_dict() for chunk in document.chunks],
        }
        return json.dumps(payload, indent=2) + "\n"


__all__ = [
    "BatchResult",
    "ConversionFailure",
    "DocumentConverter",
    "collect_sources",
]
