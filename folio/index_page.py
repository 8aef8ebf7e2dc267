"""Build the HTML landing page that sits next to the generated PDF.

The page names the project, summarises it with the first paragraph of the
main free page, links to the PDF and lists the documented classes and
modules so readers know what the file covers before downloading it.

>>> from folio.config import GeneratorOptions
>>> from folio.model import DocumentationStore
>>> builder = IndexPageBuilder(DocumentationStore(), GeneratorOptions())
>>> builder.run()  # doctest: +SKIP
PosixPath('doc/index.html')
"""

from __future__ import annotations

import datetime as dt
import os
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ._constants import INDEX_FILENAME
from .model.markup import Paragraph, plain_text

if typ.TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from .config import GeneratorOptions
    from .model.entities import DocumentationStore
    from .render.orchestrator import GenerationResult


class IndexPageBuilder:
    """Render ``index.html`` describing and linking the generated PDF."""

    def __init__(
        self,
        store: DocumentationStore,
        options: GeneratorOptions,
        *,
        result: GenerationResult | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the landing page builder.

        Parameters
        ----------
        store : DocumentationStore
            Documented entities; their names fill the contents list.
        options : GeneratorOptions
            Title, main page, and output location of the PDF.
        result : GenerationResult, optional
            Outcome of the PDF run, used to report unplaced references.
        templates_dir : Path, optional
            Directory containing the Jinja templates. Defaults to the
            ``folio/templates`` directory when ``None``.
        """
        self.store = store
        self.options = options
        self.result = result
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("index.html.jinja")

    @property
    def output_path(self) -> Path:
        return self.options.output_dir / INDEX_FILENAME

    def run(self) -> Path:
        """Render the landing page and return its path."""
        output_path = self.output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)
        context = {
            "title": self.options.title or self.store.title,
            "summary": self._summary(),
            "pdf_href": _relative_href(self.options.output_path, output_path.parent),
            "pdf_size": _file_size(self.options.output_path),
            "pages": [
                page.name for page in self.store.ordered_pages(self.options.main_page)
            ],
            "entries": self._entries(),
            "unresolved": list(self.result.unresolved) if self.result else [],
            "generated_at": dt.datetime.now(dt.UTC),
        }
        html = self.template.render(**context)
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def _summary(self) -> str:
        """First paragraph of the main free page, as plain text."""
        pages = self.store.ordered_pages(self.options.main_page)
        if not pages:
            return ""
        for block in pages[0].body.parts:
            if isinstance(block, Paragraph):
                return plain_text(block.parts).strip()
        return ""

    def _entries(self) -> list[dict[str, str]]:
        return [
            {
                "name": cm.full_name,
                "kind": "module" if cm.is_module else "class",
                "methods": str(len(cm.methods)),
            }
            for cm in self.store.classes_and_modules()
        ]


def _relative_href(target: Path, relative_to: Path) -> str:
    return Path(os.path.relpath(target, start=relative_to)).as_posix()


def _file_size(path: Path) -> str | None:
    """Human-readable size of ``path`` or ``None`` when it does not exist."""
    if not path.exists():
        return None
    size = path.stat().st_size
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KiB"
    return f"{size / (1024 * 1024):.1f} MiB"


__all__ = ["IndexPageBuilder"]
