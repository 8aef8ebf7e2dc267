"""Typed dataclasses describing folio generator configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from folio._constants import DEFAULT_FILENAME, MAX_PASSES
from folio.errors import ConfigError
from folio.render.options import RenderOptions

PAPER_SIZES = ("A4", "A5", "LETTER", "LEGAL")
LATEX_PAPER_NAMES: dict[str, str] = {
    "A4": "a4paper",
    "A5": "a5paper",
    "LETTER": "letterpaper",
    "LEGAL": "legalpaper",
}


@dc.dataclass(slots=True)
class LatexOptions:
    """Settings of the LaTeX toolchain."""

    command: str = "pdflatex"
    babel_lang: str = "english"


@dc.dataclass(slots=True)
class GeneratorOptions:
    """Resolved settings of one documentation build.

    Attributes
    ----------
    title : str or None
        Document title; the documentation dump's own title when ``None``.
    output_dir : Path
        Directory receiving the PDF and the landing page.
    filename : str
        Name of the generated PDF inside ``output_dir``.
    paper_size : str
        One of :data:`PAPER_SIZES`.
    show_pages, show_hash, hyperlink_all : bool
        Cross-reference display flags.
    main_page : str or None
        Free page rendered first.
    pygments_style : str
        Colour scheme for verbatim blocks.
    source_language : str or None
        Lexer used to highlight verbatim blocks.
    max_passes : int
        Upper bound on rendering passes.
    latex : LatexOptions
        Toolchain settings of the LaTeX path.
    """

    title: str | None = None
    output_dir: Path = Path("doc")
    filename: str = DEFAULT_FILENAME
    paper_size: str = "A4"
    show_pages: bool = True
    show_hash: bool = False
    hyperlink_all: bool = False
    main_page: str | None = None
    pygments_style: str = "default"
    source_language: str | None = None
    max_passes: int = MAX_PASSES
    latex: LatexOptions = dc.field(default_factory=LatexOptions)

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.filename

    @property
    def latex_paper(self) -> str:
        return LATEX_PAPER_NAMES[self.paper_size]

    @property
    def render_options(self) -> RenderOptions:
        return RenderOptions(
            show_pages=self.show_pages,
            show_hash=self.show_hash,
            hyperlink_all=self.hyperlink_all,
            main_page=self.main_page,
            max_passes=self.max_passes,
        )

    def validate(self) -> GeneratorOptions:
        """Check value ranges and return ``self``.

        Raises
        ------
        ConfigError
            If the paper size is unknown, the pass limit is below one, or
            the filename is empty.
        """
        if self.paper_size not in PAPER_SIZES:
            msg = (
                f"Unknown paper size '{self.paper_size}'; "
                f"expected one of {', '.join(PAPER_SIZES)}."
            )
            raise ConfigError(msg)
        if self.max_passes < 1:
            msg = f"max_passes must be at least 1, got {self.max_passes}."
            raise ConfigError(msg)
        if not self.filename:
            msg = "filename must not be empty."
            raise ConfigError(msg)
        return self


__all__ = ["LATEX_PAPER_NAMES", "PAPER_SIZES", "GeneratorOptions", "LatexOptions"]
