"""PDF backend built on fpdf2.

fpdf2 does the line wrapping and page breaking; this module maps the
renderer's operations onto it and keeps one internal link per anchor so
references made before their target is placed still jump to the right spot
once the destination is added.
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from fpdf import FPDF
from fpdf.enums import MethodReturnValue, XPos, YPos

from folio._constants import (
    BASE_FONT,
    BASE_FONT_SIZE,
    CAPTION_FONT_SIZE,
    DECORATION_COLOR,
    HEADING_SIZES,
    LABEL_BOX_COLOR,
    LINK_COLOR,
    METHOD_INDENTATION,
    MONO_FONT,
)

from .highlight import CodeHighlighter

if typ.TYPE_CHECKING:
    from .base import Cell, Run

logger = logging.getLogger(__name__)

MARGIN = 56.7
"""Top, left and right margins (2 cm); the bottom margin is twice as large."""

LINE_HEIGHT_FACTOR = 1.3
PARAGRAPH_GAP = 4
BULLET_SIZE = 3
PAGE_NUMBER_WIDTH_TEXT = "99999"

_LATIN1_REPLACEMENTS = str.maketrans(
    {
        "…": "...",
        "–": "-",
        "—": "-",
        "‘": "'",
        "’": "'",
        "“": '"',
        "”": '"',
        "•": "*",
        "→": "->",
    }
)


def to_latin1(text: str) -> str:
    """Replace characters the core PDF fonts cannot encode.

    >>> to_latin1("Value…")
    'Value...'
    """
    replaced = text.translate(_LATIN1_REPLACEMENTS)
    return replaced.encode("latin-1", "replace").decode("latin-1")


class _NumberedPDF(FPDF):
    """FPDF document printing the page number in the footer."""

    def footer(self) -> None:
        self.set_y(-0.5 * self.b_margin)
        self.set_font(BASE_FONT, "", CAPTION_FONT_SIZE)
        self.set_text_color(0, 0, 0)
        self.cell(0, CAPTION_FONT_SIZE, str(self.page_no()), align="R")


class FpdfBackend:
    """Output document of one rendering pass.

    Parameters
    ----------
    paper_size : str, optional
        Any page format fpdf2 understands (``"A4"``, ``"Letter"``).
    language : str, optional
        Default Pygments lexer for verbatim blocks.
    pygments_style : str, optional
        Pygments style used to colour verbatim blocks.
    title : str, optional
        Document title stored in the PDF metadata.
    """

    def __init__(
        self,
        paper_size: str = "A4",
        *,
        language: str | None = None,
        pygments_style: str = "default",
        title: str | None = None,
    ) -> None:
        self.pdf = _NumberedPDF(orientation="portrait", unit="pt", format=paper_size)
        self.pdf.set_margins(MARGIN, MARGIN, MARGIN)
        self.pdf.set_auto_page_break(True, margin=2 * MARGIN)
        if title:
            self.pdf.set_title(to_latin1(title))
        self.highlighter = CodeHighlighter(pygments_style, language)
        self._links: dict[str, int] = {}
        self._use_font()

    @property
    def line_height(self) -> float:
        return self.pdf.font_size_pt * LINE_HEIGHT_FACTOR

    # Fonts and links --------------------------------------------------------

    def _use_font(
        self,
        *,
        bold: bool = False,
        italic: bool = False,
        mono: bool = False,
        size: float = BASE_FONT_SIZE,
    ) -> None:
        style = ("B" if bold else "") + ("I" if italic else "")
        family = MONO_FONT if mono else BASE_FONT
        self.pdf.set_font(family, style, size - 1 if mono else size)

    def _link(self, anchor: str) -> int:
        link = self._links.get(anchor)
        if link is None:
            link = self.pdf.add_link()
            self._links[anchor] = link
        return link

    def _write_runs(
        self, runs: typ.Sequence[Run], size: float = BASE_FONT_SIZE
    ) -> None:
        line_height = size * LINE_HEIGHT_FACTOR
        for run in runs:
            self._use_font(bold=run.bold, italic=run.italic, mono=run.mono, size=size)
            link: int | str = ""
            if run.anchor is not None:
                link = self._link(run.anchor)
                self.pdf.set_text_color(*LINK_COLOR)
            elif run.url is not None:
                link = run.url
                self.pdf.set_text_color(*LINK_COLOR)
            else:
                self.pdf.set_text_color(0, 0, 0)
            self.pdf.write(line_height, to_latin1(run.text), link)
        self.pdf.set_text_color(0, 0, 0)
        self._use_font()

    # Flowing content ---------------------------------------------------------

    def paragraph(self, runs: typ.Sequence[Run]) -> None:
        self.pdf.set_x(self.pdf.l_margin)
        self._write_runs(runs)
        self.pdf.ln(self.line_height)
        self.pdf.ln(PARAGRAPH_GAP)

    def heading(self, level: int, runs: typ.Sequence[Run]) -> None:
        size = HEADING_SIZES[level] if 0 < level < len(HEADING_SIZES) else None
        self.pdf.set_x(self.pdf.l_margin)
        if size is None:
            self._write_runs([run.styled(bold=True) for run in runs])
            self.pdf.ln(self.line_height)
            return
        self._write_runs(runs, size)
        self.pdf.ln(size * LINE_HEIGHT_FACTOR)
        self.pdf.ln(PARAGRAPH_GAP)

    def verbatim(self, text: str) -> None:
        self.pdf.set_x(self.pdf.l_margin)
        line_height = (BASE_FONT_SIZE - 1) * LINE_HEIGHT_FACTOR
        for token in self.highlighter.tokens(text):
            self._use_font(bold=token.bold, italic=token.italic, mono=True)
            self.pdf.set_text_color(*(token.color or (0, 0, 0)))
            self.pdf.write(line_height, to_latin1(token.text))
        self.pdf.set_text_color(0, 0, 0)
        self._use_font()
        self.pdf.ln(line_height)
        self.pdf.ln(self.line_height)

    def rule(self, weight: float = 1) -> None:
        y = self.pdf.get_y()
        self.pdf.set_line_width(weight)
        self.pdf.line(self.pdf.l_margin, y, self.pdf.w - self.pdf.r_margin, y)
        self.pdf.set_line_width(1)
        self.pdf.set_y(y + weight + PARAGRAPH_GAP)

    def raw(self, text: str) -> None:
        self.pdf.set_x(self.pdf.l_margin)
        self.pdf.write(self.line_height, to_latin1(text))
        self.pdf.ln(self.line_height)

    def blank_line(self) -> None:
        self.pdf.ln(self.line_height)

    def caption(self, text: str) -> None:
        self.pdf.set_x(self.pdf.l_margin)
        self._use_font(size=HEADING_SIZES[4] or BASE_FONT_SIZE)
        self.pdf.cell(0, self.line_height, to_latin1(text.upper()))
        self.pdf.ln(self.line_height)
        self._use_font()

    def new_page(self) -> None:
        self.pdf.add_page()
        self._use_font()

    def ensure_space(self, lines: int) -> None:
        if self.pdf.will_page_break(lines * self.line_height):
            self.new_page()

    def method_header(self, name: str, call_seq: str) -> None:
        pdf = self.pdf
        self.rule(4)
        half = pdf.epw / 2
        self._use_font(bold=True)
        pdf.cell(half, self.line_height, to_latin1(name))
        self._use_font(size=BASE_FONT_SIZE - 1)
        pdf.multi_cell(
            half,
            self.line_height,
            to_latin1(call_seq),
            align="R",
            new_x=XPos.LMARGIN,
            new_y=YPos.NEXT,
        )
        self._use_font()
        y = pdf.get_y() + 3
        pdf.line(pdf.l_margin + METHOD_INDENTATION, y, pdf.w - pdf.r_margin, y)
        pdf.set_y(y + PARAGRAPH_GAP)

    def table(
        self, header: typ.Sequence[str], rows: typ.Sequence[typ.Sequence[Cell]]
    ) -> None:
        pdf = self.pdf
        widths = self._column_widths(len(header))
        self._use_font(bold=True)
        pdf.set_fill_color(*LABEL_BOX_COLOR)
        pdf.set_x(pdf.l_margin)
        for width, title in zip(widths, header, strict=True):
            pdf.cell(width, self.line_height, to_latin1(title), border="B", fill=True)
        pdf.ln(self.line_height)
        for row in rows:
            self._table_row(widths, row)
        self._use_font()
        pdf.ln(PARAGRAPH_GAP)

    def _column_widths(self, count: int) -> list[float]:
        epw = self.pdf.epw
        if count == 2:
            self._use_font()
            narrow = self.pdf.get_string_width(PAGE_NUMBER_WIDTH_TEXT) + 4
            return [epw - narrow, narrow]
        return [epw / count] * count

    def _table_row(self, widths: list[float], row: typ.Sequence[Cell]) -> None:
        pdf = self.pdf
        texts = ["".join(run.text for run in cell) for cell in row]
        height = 0.0
        for width, cell, text in zip(widths, row, texts, strict=True):
            self._cell_font(cell)
            needed = pdf.multi_cell(
                width,
                self.line_height,
                to_latin1(text),
                dry_run=True,
                output=MethodReturnValue.HEIGHT,
            )
            height = max(height, needed)
        if pdf.will_page_break(height):
            pdf.add_page()
        top = pdf.get_y()
        x = pdf.l_margin
        for width, cell, text in zip(widths, row, texts, strict=True):
            self._cell_font(cell)
            anchor = next((run.anchor for run in cell if run.anchor), None)
            link: int | str = self._link(anchor) if anchor else ""
            if link:
                pdf.set_text_color(*LINK_COLOR)
            pdf.set_xy(x, top)
            pdf.multi_cell(width, self.line_height, to_latin1(text), link=link)
            pdf.set_text_color(0, 0, 0)
            x += width
        pdf.set_xy(pdf.l_margin, top + height)

    def _cell_font(self, cell: Cell) -> None:
        first = cell[0] if cell else None
        self._use_font(
            bold=bool(first and first.bold),
            italic=bool(first and first.italic),
            mono=bool(first and first.mono),
        )

    # Indentation and list decorations ----------------------------------------

    def add_padding(self, left: float, right: float = 0) -> None:
        self.pdf.set_left_margin(self.pdf.l_margin + left)
        self.pdf.set_right_margin(self.pdf.r_margin + right)
        self.pdf.set_x(self.pdf.l_margin)

    def subtract_padding(self, left: float, right: float = 0) -> None:
        self.pdf.set_left_margin(self.pdf.l_margin - left)
        self.pdf.set_right_margin(self.pdf.r_margin - right)
        self.pdf.set_x(self.pdf.l_margin)

    def bullet(self) -> None:
        pdf = self.pdf
        x = pdf.l_margin - 5 - BULLET_SIZE
        y = pdf.get_y() + (self.line_height - BULLET_SIZE) / 2
        pdf.set_fill_color(0, 0, 0)
        pdf.rect(x, y, BULLET_SIZE, BULLET_SIZE, style="F")

    def list_label(self, text: str) -> None:
        pdf = self.pdf
        label = to_latin1(text)
        x = pdf.l_margin - pdf.get_string_width(label) - 5
        baseline = pdf.get_y() + self.line_height * 0.75
        pdf.text(x, baseline, label)

    def label_box(self, runs: typ.Sequence[Run]) -> float:
        pdf = self.pdf
        self._use_font(bold=True)
        text = to_latin1("".join(run.text for run in runs))
        height = pdf.multi_cell(
            pdf.epw,
            self.line_height,
            text,
            dry_run=True,
            output=MethodReturnValue.HEIGHT,
        )
        if pdf.will_page_break(height):
            pdf.add_page()
        top = pdf.get_y()
        left, right = pdf.l_margin, pdf.w - pdf.r_margin
        pdf.set_fill_color(*LABEL_BOX_COLOR)
        pdf.rect(left, top, right - left, height, style="F")
        pdf.set_draw_color(*DECORATION_COLOR)
        pdf.line(left, top + height, left, top)
        pdf.line(left, top, right, top)
        pdf.line(right, top, right, top + height)
        pdf.set_draw_color(0, 0, 0)
        pdf.set_xy(left, top)
        self._write_runs(runs)
        pdf.set_xy(left, top + height)
        return height

    def horizontal_line(self) -> None:
        pdf = self.pdf
        y = pdf.get_y()
        pdf.set_draw_color(*DECORATION_COLOR)
        pdf.line(pdf.l_margin, y, pdf.w - pdf.r_margin, y)
        pdf.set_draw_color(0, 0, 0)

    def vertical_lines(self, top: float, bottom: float) -> None:
        pdf = self.pdf
        pdf.set_draw_color(*DECORATION_COLOR)
        pdf.line(pdf.l_margin, top, pdf.l_margin, bottom)
        pdf.line(pdf.w - pdf.r_margin, top, pdf.w - pdf.r_margin, bottom)
        pdf.set_draw_color(0, 0, 0)

    # Position queries --------------------------------------------------------

    def page_number(self) -> int:
        return self.pdf.page_no()

    def cursor(self) -> float:
        return self.pdf.get_y()

    def set_cursor(self, y: float) -> None:
        self.pdf.set_y(y)

    def go_to_page(self, page: int) -> None:
        self.pdf.page = page

    def content_top(self) -> float:
        return self.pdf.t_margin

    def content_bottom(self) -> float:
        return self.pdf.h - self.pdf.b_margin

    # Destinations and output -------------------------------------------------

    def add_destination(self, anchor: str) -> None:
        pdf = self.pdf
        pdf.set_link(self._link(anchor), y=pdf.get_y(), page=pdf.page_no())

    def save(self, path: Path) -> Path:
        """Write the PDF to ``path``, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.pdf.output(str(path))
        logger.debug("saved %d pages to %s", self.pdf.page_no(), path)
        return path


__all__ = ["FpdfBackend", "to_latin1"]
