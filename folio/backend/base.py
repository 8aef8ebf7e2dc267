"""Operations the renderers ask of a paginated layout backend.

The renderers never talk to a PDF library directly. They emit the calls
below in document order; the backend wraps lines, breaks pages, and keeps
track of where the cursor is. Vertical positions grow downwards from the top
edge of the page, in points.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


@dc.dataclass(frozen=True, slots=True)
class Run:
    """A span of text sharing one style.

    Attributes
    ----------
    text : str
        Unescaped text to show.
    bold, italic, mono : bool
        Font style switches.
    url : str or None
        External link target.
    anchor : str or None
        Internal link target, an entity anchor.
    """

    text: str
    bold: bool = False
    italic: bool = False
    mono: bool = False
    url: str | None = None
    anchor: str | None = None

    def styled(self, **changes: typ.Any) -> Run:
        return dc.replace(self, **changes)


Cell = list[Run]


@typ.runtime_checkable
class Backend(typ.Protocol):
    """Paginated output document built by one rendering pass."""

    # Flowing content ---------------------------------------------------------

    def paragraph(self, runs: typ.Sequence[Run]) -> None: ...

    def heading(self, level: int, runs: typ.Sequence[Run]) -> None:
        """Emit a heading; levels without a style render as bold body text."""
        ...

    def verbatim(self, text: str) -> None: ...

    def rule(self, weight: float = 1) -> None: ...

    def raw(self, text: str) -> None: ...

    def blank_line(self) -> None: ...

    def caption(self, text: str) -> None: ...

    def new_page(self) -> None: ...

    def ensure_space(self, lines: int) -> None:
        """Start a new page unless ``lines`` body lines fit below the cursor."""
        ...

    def method_header(self, name: str, call_seq: str) -> None: ...

    def table(
        self, header: typ.Sequence[str], rows: typ.Sequence[typ.Sequence[Cell]]
    ) -> None: ...

    # Indentation and list decorations ----------------------------------------

    def add_padding(self, left: float, right: float = 0) -> None: ...

    def subtract_padding(self, left: float, right: float = 0) -> None: ...

    def bullet(self) -> None: ...

    def list_label(self, text: str) -> None: ...

    def label_box(self, runs: typ.Sequence[Run]) -> float:
        """Draw a shaded label row at the cursor and return its height."""
        ...

    def horizontal_line(self) -> None: ...

    def vertical_lines(self, top: float, bottom: float) -> None:
        """Draw the left and right borders of the content area on this page."""
        ...

    # Position queries --------------------------------------------------------

    def page_number(self) -> int: ...

    def cursor(self) -> float: ...

    def set_cursor(self, y: float) -> None: ...

    def go_to_page(self, page: int) -> None: ...

    def content_top(self) -> float: ...

    def content_bottom(self) -> float: ...

    # Destinations and output -------------------------------------------------

    def add_destination(self, anchor: str) -> None: ...

    def save(self, path: Path) -> Path: ...


__all__ = ["Backend", "Cell", "Run"]
