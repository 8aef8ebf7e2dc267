"""Shared fixtures for the folio test suite.

``RecordingBackend`` stands in for the fpdf2 backend: it records every call
the renderers make and simulates pagination with a fixed number of lines per
page, so tests can assert on placement and page numbers without laying out a
real PDF.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from folio.backend.base import Run
from folio.model import build_store

if typ.TYPE_CHECKING:
    from folio.model.entities import DocumentationStore

LINE = 10.0
PAGE_TOP = 0.0


class RecordingBackend:
    """Backend fake that records calls and paginates by line count.

    Parameters
    ----------
    lines_per_page : int
        Number of flowing lines after which the next line starts a new page.
    """

    def __init__(self, lines_per_page: int = 40) -> None:
        self.lines_per_page = lines_per_page
        self.calls: list[tuple[typ.Any, ...]] = []
        self.pages = 0
        self.page = 0
        self.y = PAGE_TOP
        self.left = 0.0
        self.right = 0.0
        self.destinations: dict[str, int] = {}
        self.saved: Path | None = None

    # Helpers ----------------------------------------------------------------

    @property
    def bottom(self) -> float:
        return PAGE_TOP + self.lines_per_page * LINE

    def _advance(self, lines: int = 1) -> None:
        for _ in range(lines):
            if self.page == 0 or self.y + LINE > self.bottom:
                self.pages += 1
                self.page = self.pages
                self.y = PAGE_TOP
            self.y += LINE

    def names(self) -> list[str]:
        """Names of the recorded calls, in order."""
        return [call[0] for call in self.calls]

    def texts(self, name: str) -> list[str]:
        """Joined run text of every call named ``name``."""
        return [
            "".join(run.text for run in call[-1])
            for call in self.calls
            if call[0] == name
        ]

    # Flowing content --------------------------------------------------------

    def paragraph(self, runs: typ.Sequence[Run]) -> None:
        self.calls.append(("paragraph", list(runs)))
        self._advance()

    def heading(self, level: int, runs: typ.Sequence[Run]) -> None:
        self.calls.append(("heading", level, list(runs)))
        self._advance()

    def verbatim(self, text: str) -> None:
        self.calls.append(("verbatim", text))
        self._advance(text.count("\n") + 1)

    def rule(self, weight: float = 1) -> None:
        self.calls.append(("rule", weight))
        self._advance()

    def raw(self, text: str) -> None:
        self.calls.append(("raw", text))
        self._advance()

    def blank_line(self) -> None:
        self.calls.append(("blank_line",))
        self._advance()

    def caption(self, text: str) -> None:
        self.calls.append(("caption", text))
        self._advance()

    def new_page(self) -> None:
        self.calls.append(("new_page",))
        self.pages += 1
        self.page = self.pages
        self.y = PAGE_TOP

    def ensure_space(self, lines: int) -> None:
        self.calls.append(("ensure_space", lines))
        if self.page == 0 or self.y + lines * LINE > self.bottom:
            self.pages += 1
            self.page = self.pages
            self.y = PAGE_TOP

    def method_header(self, name: str, call_seq: str) -> None:
        self.calls.append(("method_header", name, call_seq))
        self._advance(2)

    def table(
        self,
        header: typ.Sequence[str],
        rows: typ.Sequence[typ.Sequence[list[Run]]],
    ) -> None:
        self.calls.append(("table", list(header), [list(row) for row in rows]))
        self._advance(len(rows) + 1)

    # Indentation and decorations -------------------------------------------

    def add_padding(self, left: float, right: float = 0) -> None:
        self.calls.append(("add_padding", left, right))
        self.left += left
        self.right += right

    def subtract_padding(self, left: float, right: float = 0) -> None:
        self.calls.append(("subtract_padding", left, right))
        self.left -= left
        self.right -= right

    def bullet(self) -> None:
        self.calls.append(("bullet",))

    def list_label(self, text: str) -> None:
        self.calls.append(("list_label", text))

    def label_box(self, runs: typ.Sequence[Run]) -> float:
        self.calls.append(("label_box", list(runs)))
        self._advance()
        return LINE

    def horizontal_line(self) -> None:
        self.calls.append(("horizontal_line",))

    def vertical_lines(self, top: float, bottom: float) -> None:
        self.calls.append(("vertical_lines", self.page, top, bottom))

    # Position queries -------------------------------------------------------

    def page_number(self) -> int:
        return self.page

    def cursor(self) -> float:
        return self.y

    def set_cursor(self, y: float) -> None:
        self.calls.append(("set_cursor", y))
        self.y = y

    def go_to_page(self, page: int) -> None:
        self.calls.append(("go_to_page", page))
        self.page = page

    def content_top(self) -> float:
        return PAGE_TOP

    def content_bottom(self) -> float:
        return self.bottom

    # Destinations and output -----------------------------------------------

    def add_destination(self, anchor: str) -> None:
        self.calls.append(("add_destination", anchor))
        self.destinations[anchor] = self.page

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"%PDF-1.4\n% recorded\n")
        self.saved = path
        return path


@pytest.fixture
def recording_backend() -> RecordingBackend:
    """Return a fresh recording backend."""
    return RecordingBackend()


SAMPLE_DUMP: dict[str, typ.Any] = {
    "title": "Widgets API",
    "language": "ruby",
    "pages": [
        {"name": "CHANGELOG", "body": "Nothing yet."},
        {"name": "README", "body": "Start with Shapes::Widget and #draw."},
    ],
    "modules": [
        {"full_name": "Shapes", "description": "Namespace for shapes."},
    ],
    "classes": [
        {
            "full_name": "Shapes::Widget",
            "superclass": "Object",
            "description": "Draws things. See #draw and Widget::create.",
            "constants": [
                {"name": "SIDES", "value": "4", "description": "Corner count."}
            ],
            "attributes": [{"name": "size", "rw": "RW"}],
            "methods": [
                {"name": "foo", "singleton": True, "description": "Class foo."},
                {"name": "create", "singleton": True, "call_seq": "create(size)"},
                {"name": "foo", "description": "Instance foo."},
                {"name": "bar", "description": "Calls #foo."},
                {"name": "draw", "description": "Renders. Call create for a copy."},
                {"name": "render", "is_alias_for": "draw"},
            ],
        },
        {
            "full_name": "Shapes::Square",
            "superclass": "Shapes::Widget",
            "description": "A Widget with equal sides.",
            "methods": [{"name": "area", "description": "Uses #draw."}],
        },
    ],
}


@pytest.fixture
def sample_store() -> DocumentationStore:
    """Return a store with two pages, one module and two classes."""
    return build_store(SAMPLE_DUMP)


@pytest.fixture
def write_yaml(tmp_path: Path) -> typ.Callable[[str, str], Path]:
    """Return a helper writing YAML text into ``tmp_path``."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text.strip() + "\n", encoding="utf-8")
        return path

    return _write
