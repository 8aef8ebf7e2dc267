"""Smoke tests for the fpdf2 backend and verbatim highlighting."""

from __future__ import annotations

import typing as typ

from folio.backend.fpdf_backend import FpdfBackend, to_latin1
from folio.backend.highlight import CodeHighlighter
from folio.model import build_store
from folio.render.orchestrator import TwoPassOrchestrator

if typ.TYPE_CHECKING:
    from pathlib import Path

    from folio.model.entities import DocumentationStore


def test_sample_store_renders_to_pdf(
    sample_store: DocumentationStore, tmp_path: Path
) -> None:
    output = tmp_path / "Documentation.pdf"
    result = TwoPassOrchestrator(sample_store, FpdfBackend).generate(output)
    assert result.passes == 2
    assert result.complete
    assert output.read_bytes().startswith(b"%PDF")
    backend = typ.cast("FpdfBackend", result.backend)
    assert backend.page_number() >= 6, "one page per section at least"


def test_long_framed_item_crosses_pages(tmp_path: Path) -> None:
    """Every block kind renders, including a label frame over a page break."""
    body = "\n\n".join(f"Paragraph {number} of a long item." for number in range(80))
    framed = {"kind": "label", "items": [{"label": "Term", "body": body}]}
    intro = "# Heading\n\nSome *styled* `code` and a [link](https://x.org)."
    store = build_store(
        {
            "pages": [
                {
                    "name": "Everything",
                    "body": [
                        intro,
                        {"verbatim": "def draw(self):\n    return 1\n"},
                        {"rule": 2},
                        "- bullet\n- list\n\n1. numbered\n2. list",
                        {"list": {"kind": "lalpha", "items": ["one", "two"]}},
                        {"raw": "raw text"},
                        {"blank": None},
                        {"list": framed},
                    ],
                }
            ]
        }
    )
    output = tmp_path / "long.pdf"
    result = TwoPassOrchestrator(
        store, lambda: FpdfBackend("Letter", language="python")
    ).generate(output)
    backend = typ.cast("FpdfBackend", result.backend)
    assert backend.page_number() > 1
    assert output.read_bytes().startswith(b"%PDF")


def test_to_latin1_replaces_unsupported_characters() -> None:
    assert to_latin1("A…B — “C” → D") == "A...B - \"C\" -> D"
    assert to_latin1("naïve") == "naïve"
    assert to_latin1("日本") == "??"


def test_highlighter_keeps_source_text() -> None:
    code = "def draw(self):\n    return 1\n"
    tokens = CodeHighlighter("default", "python").tokens(code)
    assert "".join(token.text for token in tokens) == code
    assert any(token.color is not None for token in tokens)


def test_highlighter_falls_back_for_unknown_names() -> None:
    highlighter = CodeHighlighter("no-such-style", "no-such-language")
    tokens = highlighter.tokens("plain words")
    assert "".join(token.text for token in tokens) == "plain words"
    assert len(tokens) == 1


class _HeaderPages(FpdfBackend):
    """fpdf2 backend remembering the page each method header lands on."""

    def __init__(self) -> None:
        super().__init__()
        self.header_pages: dict[str, int] = {}

    def method_header(self, name: str, call_seq: str) -> None:
        super().method_header(name, call_seq)
        self.header_pages[name] = self.page_number()


def test_methods_are_placed_on_the_page_of_their_header() -> None:
    methods = [
        {"name": f"m{number:03d}", "description": "Does one thing."}
        for number in range(60)
    ]
    store = build_store({"classes": [{"full_name": "Widget", "methods": methods}]})
    orchestrator = TwoPassOrchestrator(store, _HeaderPages)
    result = orchestrator.generate()
    backend = typ.cast("_HeaderPages", result.backend)

    placed = {
        name: orchestrator.registry.lookup(f"method-Widget-#{name}")
        for name in backend.header_pages
    }
    assert placed == backend.header_pages
    assert len(set(placed.values())) > 2, "headers start several pages"
