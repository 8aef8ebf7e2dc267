"""Tests for the reading order and section layout of one rendering pass."""

from __future__ import annotations

import typing as typ

from conftest import RecordingBackend

from folio.model import NameResolver, build_store
from folio.render.document import DocumentWalker, method_groups, sorted_methods
from folio.render.options import RenderOptions
from folio.render.registry import AnchorRegistry

if typ.TYPE_CHECKING:
    from folio.model.entities import DocumentationStore


def _walk(
    store: DocumentationStore,
    options: RenderOptions | None = None,
    registry: AnchorRegistry | None = None,
) -> tuple[RecordingBackend, AnchorRegistry]:
    backend = RecordingBackend()
    registry = registry if registry is not None else AnchorRegistry()
    DocumentWalker(store, backend, registry, NameResolver(store), options).walk()
    return backend, registry


def _method_headers(backend: RecordingBackend) -> list[str]:
    return [call[1] for call in backend.calls if call[0] == "method_header"]


def test_class_methods_come_before_instance_methods(
    sample_store: DocumentationStore,
) -> None:
    widget = sample_store.find_class_module("Shapes::Widget")
    assert widget is not None
    ordered = [method.pretty_name for method in sorted_methods(widget.methods)]
    assert ordered == ["::create", "::foo", "#bar", "#draw", "#foo", "#render"]


def test_method_groups_are_titled(sample_store: DocumentationStore) -> None:
    widget = sample_store.find_class_module("Shapes::Widget")
    assert widget is not None
    titles = [title for title, _ in method_groups(widget)]
    assert titles == ["Public Class methods", "Public Instance methods"]


def test_reading_order(sample_store: DocumentationStore) -> None:
    """Pages, overview, then classes and modules sorted by full name."""
    backend, registry = _walk(sample_store)
    assert backend.names().count("new_page") == 6
    placed = [call[1] for call in backend.calls if call[0] == "add_destination"]
    top_level = [
        anchor for anchor in placed if anchor.startswith(("toplevel-", "classmod-"))
    ]
    assert top_level == [
        "toplevel-CHANGELOG",
        "toplevel-README",
        "classmod-Shapes",
        "classmod-Shapes::Square",
        "classmod-Shapes::Widget",
    ]
    assert registry.lookup("toplevel-CHANGELOG") == 1
    assert registry.lookup("toplevel-README") == 2


def test_main_page_comes_first(sample_store: DocumentationStore) -> None:
    _, registry = _walk(sample_store, RenderOptions(main_page="README"))
    assert registry.lookup("toplevel-README") == 1
    assert registry.lookup("toplevel-CHANGELOG") == 2


def test_method_overview_lists_every_method(sample_store: DocumentationStore) -> None:
    backend, _ = _walk(sample_store)
    table = next(call for call in backend.calls if call[0] == "table")
    assert table[1] == ["Method name", "p."]
    names = ["".join(run.text for run in row[0]) for row in table[2]]
    assert names == [
        "Shapes::Square#area",
        "Shapes::Widget::create",
        "Shapes::Widget::foo",
        "Shapes::Widget#bar",
        "Shapes::Widget#draw",
        "Shapes::Widget#foo",
        "Shapes::Widget#render",
    ]
    pages = ["".join(run.text for run in row[1]) for row in table[2]]
    assert set(pages) == {"???"}, "methods are placed after the overview"


def test_overview_uses_known_pages_on_later_pass(
    sample_store: DocumentationStore,
) -> None:
    _, registry = _walk(sample_store)
    registry.clear_unresolved()
    backend, registry = _walk(sample_store, registry=registry)
    table = next(call for call in backend.calls if call[0] == "table")
    first_row = table[2][0]
    assert first_row[1][0].text == str(registry.lookup("method-Shapes::Square-#area"))
    assert first_row[1][0].anchor == "method-Shapes::Square-#area"
    assert registry.unresolved == []


def test_same_named_methods_of_both_kinds(sample_store: DocumentationStore) -> None:
    backend, registry = _walk(sample_store)
    headers = _method_headers(backend)
    assert headers[headers.index("area") + 1 :] == [
        "create",
        "foo",
        "bar",
        "draw",
        "foo",
        "render",
    ]
    assert "method-Shapes::Widget-::foo" in registry
    assert "method-Shapes::Widget-#foo" in registry


def test_alias_points_at_original(sample_store: DocumentationStore) -> None:
    backend, _ = _walk(sample_store)
    paragraphs = backend.texts("paragraph")
    assert any(text.startswith("Alias for #draw") for text in paragraphs)
    assert any(text.startswith("Also aliased as: #render") for text in paragraphs)


def test_class_header_and_members(sample_store: DocumentationStore) -> None:
    backend, registry = _walk(sample_store)
    captions = [call[1] for call in backend.calls if call[0] == "caption"]
    assert captions == ["Module", "Class", "Class"]
    headings = [
        "".join(run.text for run in call[2])
        for call in backend.calls
        if call[0] == "heading"
    ]
    for title in ("Constants", "Attributes", "Public Instance methods"):
        assert title in headings
    assert "const-Shapes::Widget-SIDES" in registry
    assert "attr-Shapes::Widget-#size" in registry
    paragraphs = backend.texts("paragraph")
    assert any(text.startswith("Parent: Object") for text in paragraphs)


def test_constants_table_truncates_long_values() -> None:
    store = build_store(
        {
            "classes": [
                {
                    "full_name": "Config",
                    "constants": [{"name": "LONG", "value": "x" * 30}],
                }
            ]
        }
    )
    backend, _ = _walk(store)
    table = next(call for call in backend.calls if call[0] == "table")
    assert table[1] == ["Name", "Value", "Description"]
    assert table[2][0][1][0].text == "x" * 20 + "…"


def test_page_markers_follow_resolved_references(
    sample_store: DocumentationStore,
) -> None:
    """References to placed targets show their page; unplaced ones show ???.

    ``#draw`` has no class to resolve against on a free page, so only its
    display name is kept.
    """
    _, registry = _walk(sample_store)
    backend, _ = _walk(sample_store, registry=registry)
    readme = backend.texts("paragraph")[1]
    widget_page = registry.lookup("classmod-Shapes::Widget")
    assert readme == f"Start with Shapes::Widget [p. {widget_page}] and draw."

    first, _ = _walk(sample_store)
    assert first.texts("paragraph")[1] == (
        "Start with Shapes::Widget (p. ???) and draw."
    )


def test_show_pages_off_drops_markers(sample_store: DocumentationStore) -> None:
    backend, _ = _walk(sample_store, RenderOptions(show_pages=False))
    assert backend.texts("paragraph")[1] == "Start with Shapes::Widget and draw."


def test_method_space_is_reserved_before_placing(
    sample_store: DocumentationStore,
) -> None:
    """A method header never starts on a later page than its anchor."""

    class HeaderPages(RecordingBackend):
        def __init__(self) -> None:
            super().__init__(lines_per_page=12)
            self.header_pages: list[int] = []

        def method_header(self, name: str, call_seq: str) -> None:
            super().method_header(name, call_seq)
            self.header_pages.append(self.page)

    backend = HeaderPages()
    DocumentWalker(
        sample_store, backend, AnchorRegistry(), NameResolver(sample_store)
    ).walk()

    placed = []
    for index, call in enumerate(backend.calls):
        if call[0] == "add_destination" and call[1].startswith("method-"):
            assert backend.calls[index - 1] == ("ensure_space", 3)
            assert backend.calls[index + 1][0] == "method_header"
            placed.append(backend.destinations[call[1]])
    assert placed == backend.header_pages
    assert len(set(placed)) > 1, "methods spread over several pages"
