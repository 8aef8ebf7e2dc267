"""Tests for reference recognition, name lookup and page-aware resolution.

Names are looked up the way a reader would: relative to the class whose
description mentions them, then outward through enclosing modules, and for
members also up the superclass chain.
"""

from __future__ import annotations

import typing as typ

import pytest

from folio.model import build_store
from folio.model.crossref import (
    ALL_CROSSREF_PATTERN,
    CROSSREF_PATTERN,
    NameResolver,
    scan_references,
)
from folio.render.crossref import (
    CrossReference,
    CrossReferenceResolver,
    ResolverOptions,
    page_suffix,
)
from folio.render.registry import AnchorRegistry

if typ.TYPE_CHECKING:
    from folio.model.entities import ClassModule, DocumentationStore


def _class(store: DocumentationStore, name: str) -> ClassModule:
    found = store.find_class_module(name)
    assert found is not None, f"{name} missing from the sample store"
    return found


def _candidates(text: str, pattern: typ.Any = CROSSREF_PATTERN) -> list[str]:
    return [name for _, name in scan_references(text, pattern) if name is not None]


# Recognition ---------------------------------------------------------------


def test_scan_references_reproduces_text() -> None:
    """Literals and candidates concatenate back to the input."""
    text = "See #draw and Widget::create. Then README.md, or a_file.txt."
    pieces = [
        literal + (name or "") for literal, name in scan_references(text)
    ]
    assert "".join(pieces) == text


def test_conservative_pattern_finds_marked_names() -> None:
    candidates = _candidates("See #draw and Widget::create.")
    assert "#draw" in candidates
    assert "Widget::create" in candidates
    assert "and" not in candidates, "bare lowercase words are not candidates"


def test_all_pattern_also_finds_lowercase_words() -> None:
    candidates = _candidates("call create now", ALL_CROSSREF_PATTERN)
    assert "create" in candidates


# Name lookup ---------------------------------------------------------------


def test_resolves_absolute_and_relative_class_names(
    sample_store: DocumentationStore,
) -> None:
    names = NameResolver(sample_store)
    widget = _class(sample_store, "Shapes::Widget")
    square = _class(sample_store, "Shapes::Square")
    assert names.resolve("Shapes::Widget", None) is widget
    assert names.resolve("Widget", square) is widget, "sibling in enclosing module"
    assert names.resolve("::Shapes", None) is _class(sample_store, "Shapes")


def test_resolves_methods_by_kind(sample_store: DocumentationStore) -> None:
    """``#`` selects instance methods and ``::`` selects class methods."""
    names = NameResolver(sample_store)
    widget = _class(sample_store, "Shapes::Widget")
    assert names.resolve("#foo", widget) is widget.find_method("foo", singleton=False)
    assert names.resolve("::foo", widget) is widget.find_method("foo", singleton=True)
    assert names.resolve("Widget::create", widget) is widget.find_method("create")


def test_member_lookup_follows_superclass(sample_store: DocumentationStore) -> None:
    names = NameResolver(sample_store)
    widget = _class(sample_store, "Shapes::Widget")
    square = _class(sample_store, "Shapes::Square")
    assert names.resolve("#draw", square) is widget.find_method("draw")


def test_resolves_constants(sample_store: DocumentationStore) -> None:
    names = NameResolver(sample_store)
    widget = _class(sample_store, "Shapes::Widget")
    square = _class(sample_store, "Shapes::Square")
    sides = widget.find_constant("SIDES")
    assert names.resolve("SIDES", widget) is sides
    assert names.resolve("Widget::SIDES", square) is sides


def test_resolves_free_pages(sample_store: DocumentationStore) -> None:
    names = NameResolver(sample_store)
    widget = _class(sample_store, "Shapes::Widget")
    assert names.resolve("README", None) is sample_store.find_page("README")
    assert names.resolve("CHANGELOG", widget) is sample_store.find_page("CHANGELOG")


def test_unknown_and_escaped_names(sample_store: DocumentationStore) -> None:
    """Unknown names come back as text; escaped known names lose the backslash."""
    names = NameResolver(sample_store)
    assert names.resolve("Gadget", None) == "Gadget"
    assert names.resolve("\\Shapes::Widget", None) == "Shapes::Widget"
    assert names.resolve("\\Gadget", None) == "\\Gadget"


def test_external_aliases_are_not_link_targets() -> None:
    store = build_store(
        {
            "classes": [
                {
                    "full_name": "Widget",
                    "aliases": [{"new_name": "paint", "old_name": "draw"}],
                }
            ]
        }
    )
    widget = store.find_class_module("Widget")
    assert NameResolver(store).resolve("#paint", widget) == "#paint"


def test_resolution_is_memoised(sample_store: DocumentationStore) -> None:
    names = NameResolver(sample_store)
    widget = _class(sample_store, "Shapes::Widget")
    first = names.resolve("#draw", widget)
    assert names.resolve("#draw", widget) is first


# Page-aware resolution -----------------------------------------------------


def test_resolved_reference_carries_anchor(sample_store: DocumentationStore) -> None:
    widget = _class(sample_store, "Shapes::Widget")
    resolver = CrossReferenceResolver(NameResolver(sample_store))
    reference = resolver.resolve("#draw", widget)
    assert reference.resolved
    assert reference.label == "draw", "the '#' is hidden unless show_hash is set"
    assert reference.anchor == "method-Shapes::Widget-#draw"
    assert reference.page is None


def test_show_hash_keeps_sigil(sample_store: DocumentationStore) -> None:
    widget = _class(sample_store, "Shapes::Widget")
    resolver = CrossReferenceResolver(
        NameResolver(sample_store), options=ResolverOptions(show_hash=True)
    )
    assert resolver.resolve("#draw", widget).label == "#draw"


def test_explicit_label_wins(sample_store: DocumentationStore) -> None:
    widget = _class(sample_store, "Shapes::Widget")
    resolver = CrossReferenceResolver(NameResolver(sample_store))
    reference = resolver.resolve("#draw", widget, "the draw method")
    assert reference.label == "the draw method"


def test_unplaced_target_is_flagged(sample_store: DocumentationStore) -> None:
    """A miss is recorded so another pass can place it."""
    widget = _class(sample_store, "Shapes::Widget")
    registry = AnchorRegistry()
    resolver = CrossReferenceResolver(NameResolver(sample_store), registry)

    reference = resolver.resolve("#draw", widget)
    assert reference.resolved
    assert not reference.placed
    assert registry.unresolved == ["method-Shapes::Widget-#draw"]

    registry.register("method-Shapes::Widget-#draw", 4)
    assert resolver.resolve("#draw", widget).page == 4


@pytest.mark.parametrize(
    ("options", "explicit", "resolved"),
    [
        (ResolverOptions(), False, False),
        (ResolverOptions(), True, True),
        (ResolverOptions(hyperlink_all=True), False, True),
    ],
    ids=["conservative", "explicit", "hyperlink-all"],
)
def test_lowercase_word_heuristic(
    sample_store: DocumentationStore,
    options: ResolverOptions,
    explicit: bool,
    resolved: bool,
) -> None:
    """Bare lowercase words only link when asked to."""
    widget = _class(sample_store, "Shapes::Widget")
    draw = widget.find_method("draw")
    resolver = CrossReferenceResolver(NameResolver(sample_store), options=options)
    reference = resolver.resolve("create", draw, explicit=explicit)
    assert reference.resolved is resolved
    assert reference.label == "create"
    if resolved:
        assert reference.anchor == "method-Shapes::Widget-::create"


def test_escaped_reference_is_literal(sample_store: DocumentationStore) -> None:
    resolver = CrossReferenceResolver(NameResolver(sample_store))
    reference = resolver.resolve("\\Shapes::Widget", None)
    assert not reference.resolved
    assert reference.label == "Shapes::Widget"


def test_split_uses_pattern_for_mode(sample_store: DocumentationStore) -> None:
    names = NameResolver(sample_store)
    conservative = CrossReferenceResolver(names)
    everything = CrossReferenceResolver(
        names, options=ResolverOptions(hyperlink_all=True)
    )
    assert conservative.pattern is CROSSREF_PATTERN
    assert everything.pattern is ALL_CROSSREF_PATTERN
    assert "create" in [name for _, name in everything.split("call create now")]


def test_page_suffix() -> None:
    target = object()
    placed = CrossReference("#draw", "draw", target, "a", 4)  # type: ignore[arg-type]
    unplaced = CrossReference("#draw", "draw", target, "a")  # type: ignore[arg-type]
    literal = CrossReference("Gadget", "Gadget")
    assert page_suffix(placed, show_pages=True) == " [p. 4]"
    assert page_suffix(unplaced, show_pages=True) == " (p. ???)"
    assert page_suffix(literal, show_pages=True) == ""
    assert page_suffix(placed, show_pages=False) == ""
