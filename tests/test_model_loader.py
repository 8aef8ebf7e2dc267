"""Tests for loading documentation dumps into the entity model."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from folio.errors import ModelError
from folio.model import build_store, load_documentation
from folio.model.markup import ListKind, Paragraph, Verbatim

if typ.TYPE_CHECKING:
    from pathlib import Path

    from folio.model.entities import DocumentationStore


def test_load_documentation_from_yaml(
    write_yaml: typ.Callable[[str, str], Path],
) -> None:
    path = write_yaml(
        "api.yaml",
        dedent(
            """
            title: Widgets
            language: ruby
            pages:
              - name: README.md
                body: |
                  Start with Widget.
            classes:
              - full_name: Widget
                superclass: Object
                methods:
                  - name: new
                    singleton: true
                    call_seq: new(size) -> widget
            modules:
              - full_name: Shapes
            """
        ),
    )
    store = load_documentation(path)
    assert store.title == "Widgets"
    assert store.language == "ruby"
    assert [page.name for page in store.pages] == ["README.md"]
    widget = store.find_class_module("Widget")
    assert widget is not None
    assert not widget.is_module
    new = widget.find_method("new", singleton=True)
    assert new is not None
    assert new.arglists == "new(size) -> widget"
    assert new.parent is widget
    shapes = store.find_class_module("Shapes")
    assert shapes is not None
    assert shapes.is_module


def test_missing_dump_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_documentation(tmp_path / "missing.yaml")


def test_non_mapping_dump_raises(write_yaml: typ.Callable[[str, str], Path]) -> None:
    path = write_yaml("list.yaml", "- just\n- a list")
    with pytest.raises(TypeError, match="mapping"):
        load_documentation(path)


def test_members_know_their_parent(sample_store: DocumentationStore) -> None:
    widget = sample_store.find_class_module("Shapes::Widget")
    assert widget is not None
    assert widget.parent is sample_store.find_class_module("Shapes")
    for member in (*widget.methods, *widget.constants, *widget.attributes):
        assert member.parent is widget


def test_method_aliases_are_linked(sample_store: DocumentationStore) -> None:
    widget = sample_store.find_class_module("Shapes::Widget")
    assert widget is not None
    draw = widget.find_method("draw")
    render = widget.find_method("render")
    assert render is not None
    assert draw is not None
    assert render.is_alias_for is draw
    assert draw.aliases == [render]


def test_default_arglists() -> None:
    store = build_store({"classes": [{"full_name": "W", "methods": [{"name": "x"}]}]})
    cm = store.find_class_module("W")
    assert cm is not None
    assert cm.methods[0].arglists == "x()"


def test_classes_and_modules_sorted_by_name(sample_store: DocumentationStore) -> None:
    names = [cm.full_name for cm in sample_store.classes_and_modules()]
    assert names == ["Shapes", "Shapes::Square", "Shapes::Widget"]


def test_structured_descriptions() -> None:
    """Constructs without a Markdown spelling come as block lists."""
    store = build_store(
        {
            "pages": [
                {
                    "name": "Steps",
                    "body": [
                        {"paragraph": "Steps"},
                        {"list": {"kind": "ualpha", "items": ["Unpack", "Build"]}},
                        {"verbatim": "make\n"},
                        {"rule": 2},
                        {
                            "list": {
                                "kind": "note",
                                "items": [{"label": "Tip:", "body": "Go slow."}],
                            }
                        },
                    ],
                }
            ]
        }
    )
    blocks = store.pages[0].body.parts
    assert isinstance(blocks[0], Paragraph)
    assert blocks[1].kind is ListKind.UALPHA
    assert len(blocks[1].items) == 2
    assert blocks[2] == Verbatim("make")
    assert blocks[3].weight == 2
    note = blocks[4]
    assert note.kind is ListKind.NOTE
    assert note.items[0].label is not None


def _class(**entry: typ.Any) -> dict[str, typ.Any]:
    return {"classes": [{"full_name": "W", **entry}]}


def _page_body(*blocks: typ.Any) -> dict[str, typ.Any]:
    return {"pages": [{"name": "P", "body": list(blocks)}]}


@pytest.mark.parametrize(
    "raw",
    [
        {"pages": [{"body": "no name"}]},
        {"classes": [{"full_name": "W", "kind": "struct"}]},
        _class(attributes=[{"name": "a", "rw": "X"}]),
        _class(methods=[{"name": "a", "visibility": "x"}]),
        _class(methods=[{"name": "a", "is_alias_for": "b"}]),
        {"pages": "README"},
        {"pages": [{"name": "P", "body": [{"table": "x"}]}]},
        {"pages": [{"name": "P", "body": [{"list": {"kind": "spiral"}}]}]},
        {"pages": [{"name": "P", "body": 42}]},
        _page_body({"heading": "Title"}),
        _page_body({"heading": {"level": "big", "text": "Title"}}),
        _page_body({"list": ["one", "two"]}),
        _page_body({"rule": "thick"}),
    ],
    ids=[
        "page-without-name",
        "unknown-kind",
        "bad-rw",
        "bad-visibility",
        "unknown-alias-target",
        "pages-not-list",
        "unknown-block",
        "unknown-list-kind",
        "bad-description",
        "heading-not-mapping",
        "heading-level-not-integer",
        "list-not-mapping",
        "rule-not-integer",
    ],
)
def test_malformed_dumps_are_rejected(raw: dict[str, typ.Any]) -> None:
    with pytest.raises(ModelError):
        build_store(raw)
