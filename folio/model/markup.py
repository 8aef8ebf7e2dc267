r"""Closed markup tree consumed by the folio formatters.

Descriptions attached to documentation entities are parsed once into these
nodes (see :mod:`folio.model.markdown_source`). Block nodes describe the
vertical structure of a description, inline nodes the styled runs inside a
paragraph, heading, or list label.

Example
-------
>>> from folio.model.markup import Document, Paragraph, Text
>>> doc = Document([Paragraph([Text("Hello")])])
>>> doc.is_empty()
False
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ


class ListKind(enum.Enum):
    """Kinds of lists a description may contain."""

    BULLET = "bullet"
    NUMBER = "number"
    LABEL = "label"
    NOTE = "note"
    UALPHA = "ualpha"
    LALPHA = "lalpha"


# Inline nodes -------------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class Text:
    """Plain text; cross-reference candidates are detected at render time."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class Bold:
    children: tuple[Inline, ...]


@dc.dataclass(frozen=True, slots=True)
class Emphasis:
    children: tuple[Inline, ...]


@dc.dataclass(frozen=True, slots=True)
class Code:
    """Teletype span. Never scanned for cross-references."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class Hyperlink:
    """External link; ``label`` is ``None`` for bare URLs."""

    url: str
    label: tuple[Inline, ...] | None = None


@dc.dataclass(frozen=True, slots=True)
class CrossRef:
    """Explicit reference to a documented entity with an optional label."""

    name: str
    label: str | None = None


Inline = Text | Bold | Emphasis | Code | Hyperlink | CrossRef


# Block nodes --------------------------------------------------------------


@dc.dataclass(frozen=True, slots=True)
class Paragraph:
    parts: tuple[Inline, ...]


@dc.dataclass(frozen=True, slots=True)
class Heading:
    """Heading with the level the author asked for (1-6)."""

    level: int
    parts: tuple[Inline, ...]


@dc.dataclass(frozen=True, slots=True)
class Verbatim:
    text: str


@dc.dataclass(frozen=True, slots=True)
class Rule:
    weight: int = 1


@dc.dataclass(frozen=True, slots=True)
class BlankLine:
    pass


@dc.dataclass(frozen=True, slots=True)
class Raw:
    """Backend-native markup passed through untouched."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class ListItem:
    """List entry; ``label`` is only set for label and note lists."""

    parts: tuple[Block, ...]
    label: tuple[Inline, ...] | None = None


@dc.dataclass(frozen=True, slots=True)
class ListBlock:
    kind: ListKind
    items: tuple[ListItem, ...]


Block = Paragraph | Heading | Verbatim | Rule | BlankLine | Raw | ListBlock


@dc.dataclass(frozen=True, slots=True)
class Document:
    """Top-level container for a parsed description."""

    parts: tuple[Block, ...] = ()

    def __init__(self, parts: typ.Iterable[Block] = ()) -> None:
        object.__setattr__(self, "parts", tuple(parts))

    def is_empty(self) -> bool:
        """Return ``True`` when the description has no blocks at all."""
        return not self.parts


def plain_text(parts: typ.Iterable[Inline]) -> str:
    """Flatten inline nodes into their visible text."""
    chunks: list[str] = []
    for node in parts:
        match node:
            case Text(text=text) | Code(text=text):
                chunks.append(text)
            case Bold(children=children) | Emphasis(children=children):
                chunks.append(plain_text(children))
            case Hyperlink(url=url, label=label):
                chunks.append(plain_text(label) if label else url)
            case CrossRef(name=name, label=label):
                chunks.append(label or name)
            case _:
                typ.assert_never(node)
    return "".join(chunks)


__all__ = [
    "BlankLine",
    "Block",
    "Bold",
    "Code",
    "CrossRef",
    "Document",
    "Emphasis",
    "Heading",
    "Hyperlink",
    "Inline",
    "ListBlock",
    "ListItem",
    "ListKind",
    "Paragraph",
    "Raw",
    "Rule",
    "Text",
    "Verbatim",
    "plain_text",
]
