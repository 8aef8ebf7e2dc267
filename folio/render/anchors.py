"""Stable anchors and rendering capabilities for documentation entities.

Anchors identify a rendered entity independently of where it lands, so the
same entity yields the same anchor on every pass:

>>> from folio.model.entities import ClassModule, Method
>>> widget = ClassModule("Shapes::Widget")
>>> anchor_for(widget)
'classmod-Shapes::Widget'
>>> anchor_for(Method("new", singleton=True, parent=widget))
'method-Shapes::Widget-::new'
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from folio.errors import UnknownEntityError
from folio.model.entities import (
    Alias,
    Attribute,
    ClassModule,
    Constant,
    Method,
    Section,
    TopLevelPage,
)

if typ.TYPE_CHECKING:
    from folio.model.entities import DocumentationEntity
    from folio.model.markup import Document


class EntityKind(enum.Enum):
    FREE_PAGE = "toplevel"
    CLASS_MODULE = "classmod"
    METHOD = "method"
    ATTRIBUTE = "attr"
    ALIAS = "alias"
    CONSTANT = "const"
    SECTION = "section"


MEMBER_KINDS = frozenset(
    {EntityKind.METHOD, EntityKind.ATTRIBUTE, EntityKind.ALIAS, EntityKind.CONSTANT}
)


def entity_kind(entity: object) -> EntityKind:
    """Classify ``entity``.

    Raises
    ------
    UnknownEntityError
        If ``entity`` is not one of the documentation entity types.
    """
    match entity:
        case TopLevelPage():
            return EntityKind.FREE_PAGE
        case ClassModule():
            return EntityKind.CLASS_MODULE
        case Method():
            return EntityKind.METHOD
        case Attribute():
            return EntityKind.ATTRIBUTE
        case Alias():
            return EntityKind.ALIAS
        case Constant():
            return EntityKind.CONSTANT
        case Section():
            return EntityKind.SECTION
        case _:
            msg = f"Cannot derive an anchor for {type(entity).__name__} {entity!r}."
            raise UnknownEntityError(msg)


def _owner(entity: Method | Attribute | Alias | Constant | Section) -> str:
    return entity.parent.full_name if entity.parent is not None else ""


def anchor_for(entity: object) -> str:
    """Return the anchor of ``entity``; pure and total over the entity types."""
    kind = entity_kind(entity)
    match entity:
        case TopLevelPage(name=name):
            return f"{kind.value}-{name}"
        case ClassModule(full_name=full_name):
            return f"{kind.value}-{full_name}"
        case Method() | Attribute():
            return f"{kind.value}-{_owner(entity)}-{entity.pretty_name}"
        case Alias():
            return f"{kind.value}-{_owner(entity)}-{entity.pretty_new_name}"
        case Constant(name=name):
            return f"{kind.value}-{_owner(entity)}-{name}"
        case Section(title=title):
            return f"{kind.value}-{_owner(entity)}-{title}"
    raise UnknownEntityError(repr(entity))  # pragma: no cover - entity_kind raised


def heading_base_level(entity: object) -> int:
    """Return the level added to headings inside ``entity``'s description."""
    kind = entity_kind(entity)
    if kind is EntityKind.CLASS_MODULE:
        return 1
    if kind in MEMBER_KINDS:
        return 3
    return 0


@dc.dataclass(frozen=True, slots=True)
class Renderable:
    """Rendering view of a documentation entity.

    The documentation model stays free of rendering concerns; formatters wrap
    each entity and ask the wrapper for its anchor, heading level, and the
    description to render.
    """

    entity: DocumentationEntity

    @property
    def kind(self) -> EntityKind:
        return entity_kind(self.entity)

    @property
    def anchor(self) -> str:
        return anchor_for(self.entity)

    @property
    def heading_level(self) -> int:
        return heading_base_level(self.entity)

    @property
    def description(self) -> Document:
        match self.entity:
            case TopLevelPage(body=body):
                return body
            case _:
                return self.entity.description

    @property
    def title(self) -> str:
        """Human-readable heading text."""
        match self.entity:
            case TopLevelPage(name=name):
                return name
            case ClassModule(full_name=full_name):
                return full_name
            case Method(name=name) | Constant(name=name):
                return name
            case Attribute(name=name, rw=rw):
                return f"{name} [{rw}]"
            case Alias(new_name=new_name):
                return new_name
            case Section(title=title):
                return title
        raise UnknownEntityError(repr(self.entity))  # pragma: no cover


__all__ = [
    "EntityKind",
    "Renderable",
    "anchor_for",
    "entity_kind",
    "heading_base_level",
]
