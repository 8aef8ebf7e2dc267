"""Typed documentation entities and the store that owns them.

The entity classes mirror what a source-code documentation tool extracts:
free-standing pages, classes and modules with their constants, attributes,
methods, external aliases, and sections. They are created once by
:func:`folio.model.loader.load_documentation` and treated as immutable by
every formatter.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .markup import Document

Visibility = typ.Literal["public", "protected", "private"]
VISIBILITIES: tuple[Visibility, ...] = ("public", "protected", "private")


@dc.dataclass(slots=True, eq=False)
class TopLevelPage:
    """Free-standing documentation page such as ``README.md``."""

    name: str
    body: Document = dc.field(default_factory=Document)


@dc.dataclass(slots=True, eq=False)
class Constant:
    name: str
    value: str
    description: Document = dc.field(default_factory=Document)
    parent: ClassModule | None = None


@dc.dataclass(slots=True, eq=False)
class Attribute:
    name: str
    rw: str = "R"
    description: Document = dc.field(default_factory=Document)
    singleton: bool = False
    parent: ClassModule | None = None

    @property
    def pretty_name(self) -> str:
        return f"{'::' if self.singleton else '#'}{self.name}"


@dc.dataclass(slots=True, eq=False)
class Method:
    """A documented method.

    Attributes
    ----------
    name : str
        Bare method name (``"new"``, ``"each"``).
    call_seq : str
        Call-signature text shown beside the method name.
    visibility : str
        One of ``"public"``, ``"protected"``, ``"private"``.
    singleton : bool
        ``True`` for class methods, ``False`` for instance methods.
    is_alias_for : Method or None
        The method this one is an alias of.
    aliases : list[Method]
        Methods declared as aliases of this one.
    """

    name: str
    call_seq: str = ""
    description: Document = dc.field(default_factory=Document)
    visibility: Visibility = "public"
    singleton: bool = False
    parent: ClassModule | None = None
    is_alias_for: Method | None = None
    aliases: list[Method] = dc.field(default_factory=list)

    @property
    def pretty_name(self) -> str:
        return f"{'::' if self.singleton else '#'}{self.name}"

    @property
    def full_name(self) -> str:
        owner = self.parent.full_name if self.parent else ""
        return f"{owner}{self.pretty_name}"

    @property
    def arglists(self) -> str:
        return self.call_seq or f"{self.name}()"


@dc.dataclass(slots=True, eq=False)
class Alias:
    """External alias whose target is not documented in the same class."""

    new_name: str
    old_name: str
    singleton: bool = False
    description: Document = dc.field(default_factory=Document)
    parent: ClassModule | None = None

    @property
    def pretty_new_name(self) -> str:
        return f"{'::' if self.singleton else '#'}{self.new_name}"

    @property
    def pretty_old_name(self) -> str:
        return f"{'::' if self.singleton else '#'}{self.old_name}"


@dc.dataclass(slots=True, eq=False)
class Section:
    title: str
    description: Document = dc.field(default_factory=Document)
    parent: ClassModule | None = None


@dc.dataclass(slots=True, eq=False)
class ClassModule:
    """A class or module together with its documented members."""

    full_name: str
    kind: typ.Literal["class", "module"] = "class"
    description: Document = dc.field(default_factory=Document)
    superclass: str | None = None
    includes: list[str] = dc.field(default_factory=list)
    constants: list[Constant] = dc.field(default_factory=list)
    attributes: list[Attribute] = dc.field(default_factory=list)
    methods: list[Method] = dc.field(default_factory=list)
    aliases: list[Alias] = dc.field(default_factory=list)
    sections: list[Section] = dc.field(default_factory=list)
    parent: ClassModule | None = None

    @property
    def name(self) -> str:
        return self.full_name.rsplit("::", 1)[-1]

    @property
    def is_module(self) -> bool:
        return self.kind == "module"

    def methods_by_type(self) -> dict[str, dict[Visibility, list[Method]]]:
        """Group methods by ``"class"``/``"instance"`` and visibility."""
        grouped: dict[str, dict[Visibility, list[Method]]] = {
            kind: {visibility: [] for visibility in VISIBILITIES}
            for kind in ("class", "instance")
        }
        for method in self.methods:
            kind = "class" if method.singleton else "instance"
            grouped[kind][method.visibility].append(method)
        return grouped

    def find_method(self, name: str, *, singleton: bool | None = None) -> Method | None:
        """Return the method called ``name``; ``singleton=None`` matches both kinds."""
        for method in self.methods:
            if method.name != name:
                continue
            if singleton is None or method.singleton == singleton:
                return method
        return None

    def find_attribute(self, name: str) -> Attribute | None:
        return next((attr for attr in self.attributes if attr.name == name), None)

    def find_constant(self, name: str) -> Constant | None:
        return next((const for const in self.constants if const.name == name), None)


DocumentationEntity = (
    TopLevelPage | ClassModule | Method | Attribute | Alias | Constant | Section
)


@dc.dataclass(slots=True)
class DocumentationStore:
    """Ordered collection of every entity a generation run documents."""

    title: str = "Documentation"
    pages: list[TopLevelPage] = dc.field(default_factory=list)
    class_modules: list[ClassModule] = dc.field(default_factory=list)
    language: str | None = None

    def all_classes(self) -> list[ClassModule]:
        return sorted(
            (cm for cm in self.class_modules if not cm.is_module),
            key=lambda cm: cm.full_name,
        )

    def all_modules(self) -> list[ClassModule]:
        return sorted(
            (cm for cm in self.class_modules if cm.is_module),
            key=lambda cm: cm.full_name,
        )

    def classes_and_modules(self) -> list[ClassModule]:
        """Return classes and modules merged and sorted by full name."""
        everything = self.all_classes() + self.all_modules()
        return sorted(everything, key=lambda cm: cm.full_name)

    def find_class_module(self, full_name: str) -> ClassModule | None:
        name = full_name.removeprefix("::")
        return next((cm for cm in self.class_modules if cm.full_name == name), None)

    def find_page(self, name: str) -> TopLevelPage | None:
        return next((page for page in self.pages if page.name == name), None)

    def ordered_pages(self, main_page: str | None = None) -> list[TopLevelPage]:
        """Return the free pages with ``main_page`` moved to the front."""
        pages = list(self.pages)
        if main_page:
            index = next(
                (idx for idx, page in enumerate(pages) if page.name == main_page), None
            )
            if index is not None:
                pages.insert(0, pages.pop(index))
        return pages


__all__ = [
    "VISIBILITIES",
    "Alias",
    "Attribute",
    "ClassModule",
    "Constant",
    "DocumentationEntity",
    "DocumentationStore",
    "Method",
    "Section",
    "TopLevelPage",
    "Visibility",
]
