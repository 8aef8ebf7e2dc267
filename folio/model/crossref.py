"""Recognise and resolve symbolic references to documented entities.

Prose in a description may mention other entities by name (``Widget``,
``Widget#draw``, ``#draw``, ``Widget::create``, ``README.md``). The patterns
in this module find such candidates in a text run; :class:`NameResolver`
turns a candidate into the entity it names, looking up relative names in the
enclosing class or module first and then outward.

Examples
--------
>>> from folio.model.entities import ClassModule, DocumentationStore
>>> store = DocumentationStore(class_modules=[ClassModule("Widget")])
>>> resolver = NameResolver(store)
>>> resolver.resolve("Widget", None).full_name
'Widget'
>>> resolver.resolve("Gadget", None)
'Gadget'
"""

from __future__ import annotations

import re
import typing as typ

from .entities import (
    Alias,
    Attribute,
    ClassModule,
    Constant,
    DocumentationEntity,
    DocumentationStore,
    Method,
    Section,
    TopLevelPage,
)

CLASS_PATTERN = r"\\?(?:(?:::)?[A-Z]\w*(?:::\w+)*)"
METHOD_PATTERN = r"(?:[a-z]\w*[!?=]?|%|===|\[\]=?|<<|>>)(?:\([\w.+*/=<>-]*\))?"
FILENAME_PATTERN = r"(?:\.\./)*[-/\w]+[_/.][-\w/.]+"
CLASS_END = r"(?=[@\s).?!,;<\x00]|\Z)"

CROSSREF_PATTERN = re.compile(
    rf"""
    (?:^|\s)
    (?P<name>
      (?:
        {CLASS_PATTERN}(?:[.\#]|::){METHOD_PATTERN}
        | \\?\#{METHOD_PATTERN}
        | ::{METHOD_PATTERN}
        | {CLASS_PATTERN}{CLASS_END}
        | {FILENAME_PATTERN}
        | \\[^\s<]
      )
      (?:@[\w+%-]+(?:\.[\w|%-]+)?)?
    )
    """,
    re.VERBOSE,
)
"""Candidates recognised in conservative mode."""

ALL_CROSSREF_PATTERN = re.compile(
    rf"""
    (?:^|\s)
    (?P<name>
      (?:
        {CLASS_PATTERN}(?:[.\#]|::){METHOD_PATTERN}
        | {CLASS_PATTERN}{CLASS_END}
        | \\?\#?{METHOD_PATTERN}
        | {FILENAME_PATTERN}
        | \\[^\s<]
      )
      (?:@[\w+%-]+)?
    )
    """,
    re.VERBOSE,
)
"""Candidates recognised when every word may be a reference."""

_QUALIFIED_METHOD = re.compile(
    rf"^(?P<owner>{CLASS_PATTERN})(?P<sep>[.#]|::)(?P<method>{METHOD_PATTERN})$"
)
_ARGUMENTS = re.compile(r"\([\w.+*/=<>-]*\)$")


def scan_references(
    text: str, pattern: re.Pattern[str] = CROSSREF_PATTERN
) -> typ.Iterator[tuple[str, str | None]]:
    """Split ``text`` into literal chunks and reference candidates.

    Yields ``(literal, candidate)`` pairs in document order. ``candidate`` is
    ``None`` for the final trailing chunk. Concatenating every literal and
    candidate reproduces ``text`` exactly.
    """
    position = 0
    for match in pattern.finditer(text):
        start = match.start("name")
        yield text[position:start], match.group("name")
        position = match.end("name")
    yield text[position:], None


class NameResolver:
    """Resolve reference candidates against a :class:`DocumentationStore`.

    Parameters
    ----------
    store : DocumentationStore
        Entities that references may point at.
    """

    def __init__(self, store: DocumentationStore) -> None:
        self.store = store
        self._seen: dict[tuple[str, int], DocumentationEntity | str] = {}

    def resolve(
        self, name: str, context: DocumentationEntity | None
    ) -> DocumentationEntity | str:
        """Return the entity ``name`` refers to, or the text to show instead.

        Parameters
        ----------
        name : str
            Raw candidate as found in the prose, including sigils such as
            ``#`` or a leading backslash.
        context : DocumentationEntity or None
            Entity whose description contains the candidate. Relative names
            are looked up in its class or module first, then outward.

        Returns
        -------
        DocumentationEntity or str
            The target entity, or literal text when the name refers to nothing
            linkable. A backslash-escaped name that does resolve yields the
            name without its backslash so it is shown verbatim.
        """
        key = (name, id(context))
        if key in self._seen:
            return self._seen[key]
        if name == "\\":
            return name
        escaped = name.startswith("\\")
        bare = name[1:] if escaped else name
        target = self._find(bare.split("@", 1)[0] or bare, context)
        if isinstance(target, Alias):
            # External aliases have no documented target to jump to.
            target = None
        outcome: DocumentationEntity | str
        if escaped:
            outcome = bare if target is not None else name
        else:
            outcome = target if target is not None else name
        self._seen[key] = outcome
        return outcome

    # Lookup helpers ---------------------------------------------------------

    def _find(
        self, name: str, context: DocumentationEntity | None
    ) -> DocumentationEntity | None:
        scope = _enclosing_class(context)
        qualified = _QUALIFIED_METHOD.match(name)
        if qualified:
            owner = self.find_class_module(qualified["owner"].lstrip("\\"), scope)
            if owner is None:
                # ``README.md`` looks like ``Owner.method``.
                return self.store.find_page(name)
            return self._find_member(owner, qualified["method"], qualified["sep"])
        if name.startswith("#"):
            return self._find_outward(scope, name[1:], "#")
        if name.startswith("::") and not name[2:3].isupper():
            return self._find_outward(scope, name[2:], "::")
        if name[:1].isupper() or name.startswith("::"):
            found = self.find_class_module(name, scope)
            if found is None:
                found = self._find_qualified_constant(name, scope)
            return found if found is not None else self.store.find_page(name)
        page = self.store.find_page(name)
        if page is not None:
            return page
        return self._find_outward(scope, name, ".")

    def find_class_module(
        self, name: str, scope: ClassModule | None = None
    ) -> ClassModule | None:
        """Find a class or module by name relative to ``scope``."""
        if name.startswith("::"):
            return self.store.find_class_module(name)
        current = scope
        while current is not None:
            found = self.store.find_class_module(f"{current.full_name}::{name}")
            if found is not None:
                return found
            current = self._lexical_parent(current)
        return self.store.find_class_module(name)

    def _find_qualified_constant(
        self, name: str, scope: ClassModule | None
    ) -> Constant | None:
        owner_name, _, constant = name.rpartition("::")
        if owner_name:
            owner = self.find_class_module(owner_name, scope)
            return owner.find_constant(constant) if owner else None
        current = scope
        while current is not None:
            found = current.find_constant(name)
            if found is not None:
                return found
            current = self._lexical_parent(current)
        return None

    def _find_outward(
        self, scope: ClassModule | None, name: str, separator: str
    ) -> DocumentationEntity | None:
        current = scope
        while current is not None:
            found = self._find_member(current, name, separator)
            if found is not None:
                return found
            current = self._lexical_parent(current)
        return None

    def _find_member(
        self, owner: ClassModule, name: str, separator: str
    ) -> DocumentationEntity | None:
        """Look ``name`` up in ``owner`` and then along its superclass chain."""
        bare = _ARGUMENTS.sub("", name)
        singleton = {"#": False, "::": True}.get(separator)
        visited: set[int] = set()
        current: ClassModule | None = owner
        while current is not None and id(current) not in visited:
            visited.add(id(current))
            found = _local_member(current, bare, singleton)
            if found is not None:
                return found
            if current.superclass:
                scope = self._lexical_parent(current)
                current = self.find_class_module(current.superclass, scope)
            else:
                current = None
        return None

    def _lexical_parent(self, cm: ClassModule) -> ClassModule | None:
        if cm.parent is not None:
            return cm.parent
        owner, _, _ = cm.full_name.rpartition("::")
        return self.store.find_class_module(owner) if owner else None


def _local_member(
    owner: ClassModule, name: str, singleton: bool | None
) -> Method | Attribute | Constant | Alias | None:
    method = owner.find_method(name, singleton=singleton)
    if method is not None:
        return method
    if singleton is not True:
        attribute = owner.find_attribute(name)
        if attribute is not None:
            return attribute
    if singleton is not False:
        constant = owner.find_constant(name)
        if constant is not None:
            return constant
    return next(
        (
            alias
            for alias in owner.aliases
            if alias.new_name == name and singleton in (None, alias.singleton)
        ),
        None,
    )


def _enclosing_class(context: DocumentationEntity | None) -> ClassModule | None:
    match context:
        case ClassModule():
            return context
        case Method() | Attribute() | Constant() | Alias() | Section():
            return context.parent
        case TopLevelPage() | None:
            return None
        case _:
            typ.assert_never(context)


__all__ = [
    "ALL_CROSSREF_PATTERN",
    "CROSSREF_PATTERN",
    "NameResolver",
    "scan_references",
]
