"""Load documentation dumps from YAML into a :class:`DocumentationStore`.

A dump describes the free pages and classes/modules of a project:

.. code-block:: yaml

    title: Widgets
    pages:
      - name: README.md
        body: |
          Start with Widget.
    classes:
      - full_name: Widget
        kind: class
        description: Draws things.
        methods:
          - name: new
            singleton: true
            call_seq: new(size) -> widget

Descriptions are Markdown strings, or a list of structured blocks when a
construct has no Markdown spelling (alphabetic and note lists)::

    description:
      - paragraph: Steps
      - list:
          kind: ualpha
          items: [Unpack, Assemble]
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from folio.errors import ModelError

from .entities import (
    VISIBILITIES,
    Alias,
    Attribute,
    ClassModule,
    Constant,
    DocumentationStore,
    Method,
    Section,
    TopLevelPage,
)
from .markdown_source import parse_markdown
from .markup import (
    BlankLine,
    Block,
    Document,
    Heading,
    Inline,
    ListBlock,
    ListItem,
    ListKind,
    Paragraph,
    Raw,
    Rule,
    Verbatim,
)

logger = logging.getLogger(__name__)

_RW_MODES = frozenset({"R", "W", "RW"})


def load_documentation(path: Path) -> DocumentationStore:
    """Load a documentation dump from ``path``.

    Parameters
    ----------
    path : Path
        YAML file describing pages and classes/modules.

    Returns
    -------
    DocumentationStore
        Linked entities ready for rendering.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    TypeError
        If the top-level YAML structure is not a mapping.
    ModelError
        If an entry is malformed (missing names, unknown kinds).
    """
    if not path.exists():
        msg = f"Documentation dump '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    store = build_store(loaded)
    logger.debug(
        "loaded %d pages and %d classes/modules from %s",
        len(store.pages),
        len(store.class_modules),
        path,
    )
    return store


def build_store(raw: typ.Mapping[str, typ.Any]) -> DocumentationStore:
    """Build a store from an already-parsed mapping."""
    pages = [_build_page(entry) for entry in _entries(raw, "pages")]
    class_modules = [
        _build_class_module(entry, "class") for entry in _entries(raw, "classes")
    ]
    class_modules += [
        _build_class_module(entry, "module") for entry in _entries(raw, "modules")
    ]
    _link_parents(class_modules)
    return DocumentationStore(
        title=str(raw.get("title") or "Documentation"),
        pages=pages,
        class_modules=class_modules,
        language=raw.get("language"),
    )


def _entries(
    raw: typ.Mapping[str, typ.Any], key: str
) -> list[typ.Mapping[str, typ.Any]]:
    value = raw.get(key) or []
    if not isinstance(value, list):
        msg = f"'{key}' must be a list."
        raise ModelError(msg)
    for entry in value:
        if not isinstance(entry, dict):
            msg = f"Entries of '{key}' must be mappings, got {entry!r}."
            raise ModelError(msg)
    return value


def _require(entry: typ.Mapping[str, typ.Any], key: str, where: str) -> str:
    value = entry.get(key)
    if value is None or str(value) == "":
        msg = f"{where} is missing '{key}'."
        raise ModelError(msg)
    return str(value)


def _build_page(entry: typ.Mapping[str, typ.Any]) -> TopLevelPage:
    name = _require(entry, "name", "Page")
    return TopLevelPage(name=name, body=parse_description(entry.get("body")))


def _build_class_module(
    entry: typ.Mapping[str, typ.Any], default_kind: str
) -> ClassModule:
    full_name = _require(entry, "full_name", "Class/module").removeprefix("::")
    kind = entry.get("kind", default_kind)
    if kind not in ("class", "module"):
        msg = f"'{full_name}' has unknown kind {kind!r}."
        raise ModelError(msg)
    cm = ClassModule(
        full_name=full_name,
        kind=kind,
        description=parse_description(entry.get("description")),
        superclass=entry.get("superclass"),
        includes=[str(name) for name in entry.get("includes") or []],
    )
    for raw in _entries(entry, "constants"):
        cm.constants.append(
            Constant(
                name=_require(raw, "name", f"Constant in '{full_name}'"),
                value=str(raw.get("value", "")),
                description=parse_description(raw.get("description")),
                parent=cm,
            )
        )
    for raw in _entries(entry, "attributes"):
        rw = str(raw.get("rw", "R")).upper()
        if rw not in _RW_MODES:
            msg = f"Attribute in '{full_name}' has invalid rw mode {rw!r}."
            raise ModelError(msg)
        cm.attributes.append(
            Attribute(
                name=_require(raw, "name", f"Attribute in '{full_name}'"),
                rw=rw,
                description=parse_description(raw.get("description")),
                singleton=bool(raw.get("singleton", False)),
                parent=cm,
            )
        )
    for raw in _entries(entry, "methods"):
        cm.methods.append(_build_method(raw, cm))
    _link_method_aliases(cm, _entries(entry, "methods"))
    for raw in _entries(entry, "aliases"):
        cm.aliases.append(
            Alias(
                new_name=_require(raw, "new_name", f"Alias in '{full_name}'"),
                old_name=_require(raw, "old_name", f"Alias in '{full_name}'"),
                singleton=bool(raw.get("singleton", False)),
                description=parse_description(raw.get("description")),
                parent=cm,
            )
        )
    for raw in _entries(entry, "sections"):
        cm.sections.append(
            Section(
                title=_require(raw, "title", f"Section in '{full_name}'"),
                description=parse_description(raw.get("description")),
                parent=cm,
            )
        )
    return cm


def _build_method(raw: typ.Mapping[str, typ.Any], cm: ClassModule) -> Method:
    visibility = raw.get("visibility", "public")
    if visibility not in VISIBILITIES:
        msg = f"Method in '{cm.full_name}' has invalid visibility {visibility!r}."
        raise ModelError(msg)
    return Method(
        name=_require(raw, "name", f"Method in '{cm.full_name}'"),
        call_seq=str(raw.get("call_seq") or ""),
        description=parse_description(raw.get("description")),
        visibility=visibility,
        singleton=bool(raw.get("singleton", False)),
        parent=cm,
    )


def _link_method_aliases(
    cm: ClassModule, raw_methods: list[typ.Mapping[str, typ.Any]]
) -> None:
    """Connect ``is_alias_for`` and ``aliases`` by method name."""
    for method, raw in zip(cm.methods, raw_methods, strict=True):
        target_name = raw.get("is_alias_for")
        if target_name:
            target = cm.find_method(str(target_name), singleton=method.singleton)
            if target is None:
                msg = (
                    f"'{method.full_name}' is an alias of unknown method "
                    f"'{target_name}'."
                )
                raise ModelError(msg)
            method.is_alias_for = target
            if method not in target.aliases:
                target.aliases.append(method)
        for alias_name in raw.get("aliases") or []:
            alias = cm.find_method(str(alias_name), singleton=method.singleton)
            if alias is None:
                logger.debug(
                    "alias %s of %s is not documented", alias_name, method.full_name
                )
                continue
            alias.is_alias_for = method
            if alias not in method.aliases:
                method.aliases.append(alias)


def _link_parents(class_modules: list[ClassModule]) -> None:
    by_name = {cm.full_name: cm for cm in class_modules}
    for cm in class_modules:
        owner, _, _ = cm.full_name.rpartition("::")
        cm.parent = by_name.get(owner) if owner else None


def parse_description(value: typ.Any) -> Document:
    """Turn a Markdown string or a list of structured blocks into a document."""
    match value:
        case None:
            return Document()
        case str():
            return parse_markdown(value)
        case list():
            return Document(
                block for entry in value for block in _structured_block(entry)
            )
        case _:
            msg = f"Descriptions must be strings or block lists, got {value!r}."
            raise ModelError(msg)


def _structured_block(entry: typ.Any) -> list[Block]:
    if isinstance(entry, str):
        return list(parse_markdown(entry).parts)
    if not isinstance(entry, dict) or len(entry) != 1:
        msg = f"Structured blocks must be single-key mappings, got {entry!r}."
        raise ModelError(msg)
    ((kind, payload),) = entry.items()
    match kind:
        case "paragraph":
            return list(parse_markdown(str(payload)).parts)
        case "heading":
            payload = _payload_mapping(kind, payload)
            level = _payload_int(kind, payload.get("level", 1))
            return [Heading(level, _inline(str(payload.get("text", ""))))]
        case "verbatim":
            return [Verbatim(str(payload).rstrip("\n"))]
        case "rule":
            return [Rule(_payload_int(kind, payload or 1))]
        case "raw":
            return [Raw(str(payload))]
        case "blank":
            return [BlankLine()]
        case "list":
            return [_structured_list(_payload_mapping(kind, payload))]
        case _:
            msg = f"Unknown structured block {kind!r}."
            raise ModelError(msg)


def _payload_mapping(kind: str, payload: typ.Any) -> typ.Mapping[str, typ.Any]:
    if not isinstance(payload, dict):
        msg = f"The {kind!r} block needs a mapping, got {payload!r}."
        raise ModelError(msg)
    return payload


def _payload_int(kind: str, value: typ.Any) -> int:
    msg = f"The {kind!r} block needs an integer, got {value!r}."
    if isinstance(value, bool):
        raise ModelError(msg)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ModelError(msg) from exc


def _structured_list(payload: typ.Mapping[str, typ.Any]) -> ListBlock:
    try:
        kind = ListKind(payload.get("kind", "bullet"))
    except ValueError as exc:
        msg = f"Unknown list kind {payload.get('kind')!r}."
        raise ModelError(msg) from exc
    items: list[ListItem] = []
    for item in payload.get("items") or []:
        if isinstance(item, dict) and "body" in item:
            label = item.get("label")
            items.append(
                ListItem(
                    parse_description(item["body"]).parts,
                    _inline(str(label)) if label is not None else None,
                )
            )
        else:
            body = item if isinstance(item, list) else str(item)
            items.append(ListItem(parse_description(body).parts))
    return ListBlock(kind, tuple(items))


def _inline(text: str) -> tuple[Inline, ...]:
    for block in parse_markdown(text).parts:
        if isinstance(block, Paragraph | Heading):
            return block.parts
    return ()


__all__ = ["build_store", "load_documentation", "parse_description"]
