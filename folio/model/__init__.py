"""Documentation model: entities, markup tree, loaders and name resolution."""

from __future__ import annotations

from .crossref import (
    ALL_CROSSREF_PATTERN,
    CROSSREF_PATTERN,
    NameResolver,
    scan_references,
)
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
from .loader import build_store, load_documentation, parse_description
from .markdown_source import parse_markdown

__all__ = [
    "ALL_CROSSREF_PATTERN",
    "CROSSREF_PATTERN",
    "Alias",
    "Attribute",
    "ClassModule",
    "Constant",
    "DocumentationEntity",
    "DocumentationStore",
    "Method",
    "NameResolver",
    "Section",
    "TopLevelPage",
    "build_store",
    "load_documentation",
    "parse_description",
    "parse_markdown",
    "scan_references",
]
