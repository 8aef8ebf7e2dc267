"""Two-pass rendering of documentation into a paginated backend."""

from __future__ import annotations

from .anchors import EntityKind, Renderable, anchor_for, heading_base_level
from .blocks import BlockRenderer, RenderState
from .crossref import CrossReference, CrossReferenceResolver, ResolverOptions
from .document import DocumentWalker, method_groups, method_sort_key, sorted_methods
from .inline import InlineRenderer
from .options import RenderOptions
from .orchestrator import GenerationResult, TwoPassOrchestrator
from .registry import AnchorRegistry

__all__ = [
    "AnchorRegistry",
    "BlockRenderer",
    "CrossReference",
    "CrossReferenceResolver",
    "DocumentWalker",
    "EntityKind",
    "GenerationResult",
    "InlineRenderer",
    "RenderOptions",
    "RenderState",
    "Renderable",
    "ResolverOptions",
    "TwoPassOrchestrator",
    "anchor_for",
    "heading_base_level",
    "method_groups",
    "method_sort_key",
    "sorted_methods",
]
