"""Turn reference candidates found in prose into page-aware references.

The resolver is independent of the output format. It decides what a
candidate refers to and, when an :class:`AnchorRegistry` is supplied, on
which page the target was placed. Formatters turn the resulting
:class:`CrossReference` into links.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from folio._constants import UNRESOLVED_PAGE_MARKER
from folio.model.crossref import (
    ALL_CROSSREF_PATTERN,
    CROSSREF_PATTERN,
    NameResolver,
    scan_references,
)

from .anchors import anchor_for

if typ.TYPE_CHECKING:
    from folio.model.entities import DocumentationEntity

    from .registry import AnchorRegistry

_LOWERCASE_WORD = re.compile(r"[a-z]+")


@dc.dataclass(frozen=True, slots=True)
class ResolverOptions:
    """Flags controlling how references are recognised and displayed.

    Attributes
    ----------
    show_pages : bool
        Append the target page to every resolved reference.
    show_hash : bool
        Keep the leading ``#`` of instance-method references in the label.
    hyperlink_all : bool
        Also look up bare lowercase words.
    """

    show_pages: bool = True
    show_hash: bool = False
    hyperlink_all: bool = False


@dc.dataclass(frozen=True, slots=True)
class CrossReference:
    """Outcome of resolving one candidate."""

    name: str
    label: str
    target: DocumentationEntity | None = None
    anchor: str | None = None
    page: int | None = None

    @property
    def resolved(self) -> bool:
        """``True`` when the name refers to a documented entity."""
        return self.target is not None

    @property
    def placed(self) -> bool:
        """``True`` when the target's page is known."""
        return self.page is not None


class CrossReferenceResolver:
    """Resolve reference candidates for one pass of one formatter.

    Parameters
    ----------
    names : NameResolver
        Name lookup over the documentation model.
    registry : AnchorRegistry or None
        Page bookkeeping. ``None`` when the output format resolves pages on
        its own (LaTeX ``\\pageref``); references then never carry a page.
    options : ResolverOptions
        Display and recognition flags.
    """

    def __init__(
        self,
        names: NameResolver,
        registry: AnchorRegistry | None = None,
        options: ResolverOptions | None = None,
    ) -> None:
        self.names = names
        self.registry = registry
        self.options = options or ResolverOptions()

    @property
    def pattern(self) -> re.Pattern[str]:
        return ALL_CROSSREF_PATTERN if self.options.hyperlink_all else CROSSREF_PATTERN

    def split(self, text: str) -> typ.Iterator[tuple[str, str | None]]:
        """Split ``text`` into literal chunks and candidates."""
        return scan_references(text, self.pattern)

    def display_label(self, name: str) -> str:
        if name.startswith("#") and not self.options.show_hash:
            return name[1:]
        return name

    def resolve(
        self,
        name: str,
        context: DocumentationEntity | None,
        label: str | None = None,
        *,
        explicit: bool = False,
    ) -> CrossReference:
        """Resolve ``name`` as seen in the description of ``context``.

        Parameters
        ----------
        name : str
            Raw candidate text; used unchanged for the lookup.
        context : DocumentationEntity or None
            Entity owning the text, for relative names.
        label : str, optional
            Display text overriding the one derived from ``name``.
        explicit : bool, optional
            ``True`` for references the author marked as such; these skip the
            lowercase-word filter.

        Returns
        -------
        CrossReference
            Literal text when the name refers to nothing, otherwise the target
            with its anchor and, when known, its page.
        """
        display = label if label is not None else self.display_label(name)
        conservative = not (explicit or self.options.hyperlink_all)
        if conservative and _LOWERCASE_WORD.fullmatch(name):
            return CrossReference(name, name)

        outcome = self.names.resolve(name, context)
        if isinstance(outcome, str):
            if outcome != name:
                # Escaped reference; show the name without its backslash.
                return CrossReference(name, outcome)
            return CrossReference(name, display)

        anchor = anchor_for(outcome)
        page = None
        if self.registry is not None:
            page = self.registry.lookup_or_flag(anchor)
        return CrossReference(name, display, outcome, anchor, page)


def page_suffix(reference: CrossReference, *, show_pages: bool) -> str:
    """Return the page marker shown after a resolved reference's label."""
    if not show_pages or not reference.resolved:
        return ""
    if reference.placed:
        return f" [p. {reference.page}]"
    return f" {UNRESOLVED_PAGE_MARKER}"


__all__ = [
    "CrossReference",
    "CrossReferenceResolver",
    "ResolverOptions",
    "page_suffix",
]
