"""Render inline markup into styled runs for the PDF backend."""

from __future__ import annotations

import typing as typ

from folio.backend.base import Run
from folio.model.markup import (
    Bold,
    Code,
    CrossRef,
    Emphasis,
    Hyperlink,
    Inline,
    Text,
    plain_text,
)

from .crossref import CrossReference, CrossReferenceResolver, page_suffix

if typ.TYPE_CHECKING:
    from folio.model.entities import DocumentationEntity


class InlineRenderer:
    """Convert inline nodes of one entity's description into :class:`Run` lists.

    Plain text is scanned for reference candidates; code spans never are.

    Parameters
    ----------
    resolver : CrossReferenceResolver
        Resolver of the current pass.
    context : DocumentationEntity or None
        Entity whose description is rendered; relative names resolve here.
    """

    def __init__(
        self,
        resolver: CrossReferenceResolver,
        context: DocumentationEntity | None = None,
    ) -> None:
        self.resolver = resolver
        self.context = context

    @property
    def show_pages(self) -> bool:
        return self.resolver.options.show_pages

    def render(
        self, parts: typ.Iterable[Inline], style: Run | None = None
    ) -> list[Run]:
        """Return the runs for ``parts`` styled on top of ``style``."""
        base = style or Run("")
        runs: list[Run] = []
        for node in parts:
            match node:
                case Text(text=text):
                    runs.extend(self._text(text, base))
                case Bold(children=children):
                    runs.extend(self.render(children, base.styled(bold=True)))
                case Emphasis(children=children):
                    runs.extend(self.render(children, base.styled(italic=True)))
                case Code(text=text):
                    runs.append(base.styled(text=text, mono=True))
                case Hyperlink(url=url, label=label):
                    runs.extend(self._hyperlink(url, label, base))
                case CrossRef(name=name, label=label):
                    reference = self.resolver.resolve(
                        name, self.context, label, explicit=True
                    )
                    runs.extend(self.reference_runs(reference, base))
                case _:
                    typ.assert_never(node)
        return _merge(runs)

    def reference_runs(
        self, reference: CrossReference, style: Run | None = None
    ) -> list[Run]:
        """Runs showing ``reference``: a link plus the page marker when enabled."""
        base = style or Run("")
        if not reference.resolved:
            return [base.styled(text=reference.label)]
        link = base.styled(anchor=reference.anchor)
        runs = [link.styled(text=reference.label)]
        suffix = page_suffix(reference, show_pages=self.show_pages)
        if suffix and reference.placed:
            runs += [
                base.styled(text=" [p. "),
                link.styled(text=str(reference.page)),
                base.styled(text="]"),
            ]
        elif suffix:
            runs.append(base.styled(text=suffix))
        return runs

    def _text(self, text: str, base: Run) -> list[Run]:
        runs: list[Run] = []
        for literal, candidate in self.resolver.split(text):
            if literal:
                runs.append(base.styled(text=literal))
            if candidate is not None:
                reference = self.resolver.resolve(candidate, self.context)
                runs.extend(self.reference_runs(reference, base))
        return runs

    @staticmethod
    def _hyperlink(url: str, label: tuple[Inline, ...] | None, base: Run) -> list[Run]:
        target = url if ":" in url else f"http://{url}"
        if label is None:
            return [base.styled(text=url, url=target, mono=True)]
        return [base.styled(text=plain_text(label), url=target)]


def _merge(runs: list[Run]) -> list[Run]:
    """Join neighbouring runs with identical styling."""
    merged: list[Run] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].styled(text="") == run.styled(text=""):
            merged[-1] = merged[-1].styled(text=merged[-1].text + run.text)
        else:
            merged.append(run)
    return merged


__all__ = ["InlineRenderer"]
