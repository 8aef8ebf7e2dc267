r"""Convert the markup tree into LaTeX source.

LaTeX resolves page numbers itself through ``\label``/``\pageref`` and a
few compiler runs, so references emitted here never consult an anchor
registry; they only need a label that LaTeX accepts.

>>> escape("10$ for the_item #5.")
'10\\$ for the\\textunderscore{}item \\#5.'
"""

from __future__ import annotations

import re
import typing as typ

from folio.errors import UnknownListKindError
from folio.model.markup import (
    BlankLine,
    Bold,
    Code,
    CrossRef,
    Emphasis,
    Heading,
    Hyperlink,
    ListBlock,
    ListKind,
    Paragraph,
    Raw,
    Rule,
    Text,
    Verbatim,
)
from folio.render.anchors import anchor_for
from folio.render.crossref import CrossReference

if typ.TYPE_CHECKING:
    from folio.model.entities import DocumentationEntity
    from folio.model.markup import Block, Document, Inline, ListItem
    from folio.render.crossref import CrossReferenceResolver

LATEX_HEADINGS: tuple[str | None, ...] = (
    None,
    "\\section{%s}",
    "\\subsection{%s}",
    "\\subsubsection{%s}",
    "\\subsubsubsection{%s}",
    "\\microsection*{%s}",
    "\\paragraph*{%s.} ",
)

LIST_ENVIRONMENTS: dict[ListKind, str] = {
    ListKind.BULLET: "itemize",
    ListKind.NUMBER: "enumerate",
    ListKind.LABEL: "description",
    ListKind.NOTE: "description",
    ListKind.LALPHA: "lalphaenum",
    ListKind.UALPHA: "ualphaenum",
}

_SPECIALS: dict[str, str] = {
    "\\": "\\textbackslash{}",
    "$": "\\$",
    "#": "\\#",
    "%": "\\%",
    "^": "\\textasciicircum{}",
    "&": "\\&",
    "{": "\\{",
    "}": "\\}",
    "_": "\\textunderscore{}",
    "~": "\\textasciitilde{}",
    "©": "\\copyright{}",
    "LaTeX": "\\LaTeX{}",
}
_SPECIAL_RE = re.compile("|".join(re.escape(key) for key in _SPECIALS))
_VERB_DELIMITERS = "~|!+="
_LABEL_UNSAFE = re.compile(r"[^A-Za-z0-9:+.\-]")


def escape(text: str) -> str:
    """Escape ``text`` so LaTeX typesets it literally.

    Every special character is replaced in a single scan, so the braces
    introduced by one replacement are never escaped again.
    """
    return _SPECIAL_RE.sub(lambda match: _SPECIALS[match.group(0)], text)


def latex_label(entity: DocumentationEntity) -> str:
    r"""Return the ``\label`` name of ``entity``.

    Built from the entity's anchor; ``#`` becomes ``+`` and any character
    LaTeX would choke on inside ``\label``/``\hyperref[...]`` is spelled out
    as its code point.
    """
    anchor = anchor_for(entity).replace("#", "+")
    return _LABEL_UNSAFE.sub(lambda match: f"-{ord(match.group(0)):x}-", anchor)


def _escape_url(url: str) -> str:
    return url.replace("\\", "/").replace("%", "\\%").replace("#", "\\#")


def _verb(text: str) -> str:
    for delimiter in _VERB_DELIMITERS:
        if delimiter not in text:
            return f"\\verb{delimiter}{text}{delimiter}"
    return f"\\texttt{{{escape(text)}}}"


class LatexFormatter:
    """Turn a :class:`~folio.model.markup.Document` into LaTeX.

    Parameters
    ----------
    heading_level : int, optional
        Added to the level of every heading in the converted document, so a
        description nested inside a class starts below the class heading.
    """

    def __init__(self, heading_level: int = 0) -> None:
        self.heading_level = heading_level

    def convert(self, document: Document) -> str:
        return "".join(self.block(part) for part in document.parts)

    def block(self, node: Block) -> str:
        match node:
            case Paragraph(parts=parts):
                return f"{self.inline(parts)}\n"
            case Heading(level=level, parts=parts):
                return self.heading(level, parts)
            case Verbatim(text=text):
                body = text.rstrip("\n")
                return f"\\begin{{Verbatim}}\n{body}\n\\end{{Verbatim}}\n"
            case Rule(weight=weight):
                return f"\\par\\noindent\\rule{{\\textwidth}}{{{weight}pt}}\\par\n"
            case BlankLine():
                return "\n\n"
            case Raw(text=text):
                return text
            case ListBlock(kind=kind, items=items):
                environment = LIST_ENVIRONMENTS.get(kind)
                if environment is None:
                    msg = f"Cannot convert list of kind {kind!r}."
                    raise UnknownListKindError(msg)
                body = "".join(self.item(item) for item in items)
                return f"\\begin{{{environment}}}\n{body}\\end{{{environment}}}\n"
            case _:
                typ.assert_never(node)

    def heading(self, level: int, parts: typ.Sequence[Inline]) -> str:
        index = max(1, min(level + self.heading_level, len(LATEX_HEADINGS) - 1))
        template = typ.cast("str", LATEX_HEADINGS[index])
        return template % self.inline(parts, fragile=True) + "\n"

    def item(self, item: ListItem) -> str:
        if item.label is not None:
            start = f"\\item[{self.inline(item.label, fragile=True)}] "
        else:
            start = "\\item "
        return start + "".join(self.block(part) for part in item.parts)

    def inline(self, parts: typ.Iterable[Inline], *, fragile: bool = False) -> str:
        r"""Convert inline nodes.

        ``fragile`` marks command arguments (headings, item labels), where
        ``\verb`` is not allowed.
        """
        chunks: list[str] = []
        for node in parts:
            match node:
                case Text(text=text):
                    chunks.append(self.text(text))
                case Bold(children=children):
                    inner = self.inline(children, fragile=fragile)
                    chunks.append(f"\\textbf{{{inner}}}")
                case Emphasis(children=children):
                    inner = self.inline(children, fragile=fragile)
                    chunks.append(f"\\textit{{{inner}}}")
                case Code(text=text):
                    chunks.append(
                        f"\\texttt{{{escape(text)}}}" if fragile else _verb(text)
                    )
                case Hyperlink(url=url, label=label):
                    target = _escape_url(url if ":" in url else f"http://{url}")
                    if label is None:
                        chunks.append(f"\\url{{{target}}}")
                    else:
                        chunks.append(f"\\href{{{target}}}{{{self.inline(label)}}}")
                case CrossRef(name=name, label=label):
                    chunks.append(self.crossref(name, label))
                case _:
                    typ.assert_never(node)
        return "".join(chunks)

    def text(self, text: str) -> str:
        return escape(text)

    def crossref(self, name: str, label: str | None) -> str:
        return escape(label if label is not None else name)


class LatexCrossrefFormatter(LatexFormatter):
    r"""LaTeX formatter that links references to documented entities.

    A resolved reference becomes ``\hyperref[label]{Name}``, followed by
    ``\nolinebreak[2][p.~\pageref{label}]`` when page numbers are shown.

    Parameters
    ----------
    resolver : CrossReferenceResolver
        Resolver without a registry.
    context : DocumentationEntity or None
        Entity whose description is converted.
    heading_level : int, optional
        See :class:`LatexFormatter`.
    """

    def __init__(
        self,
        resolver: CrossReferenceResolver,
        context: DocumentationEntity | None = None,
        heading_level: int = 0,
    ) -> None:
        super().__init__(heading_level)
        self.resolver = resolver
        self.context = context

    def text(self, text: str) -> str:
        chunks: list[str] = []
        for literal, candidate in self.resolver.split(text):
            if literal:
                chunks.append(escape(literal))
            if candidate is not None:
                reference = self.resolver.resolve(candidate, self.context)
                chunks.append(self.reference(reference))
        return "".join(chunks)

    def crossref(self, name: str, label: str | None) -> str:
        reference = self.resolver.resolve(name, self.context, label, explicit=True)
        return self.reference(reference)

    def link(self, entity: DocumentationEntity, label: str) -> str:
        """Link to an entity that is already known, shown as ``label``."""
        return self.reference(CrossReference(label, label, entity, anchor_for(entity)))

    def reference(self, reference: CrossReference) -> str:
        if reference.target is None:
            return escape(reference.label)
        label = latex_label(reference.target)
        # Allow hyphenation after namespace separators.
        name = escape(reference.label).replace("::", "\\-::")
        link = f"\\hyperref[{label}]{{{name}}}"
        if self.resolver.options.show_pages:
            link += f" \\nolinebreak[2][p.~\\pageref{{{label}}}]"
        return link


__all__ = [
    "LATEX_HEADINGS",
    "LIST_ENVIRONMENTS",
    "LatexCrossrefFormatter",
    "LatexFormatter",
    "escape",
    "latex_label",
]
