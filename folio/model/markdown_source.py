r"""Parse Markdown descriptions into the folio markup tree.

Descriptions in documentation dumps are written in Markdown. This module runs
them through python-markdown and converts the resulting element tree into the
closed node set of :mod:`folio.model.markup`, so formatters never see HTML.

Explicit cross-references use the ``ref:`` link scheme::

    See [the constructor](ref:Widget::new) for details.

Definition lists become label lists; when every term ends with a colon the
list is treated as a note list instead.

Example
-------
>>> from folio.model.markdown_source import parse_markdown
>>> doc = parse_markdown("A *short* note.")
>>> type(doc.parts[0]).__name__
'Paragraph'
"""

from __future__ import annotations

import html
import re
import typing as typ

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import HTML_PLACEHOLDER_RE

from .markup import (
    Block,
    Bold,
    Code,
    CrossRef,
    Document,
    Emphasis,
    Heading,
    Hyperlink,
    Inline,
    ListBlock,
    ListItem,
    ListKind,
    Paragraph,
    Raw,
    Rule,
    Text,
    Verbatim,
    plain_text,
)

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element
else:  # pragma: no cover - type-checking fallback
    Element = typ.Any

REF_SCHEME = "ref:"
ESCAPED_CHAR_PATTERN = re.compile("\x02([0-9]+)\x03")
HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}
BOLD_TAGS = frozenset({"strong", "b"})
EMPHASIS_TAGS = frozenset({"em", "i"})


class MarkupTreeExtension(Extension):
    """Capture the parsed element tree as a :class:`Document`."""

    def __init__(self) -> None:
        super().__init__()
        self.document = Document()

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the capturing treeprocessor after inline processing."""
        md.treeprocessors.register(MarkupTreeprocessor(md, self), "folio_markup", 12)


class MarkupTreeprocessor(Treeprocessor):
    """Convert the element tree into markup nodes and hand them to the extension."""

    def __init__(self, md: Markdown, extension: MarkupTreeExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, root: Element) -> None:
        self.extension.document = Document(self._blocks(root))

    # Block level ------------------------------------------------------------

    def _blocks(self, parent: Element) -> list[Block]:
        blocks: list[Block] = []
        for element in parent:
            block = self._block(element)
            if block is not None:
                blocks.append(block)
        return blocks

    def _block(self, element: Element) -> Block | None:
        tag = element.tag
        if tag == "p":
            raw = self._raw_html(element)
            if raw is not None:
                return Raw(raw)
            return Paragraph(tuple(self._inline_children(element)))
        if tag in HEADING_TAGS:
            return Heading(HEADING_TAGS[tag], tuple(self._inline_children(element)))
        if tag == "pre":
            code = element.find("code")
            source = code if code is not None else element
            return Verbatim(html.unescape(_unescape(source.text or "")).rstrip("\n"))
        if tag == "hr":
            return Rule()
        if tag == "ul":
            return ListBlock(ListKind.BULLET, tuple(self._list_items(element)))
        if tag == "ol":
            return ListBlock(_ordered_kind(element), tuple(self._list_items(element)))
        if tag == "dl":
            return self._definition_list(element)
        if tag == "blockquote":
            return ListBlock(
                ListKind.NOTE, (ListItem(tuple(self._blocks(element)), None),)
            )
        return None

    def _list_items(self, element: Element) -> list[ListItem]:
        return [
            ListItem(tuple(self._item_blocks(child)))
            for child in element
            if child.tag == "li"
        ]

    def _item_blocks(self, element: Element) -> list[Block]:
        """Return the blocks of a list item, wrapping tight text into a paragraph."""
        blocks: list[Block] = []
        leading: list[Inline] = []
        if element.text and element.text.strip():
            leading.extend(self._text(element.text))
        for child in element:
            if child.tag in INLINE_TAGS:
                leading.extend(self._inline(child))
                if child.tail:
                    leading.extend(self._text(child.tail))
                continue
            if leading:
                blocks.append(Paragraph(tuple(_strip_runs(leading))))
                leading = []
            block = self._block(child)
            if block is not None:
                blocks.append(block)
        if leading:
            blocks.append(Paragraph(tuple(_strip_runs(leading))))
        return blocks

    def _definition_list(self, element: Element) -> ListBlock:
        items: list[ListItem] = []
        labels: list[tuple[Inline, ...]] = []
        for child in element:
            if child.tag == "dt":
                labels.append(tuple(self._inline_children(child)))
            elif child.tag == "dd":
                label = labels[-1] if labels else ()
                items.append(ListItem(tuple(self._item_blocks(child)), label))
        is_note = bool(labels) and all(
            _label_text(label).endswith(":") for label in labels
        )
        return ListBlock(ListKind.NOTE if is_note else ListKind.LABEL, tuple(items))

    def _raw_html(self, element: Element) -> str | None:
        text = (element.text or "").strip()
        if len(element) or not text:
            return None
        match = HTML_PLACEHOLDER_RE.fullmatch(text)
        if match is None:
            return None
        return self.md.htmlStash.rawHtmlBlocks[int(match.group(1))]

    # Inline level -----------------------------------------------------------

    def _inline_children(self, element: Element) -> list[Inline]:
        nodes: list[Inline] = []
        if element.text:
            nodes.extend(self._text(element.text))
        for child in element:
            nodes.extend(self._inline(child))
            if child.tail:
                nodes.extend(self._text(child.tail))
        return _strip_runs(nodes)

    def _inline(self, element: Element) -> list[Inline]:
        tag = element.tag
        if tag in BOLD_TAGS:
            return [Bold(tuple(self._inline_children(element)))]
        if tag in EMPHASIS_TAGS:
            return [Emphasis(tuple(self._inline_children(element)))]
        if tag == "code":
            return [Code(html.unescape(_unescape(element.text or "")))]
        if tag == "a":
            href = element.get("href", "")
            label = self._inline_children(element)
            if href.startswith(REF_SCHEME):
                name = href[len(REF_SCHEME) :]
                text = _label_text(tuple(label)) or None
                return [CrossRef(name, None if text == name else text)]
            if not label or _label_text(tuple(label)) == href:
                return [Hyperlink(href)]
            return [Hyperlink(href, tuple(label))]
        if tag == "br":
            return [Text("\n")]
        return self._inline_children(element)

    def _text(self, text: str) -> list[Inline]:
        expanded = HTML_PLACEHOLDER_RE.sub(
            lambda match: self.md.htmlStash.rawHtmlBlocks[int(match.group(1))], text
        )
        return [Text(_unescape(expanded))]


INLINE_TAGS = frozenset({"strong", "b", "em", "i", "code", "a", "br", "span"})


def _ordered_kind(element: Element) -> ListKind:
    match element.get("type"):
        case "a":
            return ListKind.LALPHA
        case "A":
            return ListKind.UALPHA
        case _:
            return ListKind.NUMBER


def _unescape(text: str) -> str:
    """Restore characters python-markdown stashed as backslash escapes."""
    return ESCAPED_CHAR_PATTERN.sub(lambda match: chr(int(match.group(1))), text)


def _label_text(parts: tuple[Inline, ...]) -> str:
    return plain_text(parts).strip()


def _strip_runs(nodes: list[Inline]) -> list[Inline]:
    """Merge adjacent text nodes and trim surrounding whitespace."""
    merged: list[Inline] = []
    for node in nodes:
        if merged and isinstance(node, Text) and isinstance(merged[-1], Text):
            merged[-1] = Text(merged[-1].text + node.text)
        else:
            merged.append(node)
    if merged and isinstance(merged[0], Text):
        merged[0] = Text(merged[0].text.lstrip())
    if merged and isinstance(merged[-1], Text):
        merged[-1] = Text(merged[-1].text.rstrip())
    return [node for node in merged if not (isinstance(node, Text) and not node.text)]


def parse_markdown(text: str) -> Document:
    """Parse ``text`` into a :class:`Document`.

    Parameters
    ----------
    text : str
        Markdown source of a description or free page.

    Returns
    -------
    Document
        The parsed markup tree; empty when ``text`` is blank.
    """
    if not text.strip():
        return Document()
    extension = MarkupTreeExtension()
    md = Markdown(extensions=["def_list", "sane_lists", "tables", extension])
    md.convert(text)
    return extension.document


__all__ = ["MarkupTreeExtension", "MarkupTreeprocessor", "parse_markdown"]
