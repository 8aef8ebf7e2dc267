"""Walk block markup and drive the backend, including nested lists.

List handling is a small state machine. Entering a list pushes its kind and
an indentation; numbered lists also push a counter so nested items get dotted
labels such as ``2.1.``. Label and note items are framed: the page and
vertical position where the frame opens are recorded, and when the item ends
the side borders are drawn, page by page if the item crossed a page break.
"""

from __future__ import annotations

import dataclasses as dc
import string
import typing as typ

from folio._constants import ITEM_PADDING, LIST_PADDING
from folio.backend.base import Run
from folio.errors import UnknownListKindError
from folio.model.markup import (
    BlankLine,
    Block,
    Document,
    Heading,
    ListBlock,
    ListItem,
    ListKind,
    Paragraph,
    Raw,
    Rule,
    Verbatim,
)

if typ.TYPE_CHECKING:
    from folio.backend.base import Backend

    from .inline import InlineRenderer

FRAMED_KINDS = frozenset({ListKind.LABEL, ListKind.NOTE})
ALPHA_KINDS = frozenset({ListKind.UALPHA, ListKind.LALPHA})


@dc.dataclass(slots=True)
class FrameStart:
    """Where an open label/note frame began."""

    page: int
    y: float


@dc.dataclass(slots=True)
class RenderState:
    """Mutable list state of one pass."""

    kinds: list[ListKind] = dc.field(default_factory=list)
    counters: list[int] = dc.field(default_factory=list)
    alpha_counters: list[int] = dc.field(default_factory=list)
    paddings: list[tuple[float, float]] = dc.field(default_factory=list)
    frames: list[FrameStart] = dc.field(default_factory=list)

    def is_idle(self) -> bool:
        """``True`` when no list, padding, or frame is open."""
        open_state = (
            self.kinds,
            self.counters,
            self.alpha_counters,
            self.paddings,
            self.frames,
        )
        return not any(open_state)


def number_label(counters: typ.Sequence[int]) -> str:
    """Format the dotted label of a numbered item.

    >>> number_label([2, 1])
    '2.1.'
    """
    return "".join(f"{counter}." for counter in counters)


def alpha_label(counter: int, kind: ListKind) -> str:
    """Format the label of an alphabetic item (``a.``, ``b.``, ... ``aa.``).

    >>> alpha_label(28, ListKind.UALPHA)
    'AB.'
    """
    letters = ""
    value = counter
    while value > 0:
        value, remainder = divmod(value - 1, 26)
        letters = string.ascii_lowercase[remainder] + letters
    return f"{letters.upper() if kind is ListKind.UALPHA else letters}."


class BlockRenderer:
    """Render block markup for one pass.

    A new renderer is created for every pass so list state never leaks from
    one pass into the next.

    Parameters
    ----------
    backend : Backend
        Output document of the current pass.
    """

    def __init__(self, backend: Backend) -> None:
        self.backend = backend
        self.state = RenderState()

    def render(
        self, document: Document, inline: InlineRenderer, base_level: int = 0
    ) -> None:
        """Render every block of ``document``.

        Parameters
        ----------
        document : Document
            Description to render.
        inline : InlineRenderer
            Renderer for the inline content, bound to the owning entity.
        base_level : int
            Added to every heading level in ``document``.
        """
        for block in document.parts:
            self.render_block(block, inline, base_level)

    def render_block(
        self, block: Block, inline: InlineRenderer, base_level: int
    ) -> None:
        match block:
            case Paragraph(parts=parts):
                self.backend.paragraph(inline.render(parts))
            case Heading(level=level, parts=parts):
                self.backend.heading(base_level + level, inline.render(parts))
            case Verbatim(text=text):
                self.backend.verbatim(text)
            case Rule(weight=weight):
                self.backend.rule(weight)
            case BlankLine():
                self.backend.blank_line()
            case Raw(text=text):
                self.backend.raw(text)
            case ListBlock(kind=kind, items=items):
                self.list_start(kind)
                for item in items:
                    self.item_start(item, inline)
                    for part in item.parts:
                        self.render_block(part, inline, base_level)
                    self.item_end(item)
                self.list_end(kind)
            case _:
                typ.assert_never(block)

    # List state machine -----------------------------------------------------

    def list_start(self, kind: ListKind) -> None:
        if not isinstance(kind, ListKind):
            msg = f"Unknown list kind {kind!r}."
            raise UnknownListKindError(msg)
        self.state.kinds.append(kind)
        if kind in FRAMED_KINDS:
            self._push_padding(LIST_PADDING, LIST_PADDING)
        else:
            self._push_padding(LIST_PADDING, 0)
        if kind is ListKind.NUMBER:
            self.state.counters.append(0)
        elif kind in ALPHA_KINDS:
            self.state.alpha_counters.append(0)

    def list_end(self, kind: ListKind) -> None:
        self._pop_padding()
        closed = self.state.kinds.pop()
        if closed is ListKind.NUMBER:
            self.state.counters.pop()
        elif closed in ALPHA_KINDS:
            self.state.alpha_counters.pop()

    def item_start(self, item: ListItem, inline: InlineRenderer) -> None:
        kind = self._current_kind()
        match kind:
            case ListKind.BULLET:
                self.backend.bullet()
            case ListKind.NUMBER:
                self.state.counters[-1] += 1
                self.backend.list_label(number_label(self.state.counters))
            case ListKind.UALPHA | ListKind.LALPHA:
                self.state.alpha_counters[-1] += 1
                label = alpha_label(self.state.alpha_counters[-1], kind)
                self.backend.list_label(label)
            case ListKind.LABEL | ListKind.NOTE:
                label = inline.render(item.label or (), Run("", bold=True))
                self.backend.label_box(label)
                self.backend.horizontal_line()
                self.state.frames.append(
                    FrameStart(self.backend.page_number(), self.backend.cursor())
                )
                self._push_padding(ITEM_PADDING, ITEM_PADDING)
            case _:
                msg = f"Unknown list kind {kind!r}."
                raise UnknownListKindError(msg)

    def item_end(self, item: ListItem) -> None:
        if self._current_kind() not in FRAMED_KINDS:
            return
        self._pop_padding()
        self.backend.horizontal_line()
        self._close_frame(self.state.frames.pop())

    def _close_frame(self, start: FrameStart) -> None:
        backend = self.backend
        end_page, end_y = backend.page_number(), backend.cursor()
        if start.page == end_page:
            backend.vertical_lines(start.y, end_y)
            return
        for page in range(start.page, end_page + 1):
            backend.go_to_page(page)
            top = start.y if page == start.page else backend.content_top()
            bottom = end_y if page == end_page else backend.content_bottom()
            backend.vertical_lines(top, bottom)
        backend.go_to_page(end_page)
        backend.set_cursor(end_y)
        backend.blank_line()

    def _current_kind(self) -> ListKind:
        if not self.state.kinds:
            msg = "List item outside of a list."
            raise UnknownListKindError(msg)
        return self.state.kinds[-1]

    def _push_padding(self, left: float, right: float) -> None:
        self.state.paddings.append((left, right))
        self.backend.add_padding(left, right)

    def _pop_padding(self) -> None:
        left, right = self.state.paddings.pop()
        self.backend.subtract_padding(left, right)


__all__ = [
    "BlockRenderer",
    "FrameStart",
    "RenderState",
    "alpha_label",
    "number_label",
]
