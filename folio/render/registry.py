"""Anchor-to-page bookkeeping for one generation run."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class AnchorRegistry:
    """Map anchors to the 1-based page they were last placed on.

    Entries survive between passes and are only ever overwritten. The
    unresolved set records anchors looked up through :meth:`lookup_or_flag`
    before they were registered; the orchestrator inspects and clears it
    between passes.

    Examples
    --------
    >>> registry = AnchorRegistry()
    >>> registry.lookup_or_flag("classmod-Widget") is None
    True
    >>> registry.unresolved
    ['classmod-Widget']
    >>> registry.register("classmod-Widget", 3)
    >>> registry.lookup("classmod-Widget")
    3
    """

    def __init__(self) -> None:
        self._pages: dict[str, int] = {}
        self._unresolved: dict[str, None] = {}

    def register(self, anchor: str, page: int) -> None:
        """Record that ``anchor`` was placed on ``page``."""
        self._pages[anchor] = page

    def lookup(self, anchor: str) -> int | None:
        """Return the page of ``anchor`` or ``None`` when it is unknown."""
        return self._pages.get(anchor)

    def lookup_or_flag(self, anchor: str) -> int | None:
        """Like :meth:`lookup`, but remember misses for another pass."""
        page = self._pages.get(anchor)
        if page is None:
            logger.debug("anchor %s not placed yet", anchor)
            self._unresolved.setdefault(anchor, None)
        return page

    def clear_unresolved(self) -> None:
        """Forget the misses of the previous pass; registered pages are kept."""
        self._unresolved.clear()

    @property
    def unresolved(self) -> list[str]:
        """Anchors missed during the current pass, in first-miss order."""
        return list(self._unresolved)

    def __contains__(self, anchor: object) -> bool:
        return anchor in self._pages

    def __len__(self) -> int:
        return len(self._pages)


__all__ = ["AnchorRegistry"]
