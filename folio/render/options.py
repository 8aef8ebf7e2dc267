"""Options shared by the document walker and the orchestrator."""

from __future__ import annotations

import dataclasses as dc

from folio._constants import MAX_PASSES

from .crossref import ResolverOptions


@dc.dataclass(frozen=True, slots=True)
class RenderOptions:
    """Settings of one PDF generation run.

    Attributes
    ----------
    show_pages : bool
        Append ``[p. N]`` to resolved references.
    show_hash : bool
        Keep the ``#`` of instance-method references.
    hyperlink_all : bool
        Look up bare lowercase words as well.
    main_page : str or None
        Free page rendered before all others.
    max_passes : int
        Upper bound on rendering passes.
    """

    show_pages: bool = True
    show_hash: bool = False
    hyperlink_all: bool = False
    main_page: str | None = None
    max_passes: int = MAX_PASSES

    @property
    def resolver_options(self) -> ResolverOptions:
        return ResolverOptions(
            show_pages=self.show_pages,
            show_hash=self.show_hash,
            hyperlink_all=self.hyperlink_all,
        )


__all__ = ["RenderOptions"]
