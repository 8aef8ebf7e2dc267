"""Drive complete rendering passes until references are placed.

A reference to an entity that appears later in the document cannot know its
page during the first pass. The orchestrator renders the whole document,
checks whether any reference missed its target, and if so renders it again
from scratch with the pages learnt so far. The number of passes is capped;
page numbers could in principle keep shifting, so leftovers after the last
pass are reported instead of retried.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from folio.model.crossref import NameResolver

from .document import DocumentWalker
from .options import RenderOptions
from .registry import AnchorRegistry

if typ.TYPE_CHECKING:
    from pathlib import Path

    from folio.backend.base import Backend
    from folio.model.entities import DocumentationStore

logger = logging.getLogger(__name__)

BackendFactory = typ.Callable[[], "Backend"]


@dc.dataclass(slots=True)
class GenerationResult:
    """What a generation run produced.

    Attributes
    ----------
    backend : Backend
        Document of the final pass.
    passes : int
        Number of passes rendered.
    unresolved : list[str]
        Anchors still unplaced after the final pass.
    path : Path or None
        Where the document was saved, if it was.
    """

    backend: Backend
    passes: int
    unresolved: list[str] = dc.field(default_factory=list)
    path: Path | None = None

    @property
    def complete(self) -> bool:
        return not self.unresolved


class TwoPassOrchestrator:
    """Render a documentation store with bounded re-rendering.

    Parameters
    ----------
    store : DocumentationStore
        Entities to document.
    backend_factory : Callable[[], Backend]
        Creates the empty output document of a pass.
    options : RenderOptions, optional
        Display flags, main page and pass limit.
    registry : AnchorRegistry, optional
        Page bookkeeping for the run; a new one is created when omitted.

    Examples
    --------
    >>> from folio.backend.fpdf_backend import FpdfBackend
    >>> from folio.model.entities import DocumentationStore
    >>> result = TwoPassOrchestrator(DocumentationStore(), FpdfBackend).generate()
    >>> result.passes
    1
    """

    def __init__(
        self,
        store: DocumentationStore,
        backend_factory: BackendFactory,
        options: RenderOptions | None = None,
        registry: AnchorRegistry | None = None,
    ) -> None:
        self.store = store
        self.backend_factory = backend_factory
        self.options = options or RenderOptions()
        self.registry = registry if registry is not None else AnchorRegistry()
        self.names = NameResolver(store)

    def render_pass(self, number: int) -> Backend:
        """Render the whole document once into a fresh backend."""
        logger.info("rendering pass %d", number)
        self.registry.clear_unresolved()
        backend = self.backend_factory()
        walker = DocumentWalker(
            self.store, backend, self.registry, self.names, self.options
        )
        walker.walk()
        return backend

    def generate(self, output: Path | None = None) -> GenerationResult:
        """Render until every reference is placed or the pass limit is hit.

        Parameters
        ----------
        output : Path, optional
            Where to save the final document.

        Returns
        -------
        GenerationResult
            The final document, the number of passes, and any anchors that
            remained unplaced.
        """
        max_passes = max(1, self.options.max_passes)
        passes = 1
        backend = self.render_pass(passes)
        while self.registry.unresolved and passes < max_passes:
            logger.info(
                "%d references not placed yet; rendering again",
                len(self.registry.unresolved),
            )
            passes += 1
            backend = self.render_pass(passes)
        unresolved = self.registry.unresolved
        if unresolved:
            logger.warning(
                "unresolved page references after %d passes: %s",
                passes,
                ", ".join(unresolved),
            )
        path = backend.save(output) if output is not None else None
        return GenerationResult(
            backend=backend, passes=passes, unresolved=unresolved, path=path
        )


__all__ = ["BackendFactory", "GenerationResult", "TwoPassOrchestrator"]
