"""Walk the documentation store in reading order for one pass.

Reading order is: free pages (main page first), the method overview, then
every class and module sorted by full name. Each of those starts on a new
page. Whenever an entity is placed, its anchor is registered at the current
page before any of its own content is emitted.
"""

from __future__ import annotations

import logging
import typing as typ

from folio._constants import (
    METHOD_HEADER_LINES,
    METHOD_INDENTATION,
    truncate_constant_value,
)
from folio.backend.base import Cell, Run
from folio.model.entities import VISIBILITIES
from folio.model.markup import Heading, Paragraph

from .anchors import Renderable, anchor_for
from .blocks import BlockRenderer
from .crossref import CrossReference, CrossReferenceResolver
from .inline import InlineRenderer
from .options import RenderOptions

if typ.TYPE_CHECKING:
    from folio.backend.base import Backend
    from folio.model.crossref import NameResolver
    from folio.model.entities import (
        Alias,
        Attribute,
        ClassModule,
        DocumentationEntity,
        DocumentationStore,
        Method,
        Section,
        TopLevelPage,
    )

    from .registry import AnchorRegistry

logger = logging.getLogger(__name__)

METHOD_GROUP_KINDS = ("class", "instance")


def method_sort_key(method: Method) -> tuple[int, str]:
    """Order class methods before instance methods, then by name."""
    return (0 if method.singleton else 1, method.name)


def sorted_methods(methods: typ.Iterable[Method]) -> list[Method]:
    return sorted(methods, key=method_sort_key)


def method_groups(cm: ClassModule) -> list[tuple[str, list[Method]]]:
    """Titled, sorted method groups of ``cm`` in the order they are printed.

    Class methods come before instance methods; within each kind the
    visibilities follow :data:`~folio.model.entities.VISIBILITIES`. Empty
    groups are left out.
    """
    grouped = cm.methods_by_type()
    groups: list[tuple[str, list[Method]]] = []
    for kind in METHOD_GROUP_KINDS:
        for visibility in VISIBILITIES:
            methods = grouped[kind][visibility]
            if methods:
                title = f"{visibility.capitalize()} {kind.capitalize()} methods"
                groups.append((title, sorted_methods(methods)))
    return groups


class DocumentWalker:
    """Emit the whole document into ``backend`` for one pass.

    Parameters
    ----------
    store : DocumentationStore
        Entities to document.
    backend : Backend
        Fresh output document of this pass.
    registry : AnchorRegistry
        Page bookkeeping shared by all passes of the run.
    names : NameResolver
        Name lookup used for references in prose.
    options : RenderOptions
        Display flags and the main page.
    """

    def __init__(
        self,
        store: DocumentationStore,
        backend: Backend,
        registry: AnchorRegistry,
        names: NameResolver,
        options: RenderOptions | None = None,
    ) -> None:
        self.store = store
        self.backend = backend
        self.registry = registry
        self.options = options or RenderOptions()
        self.blocks = BlockRenderer(backend)
        self.resolver = CrossReferenceResolver(
            names, registry, self.options.resolver_options
        )

    def walk(self) -> None:
        """Render every page, the method overview, and every class/module."""
        for page in self.store.ordered_pages(self.options.main_page):
            self.free_page(page)
        self.method_overview()
        for cm in self.store.classes_and_modules():
            self.class_module(cm)

    # Placement helpers ------------------------------------------------------

    def place(self, entity: DocumentationEntity) -> str:
        """Register ``entity`` on the current page and add its destination."""
        anchor = anchor_for(entity)
        page = self.backend.page_number()
        self.registry.register(anchor, page)
        logger.debug("placed %s on page %d", anchor, page)
        self.backend.add_destination(anchor)
        return anchor

    def inline(self, context: DocumentationEntity | None) -> InlineRenderer:
        return InlineRenderer(self.resolver, context)

    def describe(self, entity: DocumentationEntity) -> None:
        renderable = Renderable(entity)
        self.blocks.render(
            renderable.description, self.inline(entity), renderable.heading_level
        )

    def link(
        self, entity: DocumentationEntity, label: str, style: Run | None = None
    ) -> list[Run]:
        """Runs linking to ``entity`` with its page marker."""
        anchor = anchor_for(entity)
        reference = CrossReference(
            label, label, entity, anchor, self.registry.lookup_or_flag(anchor)
        )
        return self.inline(entity).reference_runs(reference, style)

    def heading(self, level: int, text: str) -> None:
        self.backend.heading(level, [Run(text)])

    # Sections of the document ----------------------------------------------

    def free_page(self, page: TopLevelPage) -> None:
        self.backend.new_page()
        self.place(page)
        self.describe(page)

    def method_overview(self) -> None:
        """Table of every method with the page it is documented on."""
        methods = [
            method
            for cm in self.store.classes_and_modules()
            for method in sorted_methods(cm.methods)
        ]
        if not methods:
            return
        self.backend.new_page()
        rows: list[list[Cell]] = []
        for method in methods:
            anchor = anchor_for(method)
            page = self.registry.lookup_or_flag(anchor)
            rows.append(
                [
                    [Run(method.full_name, mono=True)],
                    [Run(str(page) if page is not None else "???", anchor=anchor)],
                ]
            )
        self.backend.table(["Method name", "p."], rows)

    def class_module(self, cm: ClassModule) -> None:
        self.backend.new_page()
        self.place(cm)
        self.backend.caption("Module" if cm.is_module else "Class")
        self.heading(1, cm.full_name)
        if cm.superclass:
            parent = self.resolver.resolve(cm.superclass, cm, explicit=True)
            self.backend.paragraph(
                [Run("Parent: ", italic=True), *self.inline(cm).reference_runs(parent)]
            )
        self.describe(cm)
        for section in cm.sections:
            self.section(section)
        self._includes(cm)
        self._constants(cm)
        self._attributes(cm)
        self._aliases(cm)
        for title, methods in method_groups(cm):
            self.heading(2, title)
            for method in methods:
                self.method(method)

    def section(self, section: Section) -> None:
        self.place(section)
        self.heading(2, section.title)
        self.describe(section)

    def _includes(self, cm: ClassModule) -> None:
        if not cm.includes:
            return
        self.heading(2, "Includes")
        inline = self.inline(cm)
        for name in cm.includes:
            reference = self.resolver.resolve(name, cm, explicit=True)
            self.backend.paragraph(inline.reference_runs(reference))
        self.backend.blank_line()

    def _constants(self, cm: ClassModule) -> None:
        if not cm.constants:
            return
        self.heading(2, "Constants")
        rows: list[list[Cell]] = []
        for constant in cm.constants:
            self.place(constant)
            rows.append(
                [
                    [Run(constant.name, mono=True)],
                    [Run(truncate_constant_value(constant.value), mono=True)],
                    self.description_cell(constant),
                ]
            )
        self.backend.table(["Name", "Value", "Description"], rows)
        self.backend.blank_line()

    def _attributes(self, cm: ClassModule) -> None:
        if not cm.attributes:
            return
        self.heading(2, "Attributes")
        for attribute in sorted(cm.attributes, key=lambda attr: attr.name):
            self.attribute(attribute)
        self.backend.blank_line()

    def _aliases(self, cm: ClassModule) -> None:
        if not cm.aliases:
            return
        self.heading(2, "External aliases")
        for alias in sorted(cm.aliases, key=lambda alias: alias.new_name):
            self.alias(alias)
        self.backend.blank_line()

    def attribute(self, attribute: Attribute) -> None:
        self.place(attribute)
        self.backend.paragraph(
            [Run(attribute.name, bold=True), Run(f" [{attribute.rw}]")]
        )
        self._indented(attribute)

    def alias(self, alias: Alias) -> None:
        self.place(alias)
        original = self.resolver.resolve(
            alias.pretty_old_name, alias.parent, explicit=True
        )
        self.backend.paragraph(
            [
                Run(alias.new_name, bold=True),
                Run(" alias for ", italic=True),
                *self.inline(alias).reference_runs(original),
            ]
        )
        self._indented(alias)

    def method(self, method: Method) -> None:
        self.backend.ensure_space(METHOD_HEADER_LINES)
        self.place(method)
        self.backend.method_header(method.name, method.arglists)
        self.backend.add_padding(METHOD_INDENTATION, 0)
        italic = Run("", italic=True)
        if method.is_alias_for is not None:
            target = method.is_alias_for
            self.backend.paragraph(
                [
                    Run("Alias for ", italic=True),
                    *self.link(target, target.pretty_name, italic),
                ]
            )
        else:
            self.describe(method)
            if method.aliases:
                runs = [Run("Also aliased as: ", italic=True)]
                aliases = sorted(method.aliases, key=lambda alias: alias.name)
                for index, alias in enumerate(aliases):
                    if index:
                        runs.append(Run(", ", italic=True))
                    runs.extend(self.link(alias, alias.pretty_name, italic))
                self.backend.blank_line()
                self.backend.paragraph(runs)
        self.backend.subtract_padding(METHOD_INDENTATION, 0)
        self.backend.blank_line()

    def _indented(self, entity: DocumentationEntity) -> None:
        self.backend.add_padding(METHOD_INDENTATION, 0)
        self.describe(entity)
        self.backend.subtract_padding(METHOD_INDENTATION, 0)

    def description_cell(self, entity: DocumentationEntity) -> Cell:
        """Flatten a short description into one table cell."""
        inline = self.inline(entity)
        cell: Cell = []
        for block in Renderable(entity).description.parts:
            if not isinstance(block, Paragraph | Heading):
                continue
            if cell:
                cell.append(Run("\n"))
            cell.extend(inline.render(block.parts))
        return cell


__all__ = ["DocumentWalker", "method_groups", "method_sort_key", "sorted_methods"]
