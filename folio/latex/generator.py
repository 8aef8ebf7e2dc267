"""Generate a PDF through LaTeX instead of the fpdf2 backend.

The generator writes one ``.tex`` file per free page and per class or module
into a temporary directory, ties them together in ``main.tex`` and lets the
LaTeX command compile the result several times so ``\\pageref`` settles. The
compiled PDF is copied into the output directory and the temporary directory
is removed. When compilation fails the directory is kept for inspection.

>>> from folio.config import GeneratorOptions
>>> from folio.model import DocumentationStore
>>> generator = LatexGenerator(DocumentationStore(), GeneratorOptions())
>>> generator.run()  # doctest: +SKIP
PosixPath('doc/Documentation.pdf')
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from folio._constants import (
    LATEX_CONSTANT_VALUE_CHAR_COUNT,
    LATEX_MAIN_FILENAME,
    LATEX_RESULT_FILENAME,
    LATEX_RUNS,
    LATEX_TEMP_DIRNAME,
)
from folio.errors import LatexToolchainError
from folio.model.crossref import NameResolver
from folio.render.anchors import Renderable, heading_base_level
from folio.render.crossref import CrossReferenceResolver
from folio.render.document import method_groups, sorted_methods

from .formatter import LatexCrossrefFormatter, escape, latex_label

if typ.TYPE_CHECKING:
    from folio.config import GeneratorOptions
    from folio.model.entities import (
        ClassModule,
        Constant,
        DocumentationEntity,
        DocumentationStore,
        Method,
    )

logger = logging.getLogger(__name__)

_FILENAME_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


def latex_constant_value(constant: Constant) -> str:
    """Escaped constant value, shortened for the constants list."""
    value = constant.value
    if len(value) <= LATEX_CONSTANT_VALUE_CHAR_COUNT:
        return escape(value)
    return escape(value[:LATEX_CONSTANT_VALUE_CHAR_COUNT]) + "\\ldots{}"


class LatexGenerator:
    """Render a documentation store to LaTeX and compile it.

    Parameters
    ----------
    store : DocumentationStore
        Entities to document.
    options : GeneratorOptions
        Output location, title, reference flags and toolchain settings.
    templates_dir : Path, optional
        Directory containing the LaTeX Jinja templates. Defaults to
        ``folio/templates/latex``.
    """

    def __init__(
        self,
        store: DocumentationStore,
        options: GeneratorOptions,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        self.store = store
        self.options = options
        self.templates_dir = (
            templates_dir or Path(__file__).resolve().parents[1] / "templates" / "latex"
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            block_start_string="\\BLOCK{",
            block_end_string="}",
            variable_start_string="\\VAR{",
            variable_end_string="}",
            comment_start_string="\\#{",
            comment_end_string="}",
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
            undefined=StrictUndefined,
        )
        self.env.filters["latex"] = escape
        self.env.filters["label"] = latex_label
        self.env.filters["constant_value"] = latex_constant_value
        self.env.globals.update(
            describe=self.describe,
            ref=self.ref,
            link=self.link,
            method_groups=method_groups,
        )
        self.resolver = CrossReferenceResolver(
            NameResolver(store), None, options.render_options.resolver_options
        )
        self._counter = 0

    @property
    def title(self) -> str:
        return self.options.title or self.store.title

    @property
    def temp_dir(self) -> Path:
        return self.options.output_dir / LATEX_TEMP_DIRNAME

    def run(self) -> Path:
        """Write the sources, compile them and return the PDF path.

        Raises
        ------
        LatexToolchainError
            If the LaTeX command is missing or any run fails.
        """
        temp_dir = self.temp_dir
        temp_dir.mkdir(parents=True, exist_ok=True)
        main_file = self.write_sources(temp_dir)
        for run in range(1, LATEX_RUNS + 1):
            self.compile(main_file, run)
        output_path = self.options.output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(temp_dir / LATEX_RESULT_FILENAME, output_path)
        shutil.rmtree(temp_dir)
        return output_path

    def write_sources(self, directory: Path) -> Path:
        """Render every template into ``directory`` and return ``main.tex``."""
        self._counter = 0
        page_files = [
            self._render_file(directory, "page.tex.jinja", page.name, page=page)
            for page in self.store.ordered_pages(self.options.main_page)
        ]
        class_files = [
            self._render_file(directory, "classmod.tex.jinja", cm.full_name, cm=cm)
            for cm in self.store.classes_and_modules()
        ]
        main_file = directory / LATEX_MAIN_FILENAME
        template = self.env.get_template("main.tex.jinja")
        main_file.write_text(
            template.render(
                title=self.title,
                babel_lang=self.options.latex.babel_lang,
                paper=self.options.latex_paper,
                show_pages=self.options.show_pages,
                page_files=page_files,
                class_files=class_files,
                methods=self._overview_methods(),
            ),
            encoding="utf-8",
        )
        logger.info(
            "wrote %s with %d page and %d class/module files",
            main_file,
            len(page_files),
            len(class_files),
        )
        return main_file

    def compile(self, main_file: Path, run: int = 1) -> None:
        """Run the LaTeX command once on ``main_file``."""
        command = self.options.latex.command
        logger.info("running %s (run %d of %d)", command, run, LATEX_RUNS)
        try:
            completed = subprocess.run(  # noqa: S603
                [command, "-interaction=nonstopmode", main_file.name],
                cwd=main_file.parent,
                check=True,
                text=True,
                capture_output=True,
            )
        except FileNotFoundError as exc:
            msg = f"LaTeX command '{command}' not found."
            raise LatexToolchainError(msg) from exc
        except subprocess.CalledProcessError as exc:
            logger.error("%s output:\n%s", command, exc.stdout)
            msg = f"Invoking {command} failed with exit status {exc.returncode}."
            raise LatexToolchainError(msg) from exc
        logger.debug("%s output:\n%s", command, completed.stdout)

    # Template helpers -------------------------------------------------------

    def describe(self, entity: DocumentationEntity) -> str:
        """LaTeX for the description of ``entity``."""
        formatter = LatexCrossrefFormatter(
            self.resolver, entity, heading_base_level(entity)
        )
        return formatter.convert(Renderable(entity).description)

    def ref(self, name: str, context: DocumentationEntity | None) -> str:
        """LaTeX for a name the template knows to be a reference."""
        return LatexCrossrefFormatter(self.resolver, context).crossref(name, None)

    def link(self, entity: DocumentationEntity, label: str) -> str:
        return LatexCrossrefFormatter(self.resolver, entity).link(entity, label)

    def _overview_methods(self) -> list[Method]:
        cms: list[ClassModule] = self.store.classes_and_modules()
        return [method for cm in cms for method in sorted_methods(cm.methods)]

    def _render_file(
        self, directory: Path, template_name: str, name: str, **context: typ.Any
    ) -> str:
        filename = f"{self._counter}_{_FILENAME_UNSAFE.sub('_', name)}.tex"
        self._counter += 1
        template = self.env.get_template(template_name)
        (directory / filename).write_text(template.render(**context), encoding="utf-8")
        return filename


__all__ = ["LatexGenerator", "latex_constant_value"]
