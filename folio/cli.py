"""Cyclopts CLI entrypoint for turning documentation dumps into PDF files.

The ``folio`` console script defined here reads a documentation dump (YAML
produced by a language-specific extractor), applies the generator settings
from ``folio.yaml`` and the command line, and writes either a two-pass fpdf2
PDF plus an ``index.html`` landing page (``folio pdf``) or a LaTeX-compiled
PDF (``folio latex``).

Examples
--------
Render the PDF for a dump with the default configuration:

>>> from folio.cli import main
>>> main()  # doctest: +SKIP

Render into a custom directory without page markers:

>>> from folio.cli import app
>>> app.run(
...     ["pdf", "api.yaml", "--output-dir", "dist", "--no-show-pages"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import functools
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG_FILENAME
from .backend.fpdf_backend import FpdfBackend
from .config import GeneratorOptions, load_generator_options
from .index_page import IndexPageBuilder
from .latex import LatexGenerator
from .model import load_documentation
from .render import TwoPassOrchestrator

app = App(name="folio", config=cyclopts.config.Env("FOLIO_", command=False))  # type: ignore[unknown-argument]

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )


def resolve_options(config: Path | None, **overrides: typ.Any) -> GeneratorOptions:
    """Load generator options and apply command-line overrides.

    Parameters
    ----------
    config : Path or None
        Explicit configuration file. When ``None``, ``folio.yaml`` in the
        working directory is used if it exists, otherwise the defaults.
    **overrides
        Option values from the command line; ``None`` means "not given".

    Returns
    -------
    GeneratorOptions
        Validated options.

    Raises
    ------
    FileNotFoundError
        If an explicit ``config`` does not exist.
    ConfigError
        If a merged value is invalid.
    """
    if config is not None:
        options = load_generator_options(config)
    elif Path(DEFAULT_CONFIG_FILENAME).exists():
        options = load_generator_options(Path(DEFAULT_CONFIG_FILENAME))
    else:
        options = GeneratorOptions()
    given = {key: value for key, value in overrides.items() if value is not None}
    latex_changes = {
        key: given.pop(key) for key in ("command", "babel_lang") if key in given
    }
    changes = dict(given)
    if "paper_size" in changes:
        changes["paper_size"] = changes["paper_size"].upper()
    if latex_changes:
        changes["latex"] = dc.replace(options.latex, **latex_changes)
    return dc.replace(options, **changes).validate()


@app.command(help="Render a documentation dump to PDF with two layout passes.")
def pdf(
    model: typ.Annotated[Path, Parameter(help="Documentation dump (YAML)")],
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to folio.yaml")
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    title: typ.Annotated[str | None, Parameter(help="Document title")] = None,
    main_page: typ.Annotated[
        str | None, Parameter(help="Free page rendered first")
    ] = None,
    paper_size: typ.Annotated[
        str | None, Parameter(help="Paper size, e.g. A4 or LETTER")
    ] = None,
    show_pages: typ.Annotated[
        bool | None, Parameter(help="Append page numbers to references")
    ] = None,
    show_hash: typ.Annotated[
        bool | None, Parameter(help="Keep '#' in instance method references")
    ] = None,
    hyperlink_all: typ.Annotated[
        bool | None, Parameter(help="Also link bare lowercase words")
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log progress")] = False,
) -> None:
    """Render ``model`` to PDF and write the landing page next to it.

    Parameters
    ----------
    model : Path
        Documentation dump to render.
    config : Path or None, optional
        Generator configuration; ``folio.yaml`` in the working directory is
        used when omitted and present.
    output_dir, title, main_page, paper_size : optional
        Override the corresponding configuration values.
    show_pages, show_hash, hyperlink_all : bool or None, optional
        Override the cross-reference flags.
    verbose : bool, optional
        Log pass progress and diagnostics at INFO level.

    Returns
    -------
    None
        Writes the PDF and ``index.html`` and prints their paths.
    """
    _configure_logging(verbose)
    options = resolve_options(
        config,
        output_dir=output_dir,
        title=title,
        main_page=main_page,
        paper_size=paper_size,
        show_pages=show_pages,
        show_hash=show_hash,
        hyperlink_all=hyperlink_all,
    )
    store = load_documentation(model)
    backend_factory = functools.partial(
        FpdfBackend,
        options.paper_size,
        language=options.source_language or store.language,
        pygments_style=options.pygments_style,
        title=options.title or store.title,
    )
    result = TwoPassOrchestrator(
        store, backend_factory, options.render_options
    ).generate(options.output_path)
    if result.path is not None:
        print(f"wrote {_format_path(result.path)}")
    if not result.complete:
        print(f"{len(result.unresolved)} references left unplaced")
    index_path = IndexPageBuilder(store, options, result=result).run()
    print(f"wrote {_format_path(index_path)}")


@app.command(help="Render a documentation dump to PDF through LaTeX.")
def latex(
    model: typ.Annotated[Path, Parameter(help="Documentation dump (YAML)")],
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to folio.yaml")
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    title: typ.Annotated[str | None, Parameter(help="Document title")] = None,
    main_page: typ.Annotated[
        str | None, Parameter(help="Free page rendered first")
    ] = None,
    paper_size: typ.Annotated[
        str | None, Parameter(help="Paper size, e.g. A4 or LETTER")
    ] = None,
    show_pages: typ.Annotated[
        bool | None, Parameter(help="Append page numbers to references")
    ] = None,
    show_hash: typ.Annotated[
        bool | None, Parameter(help="Keep '#' in instance method references")
    ] = None,
    hyperlink_all: typ.Annotated[
        bool | None, Parameter(help="Also link bare lowercase words")
    ] = None,
    latex_command: typ.Annotated[
        str | None, Parameter(help="LaTeX executable, e.g. pdflatex")
    ] = None,
    babel_lang: typ.Annotated[
        str | None, Parameter(help="Language passed to babel")
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Log progress")] = False,
) -> None:
    """Render ``model`` through LaTeX.

    Parameters
    ----------
    model : Path
        Documentation dump to render.
    config : Path or None, optional
        Generator configuration.
    output_dir, title, main_page, paper_size : optional
        Override the corresponding configuration values.
    show_pages, show_hash, hyperlink_all : bool or None, optional
        Override the cross-reference flags.
    latex_command, babel_lang : str or None, optional
        Override the toolchain settings.
    verbose : bool, optional
        Log LaTeX runs at INFO level.

    Raises
    ------
    LatexToolchainError
        If the LaTeX command is missing or fails.
    """
    _configure_logging(verbose)
    options = resolve_options(
        config,
        output_dir=output_dir,
        title=title,
        main_page=main_page,
        paper_size=paper_size,
        show_pages=show_pages,
        show_hash=show_hash,
        hyperlink_all=hyperlink_all,
        command=latex_command,
        babel_lang=babel_lang,
    )
    store = load_documentation(model)
    written = LatexGenerator(store, options).run()
    print(f"wrote {_format_path(written)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``folio`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
