"""Render extracted API documentation into paginated, cross-referenced PDFs.

This package exposes the CLI entry points used by the ``folio`` console
script to render a documentation dump through fpdf2 (two layout passes) or
through LaTeX.

Exports
-------
- ``app``: Cyclopts application with the ``pdf`` and ``latex`` commands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from folio import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
