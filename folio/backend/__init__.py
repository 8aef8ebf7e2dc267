"""Paginated layout backends."""

from __future__ import annotations

from .base import Backend, Cell, Run
from .fpdf_backend import FpdfBackend
from .highlight import CodeHighlighter

__all__ = ["Backend", "Cell", "CodeHighlighter", "FpdfBackend", "Run"]
