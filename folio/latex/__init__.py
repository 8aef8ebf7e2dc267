"""LaTeX output path: markup conversion and toolchain driver."""

from __future__ import annotations

from .formatter import LatexCrossrefFormatter, LatexFormatter, escape, latex_label
from .generator import LatexGenerator, latex_constant_value

__all__ = [
    "LatexCrossrefFormatter",
    "LatexFormatter",
    "LatexGenerator",
    "escape",
    "latex_constant_value",
    "latex_label",
]
