"""Load and validate generator configuration YAML for folio builds.

This subpackage parses a ``folio.yaml`` file with a ``defaults`` section
(output location, paper size, cross-reference flags, pass limit) and a
``latex`` section (toolchain command and babel language), and produces a
:class:`GeneratorOptions` the generators consume. The primary entry point is
:func:`load_generator_options`.

Examples
--------
>>> from pathlib import Path
>>> from folio.config import load_generator_options
>>> options = load_generator_options(Path("folio.yaml"))  # doctest: +SKIP
>>> options.render_options.max_passes  # doctest: +SKIP
2
"""

from folio.errors import ConfigError

from .loader import build_generator_options, load_generator_options
from .models import LATEX_PAPER_NAMES, PAPER_SIZES, GeneratorOptions, LatexOptions

__all__ = [
    "LATEX_PAPER_NAMES",
    "PAPER_SIZES",
    "ConfigError",
    "GeneratorOptions",
    "LatexOptions",
    "build_generator_options",
    "load_generator_options",
]
