"""Load generator configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from folio._constants import DEFAULT_FILENAME, MAX_PASSES

from .helpers import _bool, _int, _mapping, _optional_str
from .models import GeneratorOptions, LatexOptions


def load_generator_options(path: Path) -> GeneratorOptions:
    """Load the YAML configuration of a documentation build.

    Parameters
    ----------
    path : Path
        Filesystem path to the configuration file (usually ``folio.yaml``).

    Returns
    -------
    GeneratorOptions
        Validated settings with defaults applied for every absent key.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ConfigError
        If a section or a value has the wrong type or is out of range.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> options = load_generator_options(Path("folio.yaml"))  # doctest: +SKIP
    >>> options.output_path  # doctest: +SKIP
    PosixPath('doc/Documentation.pdf')
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    return build_generator_options(dict(loaded))


def build_generator_options(raw: typ.Mapping[str, typ.Any]) -> GeneratorOptions:
    """Build :class:`GeneratorOptions` from an already parsed mapping."""
    defaults = _mapping(raw, "defaults")
    latex_raw = _mapping(raw, "latex")
    latex_defaults = LatexOptions()
    latex = LatexOptions(
        command=_optional_str(latex_raw.get("command")) or latex_defaults.command,
        babel_lang=_optional_str(latex_raw.get("babel_lang"))
        or latex_defaults.babel_lang,
    )
    options = GeneratorOptions(
        title=_optional_str(defaults.get("title")),
        output_dir=Path(defaults.get("output_dir", "doc")),
        filename=_optional_str(defaults.get("filename")) or DEFAULT_FILENAME,
        paper_size=str(defaults.get("paper_size", "A4")).upper(),
        show_pages=_bool(defaults, "show_pages", True),
        show_hash=_bool(defaults, "show_hash", False),
        hyperlink_all=_bool(defaults, "hyperlink_all", False),
        main_page=_optional_str(defaults.get("main_page")),
        pygments_style=_optional_str(defaults.get("pygments_style")) or "default",
        source_language=_optional_str(defaults.get("source_language")),
        max_passes=_int(defaults, "max_passes", MAX_PASSES),
        latex=latex,
    )
    return options.validate()


__all__ = ["build_generator_options", "load_generator_options"]
