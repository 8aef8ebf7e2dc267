"""Common literal values used across folio.

Layout measurements are in PDF points. They are shared by the block renderer,
the fpdf2 backend and the tests so the numbers never drift apart.

Examples
--------
>>> from folio import _constants
>>> _constants.HEADING_SIZES[1]
32
>>> _constants.truncate_constant_value("a" * 25)
'aaaaaaaaaaaaaaaaaaaa…'
"""

DEFAULT_FILENAME = "Documentation.pdf"
DEFAULT_CONFIG_FILENAME = "folio.yaml"
INDEX_FILENAME = "index.html"
LATEX_MAIN_FILENAME = "main.tex"
LATEX_RESULT_FILENAME = "main.pdf"
LATEX_TEMP_DIRNAME = "tmp"
LATEX_RUNS = 3
LATEX_CONSTANT_VALUE_CHAR_COUNT = 10

BASE_FONT = "Helvetica"
MONO_FONT = "Courier"
BASE_FONT_SIZE = 11
CAPTION_FONT_SIZE = 10

HEADING_SIZES: tuple[int | None, ...] = (None, 32, 22, 18, 16, 14, 12)
"""Font size per heading level; index 0 is unused."""

MAX_PASSES = 2
LIST_PADDING = 20
ITEM_PADDING = 5
METHOD_INDENTATION = 40
METHOD_HEADER_LINES = 3
CONSTANT_VALUE_CHAR_COUNT = 20

LINK_COLOR = (0, 0, 160)
LABEL_BOX_COLOR = (220, 220, 220)
DECORATION_COLOR = (120, 120, 120)

UNRESOLVED_PAGE_MARKER = "(p. ???)"


def truncate_constant_value(value: str) -> str:
    """Shorten long constant values for the constants table."""
    if len(value) <= CONSTANT_VALUE_CHAR_COUNT:
        return value
    return value[:CONSTANT_VALUE_CHAR_COUNT] + "…"
