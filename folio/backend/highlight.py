"""Syntax highlighting of verbatim blocks with Pygments."""

from __future__ import annotations

import dataclasses as dc

from pygments import lex
from pygments.lexers import get_lexer_by_name
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

RGB = tuple[int, int, int]


@dc.dataclass(frozen=True, slots=True)
class HighlightedToken:
    text: str
    color: RGB | None = None
    bold: bool = False
    italic: bool = False


def _rgb(value: str | None) -> RGB | None:
    if not value:
        return None
    value = value.lstrip("#")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


class CodeHighlighter:
    """Split source code into coloured tokens.

    Parameters
    ----------
    style : str, optional
        Pygments style name; unknown styles fall back to ``"default"``.
    language : str, optional
        Pygments lexer name; defaults to ``"text"`` when not provided or when
        the lexer lookup fails.
    """

    def __init__(self, style: str = "default", language: str | None = None) -> None:
        try:
            self.style = get_style_by_name(style)
        except ClassNotFound:
            self.style = get_style_by_name("default")
        lang = language or "text"
        try:
            self.lexer = get_lexer_by_name(lang, ensurenl=False, stripnl=False)
        except ClassNotFound:
            self.lexer = get_lexer_by_name("text", ensurenl=False, stripnl=False)
        self.language = self.lexer.name

    def tokens(self, code: str) -> list[HighlightedToken]:
        """Return ``code`` as styled tokens, merging neighbours of equal style."""
        merged: list[HighlightedToken] = []
        for token_type, value in lex(code, self.lexer):
            if not value:
                continue
            info = self.style.style_for_token(token_type)
            token = HighlightedToken(
                value,
                color=_rgb(info.get("color")),
                bold=bool(info.get("bold")),
                italic=bool(info.get("italic")),
            )
            if merged and dc.replace(merged[-1], text="") == dc.replace(token, text=""):
                merged[-1] = dc.replace(merged[-1], text=merged[-1].text + value)
            else:
                merged.append(token)
        return merged


__all__ = ["CodeHighlighter", "HighlightedToken"]
