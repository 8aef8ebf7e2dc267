"""Exception hierarchy shared by the folio generators.

Resolution problems (a name that refers to nothing, a destination that has
not been placed yet) are never raised; they are encoded into the output.
Everything defined here is structural and aborts a generation run.
"""

from __future__ import annotations


class FolioError(Exception):
    """Base class for all folio failures."""


class UnknownEntityError(FolioError, TypeError):
    """Raised when an anchor is requested for an object outside the entity set."""


class UnknownListKindError(FolioError, ValueError):
    """Raised when the block renderer meets a list kind it cannot lay out."""


class ModelError(FolioError, ValueError):
    """Raised when a documentation dump is malformed."""


class ConfigError(FolioError, ValueError):
    """Raised when the generator configuration is invalid or incomplete."""


class LatexToolchainError(FolioError, RuntimeError):
    """Raised when the LaTeX command is missing or exits unsuccessfully."""


__all__ = [
    "ConfigError",
    "FolioError",
    "LatexToolchainError",
    "ModelError",
    "UnknownEntityError",
    "UnknownListKindError",
]
