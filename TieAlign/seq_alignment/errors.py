"""
Exceptions and warnings raised by the alignment engine.

Every error carries a short message and, where there is something the
caller can do about it, a suggestion.
"""

from __future__ import annotations
from typing import Optional


class TieAlignError(Exception):
    """Base exception for all TieAlign errors.

    Parameters:
    -----------
    message : str
        What went wrong
    suggestion : str, optional
        What the caller can change to avoid the error
    """

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.formatted())

    def formatted(self) -> str:
        """Full message, suggestion included"""
        msg = self.message
        if self.suggestion:
            msg += f"\n  Suggestion: {self.suggestion}"
        return msg

    def __str__(self) -> str:
        return self.formatted()


class ScoreOverflowError(TieAlignError, OverflowError):
    """An accumulated score left the range of the int64 score matrix."""

    def __init__(self, value: int, cell: tuple):
        super().__init__(
            f"Score {value} at cell {cell} does not fit in a 64-bit signed integer",
            suggestion="Use smaller scorer values or gap penalties",
        )
        self.value = value
        self.cell = cell


class MatrixSizeError(TieAlignError, ValueError):
    """The dynamic-programming matrix would exceed the configured size limit."""

    def __init__(self, n_cells: int, max_cells: int):
        super().__init__(
            f"Alignment needs {n_cells} matrix cells, limit is {max_cells}",
            suggestion="Raise max_cells or align shorter sequences",
        )
        self.n_cells = n_cells
        self.max_cells = max_cells


class AlignmentLimitWarning(UserWarning):
    """More optimal alignments exist than were returned."""
