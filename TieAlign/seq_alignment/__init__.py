"""
Sequence Alignment Module
Global pairwise alignment that enumerates every optimal alignment
"""

from .pairwise import (
    NeedlemanWunschAligner,
    AlignmentResult,
    Direction,
    align
)
from .scoring import (
    BLOSUM62,
    make_scorer,
    substitution_scorer,
    score_alignment
)
from .errors import (
    TieAlignError,
    ScoreOverflowError,
    MatrixSizeError,
    AlignmentLimitWarning
)

__all__ = [
    "NeedlemanWunschAligner",
    "AlignmentResult",
    "Direction",
    "align",
    "BLOSUM62",
    "make_scorer",
    "substitution_scorer",
    "score_alignment",
    "TieAlignError",
    "ScoreOverflowError",
    "MatrixSizeError",
    "AlignmentLimitWarning"
]
