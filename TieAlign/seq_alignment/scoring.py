"""
Pairwise element scorers and independent alignment re-scoring.
"""

import operator
from typing import Any, Callable, Dict, Optional, Sequence, Tuple


Scorer = Callable[[Any, Any], int]


_BLOSUM62_ORDER = "ARNDCQEGHILKMFPSTWYV"
_BLOSUM62_ROWS = {
    "A": "  4 -1 -2 -2  0 -1 -1  0 -2 -1 -1 -1 -1 -2 -1  1  0 -3 -2  0",
    "R": " -1  5  0 -2 -3  1  0 -2  0 -3 -2  2 -1 -3 -2 -1 -1 -3 -2 -3",
    "N": " -2  0  6  1 -3  0  0  0  1 -3 -3  0 -2 -3 -2  1  0 -4 -2 -3",
    "D": " -2 -2  1  6 -3  0  2 -1 -1 -3 -4 -1 -3 -3 -1  0 -1 -4 -3 -3",
    "C": "  0 -3 -3 -3  9 -3 -4 -3 -3 -1 -1 -3 -1 -2 -3 -1 -1 -2 -2 -1",
    "Q": " -1  1  0  0 -3  5  2 -2  0 -3 -2  1  0 -3 -1  0 -1 -2 -1 -2",
    "E": " -1  0  0  2 -4  2  5 -2  0 -3 -3  1 -2 -3 -1  0 -1 -3 -2 -2",
    "G": "  0 -2  0 -1 -3 -2 -2  6 -2 -4 -4 -2 -3 -3 -2  0 -2 -2 -3 -3",
    "H": " -2  0  1 -1 -3  0  0 -2  8 -3 -3 -1 -2 -1 -2 -1 -2 -2  2 -3",
    "I": " -1 -3 -3 -3 -1 -3 -3 -4 -3  4  2 -3  1  0 -3 -2 -1 -3 -1  3",
    "L": " -1 -2 -3 -4 -1 -2 -3 -4 -3  2  4 -2  2  0 -3 -2 -1 -2 -1  1",
    "K": " -1  2  0 -1 -3  1  1 -2 -1 -3 -2  5 -1 -3 -1  0 -1 -3 -2 -2",
    "M": " -1 -1 -2 -3 -1  0 -2 -3 -2  1  2 -1  5  0 -2 -1 -1 -1 -1  1",
    "F": " -2 -3 -3 -3 -2 -3 -3 -3 -1  0  0 -3  0  6 -4 -2 -2  1  3 -1",
    "P": " -1 -2 -2 -1 -3 -1 -1 -2 -2 -3 -3 -1 -2 -4  7 -1 -1 -4 -3 -2",
    "S": "  1 -1  1  0 -1  0  0  0 -1 -2 -2  0 -1 -2 -1  4  1 -3 -2 -2",
    "T": "  0 -1  0 -1 -1 -1 -1 -2 -2 -1 -1 -1 -1 -2 -1  1  5 -2 -2  0",
    "W": " -3 -3 -4 -4 -2 -2 -3 -2 -2 -3 -2 -3 -1  1 -4 -3 -2 11  2 -3",
    "Y": " -2 -2 -2 -3 -2 -1 -2 -3  2 -1 -1 -2 -1  3 -3 -2 -2  2  7 -1",
    "V": "  0 -3 -3 -3 -1 -2 -2 -3 -3  3  1 -2  1 -1 -2 -2  0 -3 -1  4",
}

# BLOSUM62 protein substitution matrix keyed by residue pair
BLOSUM62: Dict[Tuple[str, str], int] = {
    (a, b): int(v)
    for a, row in _BLOSUM62_ROWS.items()
    for b, v in zip(_BLOSUM62_ORDER, row.split())
}


def make_scorer(
    match_score: int = 10,
    mismatch_score: int = -100,
    equals: Callable[[Any, Any], bool] = operator.eq,
) -> Scorer:
    """
    Build an equality-based scorer.

    Parameters:
    -----------
    match_score : int
        Returned when ``equals(a, b)`` holds (default 10)
    mismatch_score : int
        Returned otherwise (default -100)
    equals : callable
        Equality predicate (default ``==``)

    Returns:
    --------
    callable
        ``scorer(a, b) -> int``

    Examples:
    ---------
    >>> scorer = make_scorer(2, -1, lambda a, b: a.lower() == b.lower())
    >>> scorer("a", "A")
    2
    """
    def scorer(a, b):
        return match_score if equals(a, b) else mismatch_score

    return scorer


def substitution_scorer(
    matrix: Optional[Dict[Tuple[Any, Any], int]] = None,
    default: int = -4,
    case_sensitive: bool = False,
) -> Scorer:
    """
    Build a scorer that looks pairs up in a substitution table.

    The table is consulted as ``(a, b)`` then ``(b, a)``, so a triangular
    table is enough. Pairs found in neither order score ``default``.
    Residues are upper-cased before lookup unless ``case_sensitive``.
    """
    table = BLOSUM62 if matrix is None else matrix

    def scorer(a, b):
        if not case_sensitive:
            a = a.upper() if isinstance(a, str) else a
            b = b.upper() if isinstance(b, str) else b
        score = table.get((a, b))
        if score is None:
            score = table.get((b, a), default)
        return score

    return scorer


def score_alignment(
    alignment: Sequence[Tuple[Any, Any]],
    scorer: Optional[Scorer] = None,
    gap_open_penalty: int = -5,
    gap_extend_penalty: int = -1,
) -> int:
    """
    Score an alignment without touching a dynamic-programming matrix.

    Aligned pairs score ``scorer(a, b)``. A gap run that starts the
    alignment lies on the matrix border and costs
    ``open + extend * length``; every later run costs
    ``open + extend * (length - 1)``.

    Parameters:
    -----------
    alignment : sequence of (a, b)
        Pairs in forward order, ``None`` marking a gap
    scorer : callable, optional
        Element scorer (default ``make_scorer()``)
    gap_open_penalty : int
        Cost of the first gap of a run (default -5)
    gap_extend_penalty : int
        Cost of every further gap of a run (default -1)

    Returns:
    --------
    int
        Total alignment score
    """
    if scorer is None:
        scorer = make_scorer()

    total = 0
    previous = None
    for position, (a, b) in enumerate(alignment):
        if a is None and b is None:
            raise ValueError(f"Pair {position} has a gap on both sides")

        if a is not None and b is not None:
            kind = "pair"
            total += scorer(a, b)
        else:
            kind = "up" if b is None else "left"
            if kind == previous:
                total += gap_extend_penalty
            elif position == 0:
                total += gap_open_penalty + gap_extend_penalty
            else:
                total += gap_open_penalty
        previous = kind

    return total
