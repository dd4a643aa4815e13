"""
Pairwise Global Alignment Module
Needleman-Wunsch with affine gaps, returning every co-optimal alignment
"""

import numbers
import warnings
from dataclasses import dataclass, field
from enum import IntFlag
from itertools import islice
from typing import Any, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .errors import AlignmentLimitWarning, MatrixSizeError, ScoreOverflowError
from .scoring import Scorer, make_scorer


class Direction(IntFlag):
    """Traceback flags; a cell stores the OR of every optimal move"""

    DIAGONAL = 1  # consume one element from each sequence
    UP = 2  # consume from the first sequence, gap in the second
    LEFT = 4  # consume from the second sequence, gap in the first
    DONE = 8  # origin


# Branch order of the traceback walk
_MOVES = (Direction.DIAGONAL, Direction.UP, Direction.LEFT)
_STEP = {
    Direction.DIAGONAL: (1, 1),
    Direction.UP: (1, 0),
    Direction.LEFT: (0, 1),
}
_INT64 = np.iinfo(np.int64)

Pair = Tuple[Optional[Any], Optional[Any]]
Alignment = List[Pair]


def _check_range(value: int, cell: Tuple[int, int]) -> int:
    if not _INT64.min <= value <= _INT64.max:
        raise ScoreOverflowError(value, cell)
    return value


def _check_penalty(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    return int(value)


@dataclass(eq=False)
class AlignmentResult:
    """Co-optimal alignments of two sequences and the tables behind them"""
    alignments: List[Alignment]
    score: int
    n_optimal: int
    truncated: bool
    first: List[Any]
    second: List[Any]
    score_matrix: np.ndarray = field(repr=False)
    traceback: np.ndarray = field(repr=False)

    def __len__(self) -> int:
        return len(self.alignments)

    def __iter__(self) -> Iterator[Alignment]:
        return iter(self.alignments)

    def __str__(self) -> str:
        return (
            f"Alignment Score: {self.score}\n"
            f"Lengths: {len(self.first)} x {len(self.second)}\n"
            f"Optimal alignments: {self.n_optimal}\n"
            f"Returned: {len(self.alignments)}"
            + (" (truncated)" if self.truncated else "")
            + "\n"
        )

    def gaps(self, k: int = 0) -> int:
        """Number of gap positions in alignment ``k``"""
        return sum(1 for a, b in self.alignments[k] if a is None or b is None)

    def nmatch(self, k: int = 0) -> int:
        """Number of identical aligned pairs in alignment ``k``"""
        return sum(1 for a, b in self.alignments[k]
                   if a is not None and b is not None and a == b)


class NeedlemanWunschAligner:
    """Global aligner with affine gaps that keeps every tied traceback move"""

    def __init__(
        self,
        scorer: Optional[Scorer] = None,
        gap_open_penalty: int = -5,
        gap_extend_penalty: int = -1,
        max_alignments: Optional[int] = None,
        max_cells: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize aligner

        Parameters:
        -----------
        scorer : callable, optional
            ``scorer(a, b) -> int`` for aligned elements
            (default ``make_scorer()``: match 10, mismatch -100)
        gap_open_penalty : int
            Charged for the first gap of a run (default -5)
        gap_extend_penalty : int
            Charged for each further gap of a run (default -1)
        max_alignments : int, optional
            Return at most this many alignments (default: all)
        max_cells : int, optional
            Refuse inputs whose matrix has more cells (default: no limit)
        verbose : bool
            Print progress while aligning
        """
        if max_alignments is not None and (
            isinstance(max_alignments, bool)
            or not isinstance(max_alignments, numbers.Integral)
            or max_alignments < 1
        ):
            raise ValueError(f"max_alignments must be a positive integer, got {max_alignments!r}")
        if max_cells is not None and (
            isinstance(max_cells, bool)
            or not isinstance(max_cells, numbers.Integral)
            or max_cells < 1
        ):
            raise ValueError(f"max_cells must be a positive integer, got {max_cells!r}")

        self.scorer = make_scorer() if scorer is None else scorer
        self.gap_open_penalty = _check_penalty("gap_open_penalty", gap_open_penalty)
        self.gap_extend_penalty = _check_penalty("gap_extend_penalty", gap_extend_penalty)
        self.max_alignments = max_alignments
        self.max_cells = max_cells
        self.verbose = verbose

    def _get_score(self, a: Any, b: Any) -> int:
        """Score two aligned elements"""
        value = self.scorer(a, b)
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise TypeError(
                f"scorer must return an integer, got {type(value).__name__} for ({a!r}, {b!r})"
            )
        return int(value)

    def _gap_penalty(self, move: Direction, predecessor: int) -> int:
        if predecessor == move:
            return self.gap_extend_penalty
        return self.gap_open_penalty

    def _initialize_matrix(self, len1: int, len2: int) -> Tuple[np.ndarray, np.ndarray]:
        """Allocate both tables and fill row 0 and column 0"""
        n_cells = (len1 + 1) * (len2 + 1)
        if self.max_cells is not None and n_cells > self.max_cells:
            raise MatrixSizeError(n_cells, self.max_cells)

        score_matrix = np.zeros((len1 + 1, len2 + 1), dtype=np.int64)
        traceback = np.zeros((len1 + 1, len2 + 1), dtype=np.uint8)

        traceback[0, 0] = Direction.DONE
        for i in range(1, len1 + 1):
            score_matrix[i, 0] = _check_range(
                self.gap_open_penalty + self.gap_extend_penalty * i, (i, 0)
            )
            traceback[i, 0] = Direction.UP
        for j in range(1, len2 + 1):
            score_matrix[0, j] = _check_range(
                self.gap_open_penalty + self.gap_extend_penalty * j, (0, j)
            )
            traceback[0, j] = Direction.LEFT

        return score_matrix, traceback

    def _fill_matrix(
        self,
        seq1: Sequence[Any],
        seq2: Sequence[Any],
        score_matrix: np.ndarray,
        traceback: np.ndarray
    ) -> int:
        """Fill the interior row by row; returns the optimal score"""
        len1, len2 = len(seq1), len(seq2)

        if self.verbose and len1 and len2:
            print(f"Filling {len1} x {len2} cells ", end="")

        for i in range(1, len1 + 1):
            a = seq1[i - 1]
            for j in range(1, len2 + 1):
                up_prev = int(traceback[i - 1, j])
                left_prev = int(traceback[i, j - 1])
                candidates = (
                    (Direction.DIAGONAL,
                     int(score_matrix[i - 1, j - 1]) + self._get_score(a, seq2[j - 1])),
                    (Direction.UP,
                     int(score_matrix[i - 1, j]) + self._gap_penalty(Direction.UP, up_prev)),
                    (Direction.LEFT,
                     int(score_matrix[i, j - 1]) + self._gap_penalty(Direction.LEFT, left_prev)),
                )

                best = _check_range(max(score for _, score in candidates), (i, j))
                moves = 0
                for move, score in candidates:
                    if score == best:
                        moves |= move

                score_matrix[i, j] = best
                traceback[i, j] = moves

            if self.verbose and len2 and i % max(1, len1 // 10) == 0:
                print("█", end="", flush=True)

        if self.verbose and len1 and len2:
            print(" done")

        return int(score_matrix[len1, len2])

    def _count_paths(self, traceback: np.ndarray) -> int:
        """Number of optimal alignments, counted without enumerating them"""
        rows, cols = traceback.shape
        counts = np.zeros((rows, cols), dtype=object)

        for i in range(rows):
            for j in range(cols):
                moves = int(traceback[i, j])
                if moves & Direction.DONE:
                    counts[i, j] = 1
                    continue
                total = 0
                for move in _MOVES:
                    if moves & move:
                        di, dj = _STEP[move]
                        total += counts[i - di, j - dj]
                counts[i, j] = total

        return int(counts[rows - 1, cols - 1])

    def _traceback(self, traceback: np.ndarray) -> Iterator[List[Direction]]:
        """
        Walk every optimal route from the bottom-right cell to the origin.

        Uses an explicit stack instead of recursion. Each route is yielded
        in forward order (origin first); branches are explored DIAGONAL,
        UP, LEFT so the output order is reproducible.
        """
        rows, cols = traceback.shape
        stack = [(rows - 1, cols - 1, None)]

        while stack:
            i, j, trail = stack.pop()
            moves_here = int(traceback[i, j])

            if moves_here & Direction.DONE:
                # trail is linked from the move nearest the origin outwards
                moves = []
                while trail is not None:
                    move, trail = trail
                    moves.append(move)
                yield moves
                continue

            for move in reversed(_MOVES):
                if moves_here & move:
                    di, dj = _STEP[move]
                    stack.append((i - di, j - dj, (move, trail)))

    @staticmethod
    def _path_to_alignment(
        moves: Sequence[Direction],
        seq1: Sequence[Any],
        seq2: Sequence[Any]
    ) -> Alignment:
        """Turn a forward move list into element pairs"""
        pairs = []
        i = j = 0
        for move in moves:
            if move is Direction.DIAGONAL:
                pairs.append((seq1[i], seq2[j]))
                i += 1
                j += 1
            elif move is Direction.UP:
                pairs.append((seq1[i], None))
                i += 1
            else:
                pairs.append((None, seq2[j]))
                j += 1
        return pairs

    def _build(self, seq1: Sequence[Any], seq2: Sequence[Any]) -> Tuple[np.ndarray, np.ndarray, int]:
        if self.verbose:
            print("=" * 70)
            print("NEEDLEMAN-WUNSCH GLOBAL ALIGNMENT")
            print("=" * 70)
            print(f"Lengths: {len(seq1)} x {len(seq2)}")
            print(f"Gap opening: {self.gap_open_penalty}, Gap extension: {self.gap_extend_penalty}")

        score_matrix, traceback = self._initialize_matrix(len(seq1), len(seq2))
        if self.verbose:
            print(f"✓ Matrices initialized: {len(seq1) + 1} x {len(seq2) + 1}")

        score = self._fill_matrix(seq1, seq2, score_matrix, traceback)
        if self.verbose:
            print(f"Optimal score: {score}")

        return score_matrix, traceback, score

    def iter_alignments(self, first: Sequence[Any], second: Sequence[Any]) -> Iterator[Alignment]:
        """
        Lazily yield every optimal alignment of ``first`` and ``second``.

        Ignores ``max_alignments``; stop consuming to bound the work.
        """
        seq1, seq2 = list(first), list(second)
        _, traceback, _ = self._build(seq1, seq2)
        for moves in self._traceback(traceback):
            yield self._path_to_alignment(moves, seq1, seq2)

    def align(self, first: Sequence[Any], second: Sequence[Any]) -> AlignmentResult:
        """
        Align two sequences end to end

        Parameters:
        -----------
        first : sequence
            First sequence; its elements fill the left side of each pair
        second : sequence
            Second sequence; its elements fill the right side of each pair

        Returns:
        --------
        AlignmentResult
            All optimal alignments (up to ``max_alignments``), the optimal
            score and the filled tables
        """
        seq1, seq2 = list(first), list(second)
        score_matrix, traceback, score = self._build(seq1, seq2)

        n_optimal = self._count_paths(traceback)
        paths = self._traceback(traceback)
        if self.max_alignments is not None:
            paths = islice(paths, self.max_alignments)
        alignments = [self._path_to_alignment(moves, seq1, seq2) for moves in paths]

        truncated = len(alignments) < n_optimal
        if truncated:
            warnings.warn(
                f"{n_optimal} optimal alignments exist, returning the first {len(alignments)}",
                AlignmentLimitWarning,
                stacklevel=2,
            )

        if self.verbose:
            print(f"✓ Traceback complete! {n_optimal} optimal alignment(s), "
                  f"{len(alignments)} returned")
            print("=" * 70)

        return AlignmentResult(
            alignments=alignments,
            score=score,
            n_optimal=n_optimal,
            truncated=truncated,
            first=seq1,
            second=seq2,
            score_matrix=score_matrix,
            traceback=traceback,
        )


def align(
    first: Sequence[Any],
    second: Sequence[Any],
    scorer: Optional[Scorer] = None,
    gap_open_penalty: int = -5,
    gap_extend_penalty: int = -1,
    max_alignments: Optional[int] = None,
    max_cells: Optional[int] = None
) -> List[Alignment]:
    """
    Every optimal global alignment of two sequences

    Parameters:
    -----------
    first, second : sequence
        Sequences of comparable elements (lists, tuples, strings)
    scorer : callable, optional
        ``scorer(a, b) -> int`` (default ``make_scorer()``)
    gap_open_penalty : int
        Default -5
    gap_extend_penalty : int
        Default -1
    max_alignments : int, optional
        Cap on the number of alignments returned
    max_cells : int, optional
        Refuse inputs whose matrix has more than this many cells

    Returns:
    --------
    list of alignments
        Each alignment is a list of ``(a, b)`` pairs, ``None`` marking a gap

    Examples:
    ---------
    >>> align(["A", "B", "C"], ["B", "C", "D", "E"])
    [[('A', None), ('B', 'B'), ('C', 'C'), (None, 'D'), (None, 'E')]]
    """
    aligner = NeedlemanWunschAligner(
        scorer=scorer,
        gap_open_penalty=gap_open_penalty,
        gap_extend_penalty=gap_extend_penalty,
        max_alignments=max_alignments,
        max_cells=max_cells,
    )
    return aligner.align(first, second).alignments
