import pytest

from TieAlign.seq_alignment import (
    BLOSUM62,
    align,
    make_scorer,
    score_alignment,
    substitution_scorer,
)


def test_default_scorer():
    scorer = make_scorer()
    assert scorer("A", "A") == 10
    assert scorer("A", "B") == -100


def test_make_scorer_custom_values():
    scorer = make_scorer(3, -2, equals=lambda a, b: abs(a - b) <= 1)
    assert scorer(4, 5) == 3
    assert scorer(4, 7) == -2


def test_blosum62_is_complete_and_symmetric():
    assert len(BLOSUM62) == 400
    assert BLOSUM62[("W", "W")] == 11
    assert BLOSUM62[("A", "R")] == -1
    for (a, b), value in BLOSUM62.items():
        assert BLOSUM62[(b, a)] == value


def test_substitution_scorer_case_and_default():
    scorer = substitution_scorer()
    assert scorer("a", "r") == -1
    assert scorer("C", "C") == 9
    assert scorer("X", "A") == -4

    strict = substitution_scorer(case_sensitive=True, default=-9)
    assert strict("a", "a") == -9


def test_substitution_scorer_triangular_table():
    scorer = substitution_scorer({("A", "B"): 3}, default=0)
    assert scorer("B", "A") == 3
    assert scorer("A", "C") == 0


def test_substitution_scorer_drives_alignment():
    scorer = substitution_scorer()
    result = align("HEAGAWGHEE", "HEAGAWGHEE", scorer, -10, -1)
    assert result == [[(c, c) for c in "HEAGAWGHEE"]]


def test_score_alignment_leading_gap_run():
    alignment = [("A", None), ("B", None), ("C", "C")]
    assert score_alignment(alignment) == -5 - 1 - 1 + 10


def test_score_alignment_interior_gap_run():
    alignment = [("C", "C"), ("A", None), ("B", None)]
    assert score_alignment(alignment) == 10 - 5 - 1


def test_score_alignment_alternating_gaps():
    alignment = [(None, "B"), ("A", None)]
    assert score_alignment(alignment) == -6 - 5


def test_score_alignment_reference(reference_pair):
    _, _, expected = reference_pair
    assert score_alignment(expected) == 18


def test_score_alignment_empty():
    assert score_alignment([]) == 0


def test_score_alignment_rejects_double_gap():
    with pytest.raises(ValueError):
        score_alignment([("A", "A"), (None, None)])
