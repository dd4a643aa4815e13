"""Pytest configuration and shared fixtures for TieAlign tests."""

import random

import pytest

from TieAlign.seq_alignment import NeedlemanWunschAligner


@pytest.fixture
def reference_pair():
    """Sequences whose single optimal alignment is known.

    Returns the two input lists and the expected alignment.
    """
    first = ["A", "B", "C", "D", "E", "F", "G"]
    second = ["B", "C", "D", "X", "G", "H"]
    expected = [
        ("A", None),
        ("B", "B"),
        ("C", "C"),
        ("D", "D"),
        ("E", None),
        ("F", None),
        (None, "X"),
        ("G", "G"),
        (None, "H"),
    ]
    return first, second, expected


@pytest.fixture
def aligner():
    return NeedlemanWunschAligner()


@pytest.fixture
def random_pairs():
    """Seeded short sequence pairs over a small alphabet (ties are common)."""
    rng = random.Random(7)
    pairs = []
    for _ in range(40):
        first = [rng.choice("ACG") for _ in range(rng.randint(0, 7))]
        second = [rng.choice("ACG") for _ in range(rng.randint(0, 7))]
        pairs.append((first, second))
    return pairs
