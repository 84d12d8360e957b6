"""Rank sequence and hint arithmetic.

Tests cover:
    - Ordinary themes always guess [1, 2, 3, 5, 6] with hint 4
    - Person-rank hint only from 5 targets up
    - next_rank / is_final_rank walk the sequence
"""

import pytest

from guesso.core.rank_sequence import (
    compute_sequence, hint_index, hint_rank, is_final_rank, next_rank,
)


@pytest.mark.parametrize("n, person_rank, expected", [
    (7, False, [1, 2, 3, 5, 6]),
    (5, True, [1, 2, 4]),
    (4, True, [1, 2, 3]),
    (3, True, [1, 2]),
    (7, True, [1, 2, 4, 5, 6]),
])
def test_compute_sequence(n, person_rank, expected):
    assert compute_sequence(n, person_rank) == expected


def test_ordinary_sequence_ignores_n():
    assert compute_sequence(3, person_rank=False) == [1, 2, 3, 5, 6]


def test_hint_rank_by_shape():
    assert hint_rank(7, False) == 4
    assert hint_rank(5, True) == 3
    assert hint_rank(4, True) is None
    assert hint_index(7, False) == 3
    assert hint_index(3, True) is None


@pytest.mark.parametrize("n, person_rank", [(7, False), (6, True), (4, True)])
def test_sequence_never_contains_hint_or_bottom(n, person_rank):
    seq = compute_sequence(n, person_rank)
    assert n not in seq
    assert hint_rank(n, person_rank) not in seq


def test_next_rank_walks_sequence():
    seq = [1, 2, 3, 5, 6]
    assert next_rank(seq, 1) == 2
    assert next_rank(seq, 3) == 5
    assert next_rank(seq, 6) is None
    assert next_rank(seq, 4) is None
    assert next_rank(seq, None) is None


def test_is_final_rank():
    assert is_final_rank([1, 2, 4], 4)
    assert not is_final_rank([1, 2, 4], 2)
    assert not is_final_rank([], None)
