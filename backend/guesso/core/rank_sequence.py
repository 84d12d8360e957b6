"""Rank Sequence & Hint: which ranks are guessed, which one is given away.

Invariants:
    - Ranks are 1-based; index = rank - 1
    - The bottom rank N is never in the sequence (it is forced once all others are known)
    - The hint rank, when present, is never in the sequence
    - Ordinary themes: N == 7, hint rank 4, sequence [1, 2, 3, 5, 6]
    - Person-rank: N >= 5 -> hint rank 3; N < 5 -> no hint
    - All functions are PURE

Design Decisions:
    - One function pair for both theme shapes: callers never branch on theme type
      to find the hint (ADR: single source of truth for rank arithmetic)
"""

from guesso.core.domain_types import MIN_TARGETS_FOR_HINT, ORDINARY_ITEM_COUNT


def hint_rank(n: int, person_rank: bool) -> int | None:
    """Rank revealed right after the ranking is submitted, or None."""
    if not person_rank:
        return 4
    if n >= MIN_TARGETS_FOR_HINT:
        return 3
    return None


def hint_index(n: int, person_rank: bool) -> int | None:
    rank = hint_rank(n, person_rank)
    return None if rank is None else rank - 1


def compute_sequence(n: int, person_rank: bool) -> list[int]:
    """Ordered ranks opened for guessing one at a time.

    >>> compute_sequence(7, person_rank=False)
    [1, 2, 3, 5, 6]
    >>> compute_sequence(5, person_rank=True)
    [1, 2, 4]
    >>> compute_sequence(3, person_rank=True)
    [1, 2]
    """
    if not person_rank:
        n = ORDINARY_ITEM_COUNT
    skip = hint_rank(n, person_rank)
    return [r for r in range(1, n) if r != skip]


def next_rank(sequence: list[int], current: int | None) -> int | None:
    """Rank after `current` in the sequence; None when current is last or not in it."""
    if current not in sequence:
        return None
    idx = sequence.index(current)
    if idx >= len(sequence) - 1:
        return None
    return sequence[idx + 1]


def is_final_rank(sequence: list[int], current: int | None) -> bool:
    return bool(sequence) and current == sequence[-1]
