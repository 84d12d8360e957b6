"""Reveal/Masking Engine: the externally visible view of a round's secret ranking.

Invariants:
    - PURE: no IO, same inputs give the same mask for every requester
    - Hint rank visible from REVEAL_MIDDLE onwards (when the round has one)
    - ROUND_SUMMARY reveals every rank 1..N
    - RESULT_REVEALED reveals sequence ranks up to and including the current rank,
      plus the bottom rank N once the current rank is the last sequence element
    - GUESSING_OPEN / GUESSING_CLOSED reveal only sequence ranks strictly before the
      current rank; the rank being guessed stays hidden
    - Any earlier state: nothing but the hint
    - Hidden slots are None

Design Decisions:
    - revealed_ranks() separated from mask_ranking(): the rank set is what tests
      assert on, the mask is what clients receive (ADR: testable without fixtures)
"""

from guesso.core.domain_types import HINT_VISIBLE_STATES, RoomState


def revealed_ranks(
    n: int,
    hint: int | None,
    sequence: list[int],
    state: RoomState,
    current_guess_rank: int | None,
) -> set[int]:
    """Set of 1-based ranks visible to every player right now."""
    if state not in HINT_VISIBLE_STATES:
        return set()

    revealed: set[int] = set()
    if hint is not None:
        revealed.add(hint)

    if state == RoomState.ROUND_SUMMARY:
        return set(range(1, n + 1))

    if current_guess_rank is None or current_guess_rank not in sequence:
        return revealed

    idx = sequence.index(current_guess_rank)
    if state == RoomState.RESULT_REVEALED:
        revealed.update(sequence[: idx + 1])
        if idx == len(sequence) - 1:
            revealed.add(n)
    elif state in (RoomState.GUESSING_OPEN, RoomState.GUESSING_CLOSED):
        revealed.update(sequence[:idx])

    return revealed


def mask_ranking(
    ranking: list[str] | None, revealed: set[int],
) -> list[str | None] | None:
    """Replace every non-revealed slot with None. None in, None out."""
    if ranking is None:
        return None
    return [
        item_id if rank in revealed else None
        for rank, item_id in enumerate(ranking, start=1)
    ]


def correct_answer(ranking: list[str] | None, rank: int | None) -> str | None:
    """True id at `rank`, or None when unknowable."""
    if not ranking or rank is None or not 1 <= rank <= len(ranking):
        return None
    return ranking[rank - 1]
