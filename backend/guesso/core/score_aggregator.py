"""Score Aggregator: cumulative and per-round scores derived from the guess history.

Invariants:
    - PURE: takes plain records, returns plain records
    - A guess scores a point iff guess_top1 == ranking[guess_rank - 1] of its own round
    - Only rounds <= current_round with a ranking contribute
    - The auto-revealed bottom rank is never scored (no Guess row exists for it)
    - Every roster player appears in the board, with 0 if they never scored
    - Badges exclude the asker; "all tied" (top == bottom with > 1 non-asker) suppresses both

Design Decisions:
    - Recomputed on demand from the full ledger instead of stored running totals:
      resubmitted guesses and kicked players never leave stale counters behind
    - Tie rule kept literally as the game shipped it: a single non-asker is
      "best" and nobody is "worst"
"""

from collections import Counter
from dataclasses import dataclass, field


@dataclass(frozen=True)
class GuessRecord:
    player_id: str
    round_no: int
    guess_rank: int
    guess_top1: str


@dataclass
class ScoreBoard:
    totals: dict[str, int] = field(default_factory=dict)
    round_scores: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "scores": [
                {"player_id": pid, "total": total}
                for pid, total in self.totals.items()
            ],
            "round_scores": [
                {"player_id": pid, "correct": correct}
                for pid, correct in self.round_scores.items()
            ],
        }


@dataclass(frozen=True)
class Badges:
    best_understanders: list[str]
    worst_understanders: list[str]
    all_tied: bool


def is_correct(guess: GuessRecord, ranking: list[str] | None) -> bool:
    if not ranking or not 1 <= guess.guess_rank <= len(ranking):
        return False
    return ranking[guess.guess_rank - 1] == guess.guess_top1


def aggregate_scores(
    guesses: list[GuessRecord],
    rankings: dict[int, list[str] | None],
    current_round: int,
    player_ids: list[str],
) -> ScoreBoard:
    """Total score across rounds <= current_round and the score within current_round."""
    totals = {pid: 0 for pid in player_ids}
    round_scores = {pid: 0 for pid in player_ids}

    for guess in guesses:
        if guess.round_no > current_round:
            continue
        if not is_correct(guess, rankings.get(guess.round_no)):
            continue
        totals[guess.player_id] = totals.get(guess.player_id, 0) + 1
        if guess.round_no == current_round:
            round_scores[guess.player_id] = round_scores.get(guess.player_id, 0) + 1

    return ScoreBoard(totals=totals, round_scores=round_scores)


def understander_badges(
    round_scores: dict[str, int], asker_id: str | None,
) -> Badges:
    """Best/worst understander of the asker for this round."""
    ranked = sorted(
        ((pid, score) for pid, score in round_scores.items() if pid != asker_id),
        key=lambda entry: entry[1],
        reverse=True,
    )
    top = ranked[0][1] if ranked else 0
    bottom = ranked[-1][1] if ranked else 0
    all_tied = top == bottom and len(ranked) > 1
    if all_tied:
        return Badges([], [], True)

    best = [pid for pid, score in ranked if score == top]
    worst = [pid for pid, score in ranked if score == bottom and score != top]
    return Badges(best, worst, False)


def compute_gui_counts(
    sequence: list[int],
    ranking: list[str],
    round_guesses: list[GuessRecord],
    asker_id: str | None,
) -> dict[str, int]:
    """Penalty counts for drinking mode.

    Per guessed rank: everyone right -> the asker takes one; otherwise each
    wrong guesser takes one. A rank nobody guessed awards nothing.
    """
    counts: Counter[str] = Counter()
    for rank in sequence:
        answer = ranking[rank - 1] if 1 <= rank <= len(ranking) else None
        for_rank = [g for g in round_guesses if g.guess_rank == rank]
        wrong = [g for g in for_rank if g.guess_top1 != answer]
        if for_rank and not wrong and asker_id:
            counts[asker_id] += 1
        else:
            for g in wrong:
                counts[g.player_id] += 1
    return dict(counts)
