"""Score aggregation, understander badges and drinking-mode penalties."""

from guesso.core.score_aggregator import (
    GuessRecord, aggregate_scores, compute_gui_counts, understander_badges,
)

R1 = ["a", "b", "c", "d", "e", "f", "g"]
R2 = ["g", "f", "e", "d", "c", "b", "a"]


def _g(player, round_no, rank, top1):
    return GuessRecord(player, round_no, rank, top1)


def test_totals_span_rounds_and_round_scores_only_current():
    guesses = [
        _g("p1", 1, 1, "a"), _g("p1", 1, 2, "x"),
        _g("p1", 2, 1, "g"), _g("p2", 2, 1, "a"),
        _g("p2", 2, 2, "f"), _g("p2", 1, 3, "c"),
    ]
    board = aggregate_scores(guesses, {1: R1, 2: R2}, 2, ["p1", "p2", "p3"])
    assert board.totals == {"p1": 2, "p2": 2, "p3": 0}
    assert board.round_scores == {"p1": 1, "p2": 1, "p3": 0}


def test_future_rounds_and_unranked_rounds_ignored():
    guesses = [_g("p1", 2, 1, "g"), _g("p1", 3, 1, "a")]
    board = aggregate_scores(guesses, {1: R1, 2: None}, 2, ["p1"])
    assert board.totals == {"p1": 0}


def test_to_dict_shape():
    board = aggregate_scores([_g("p1", 1, 1, "a")], {1: R1}, 1, ["p1"])
    assert board.to_dict() == {
        "scores": [{"player_id": "p1", "total": 1}],
        "round_scores": [{"player_id": "p1", "correct": 1}],
    }


def test_badges_exclude_asker():
    badges = understander_badges({"asker": 9, "p1": 3, "p2": 1, "p3": 3}, "asker")
    assert set(badges.best_understanders) == {"p1", "p3"}
    assert badges.worst_understanders == ["p2"]
    assert badges.all_tied is False


def test_all_tied_suppresses_badges():
    badges = understander_badges({"asker": 0, "p1": 2, "p2": 2}, "asker")
    assert badges.all_tied is True
    assert badges.best_understanders == []
    assert badges.worst_understanders == []


def test_single_guesser_is_best_and_nobody_worst():
    badges = understander_badges({"asker": 0, "p1": 0}, "asker")
    assert badges.all_tied is False
    assert badges.best_understanders == ["p1"]
    assert badges.worst_understanders == []


def test_gui_counts():
    guesses = [
        _g("p1", 1, 1, "a"), _g("p2", 1, 1, "a"),   # everyone right -> asker
        _g("p1", 1, 2, "b"), _g("p2", 1, 2, "x"),   # p2 wrong
        _g("p1", 1, 3, "x"), _g("p2", 1, 3, "x"),   # both wrong
    ]
    counts = compute_gui_counts([1, 2, 3, 5, 6], R1, guesses, "asker")
    assert counts == {"asker": 1, "p2": 2, "p1": 1}
