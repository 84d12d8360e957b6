"""Room Actions: full-round scenario and per-action rules through the HTTP API.

Tests cover:
    - End-to-end ordinary round: hint, guessing, reveal, auto-revealed bottom rank
    - Transition legality: illegal (action, state) pairs leave the room untouched
    - Role checked before state, membership before both
    - Ranking immutability and guess idempotence
    - Final-rank rules for next-rank / show-summary
    - back-to-theme, next-round, kick-player
"""

import pytest
from sqlalchemy import select

from guesso.core.domain_types import ActionKind
from guesso.models.guess import Guess
from guesso.models.player import Player
from guesso.models.round import Round
from tests.services.game_helpers import (
    ORDINARY_RANKING, act, ok, seat, state, to_guessing, to_ranking,
)


async def _reveal(client, table):
    await ok(client, table.code, table.host, "close-guess")
    await ok(client, table.code, table.host, "reveal-result")


# ─── End-to-end ──────────────────────────────────────────────────

async def test_full_ordinary_round(client):
    table = await seat(client, guests=3)
    asker = await to_ranking(client, table)
    g1, g2 = table.guests[1], table.guests[2]

    await ok(client, table.code, asker, "submit-ranking", ranking=ORDINARY_RANKING)
    snap = await state(client, table.code, table.host)
    assert snap["room"]["state"] == "REVEAL_MIDDLE"
    assert snap["round"]["middle_revealed_value"] == "income"
    assert snap["round"]["ranking"] == [None, None, None, "income", None, None, None]

    await ok(client, table.code, table.host, "open-guessing")
    snap = await state(client, table.code, table.host)
    assert snap["room"]["current_guess_rank"] == 1

    await ok(client, table.code, table.host, "submit-guess", guess_top1="face")
    await ok(client, table.code, g1, "submit-guess", guess_top1="face")
    await ok(client, table.code, g2, "submit-guess", guess_top1="height")
    snap = await state(client, table.code, g2)
    assert snap["guess_count"] == 3
    assert snap["my_guess"] == "height"
    assert snap["guesses"] is None

    await _reveal(client, table)
    snap = await state(client, table.code, table.host)
    assert snap["correct_answer"] == "face"
    flags = {g["player_id"]: g["correct"] for g in snap["guesses"]}
    assert flags == {table.host: True, g1: True, g2: False}

    for expected_rank in (2, 3, 5, 6):
        await ok(client, table.code, table.host, "next-rank")
        snap = await state(client, table.code, table.host)
        assert snap["room"]["current_guess_rank"] == expected_rank
        await _reveal(client, table)

    snap = await state(client, table.code, table.host)
    assert snap["round"]["ranking"] == ORDINARY_RANKING

    await ok(client, table.code, table.host, "show-summary")
    snap = await state(client, table.code, table.host)
    assert snap["room"]["state"] == "ROUND_SUMMARY"
    assert snap["round"]["ranking"][6] == "frequency"
    totals = {s["player_id"]: s["total"] for s in snap["scores"]}
    assert totals == {table.host: 1, asker: 0, g1: 1, g2: 0}
    assert set(snap["badges"]["best_understanders"]) == {table.host, g1}
    assert snap["badges"]["worst_understanders"] == [g2]
    assert snap["badges"]["all_tied"] is False


async def test_gui_mode_counts_penalties_at_summary(client):
    table = await seat(client, guests=2)
    await to_guessing(client, table, gui_mode=True)
    await ok(client, table.code, table.host, "submit-guess", guess_top1="face")
    await ok(client, table.code, table.guests[1], "submit-guess", guess_top1="height")
    await _reveal(client, table)
    for _ in range(4):
        await ok(client, table.code, table.host, "next-rank")
        await _reveal(client, table)
    await ok(client, table.code, table.host, "show-summary")

    snap = await state(client, table.code, table.host)
    assert snap["room"]["gui_mode"] is True
    assert snap["round"]["gui_counts"] == {table.guests[1]: 1}


# ─── Legality ────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "action",
    [a for a in ActionKind if a not in (ActionKind.START_GAME, ActionKind.KICK_PLAYER)],
)
async def test_illegal_actions_in_lobby_leave_room_unchanged(client, action):
    table = await seat(client, guests=2)
    before = await state(client, table.code, table.host)

    res = await act(client, table.code, table.host, action.value)

    assert res.status_code in (400, 403)
    assert isinstance(res.json()["error"], str)
    after = await state(client, table.code, table.host)
    assert after["version"] == before["version"]
    assert after["room"] == before["room"]


async def test_role_is_checked_before_state(client):
    table = await seat(client, guests=1)
    # open-guessing is host-only and illegal in WAITING_PLAYERS; role wins
    res = await act(client, table.code, table.guests[0], "open-guessing")
    assert res.status_code == 403
    assert res.json()["code"] == "ROLE_VIOLATION"


async def test_unknown_action_rejected(client):
    table = await seat(client, guests=1)
    res = await act(client, table.code, table.host, "flip-table")
    assert res.status_code == 400
    assert "Unknown action" in res.json()["error"]


async def test_non_member_rejected(client):
    table = await seat(client, guests=1)
    res = await act(client, table.code, "not-a-player", "start-game")
    assert res.status_code == 403


async def test_unknown_room_returns_404(client):
    res = await act(client, "ZZZZZZ", "anyone", "start-game")
    assert res.status_code == 404
    assert res.json()["code"] == "RESOURCE_NOT_FOUND"


async def test_missing_player_id_is_400(client):
    table = await seat(client, guests=1)
    res = await client.post(
        f"/api/v1/rooms/{table.code}/action", json={"action": "start-game"},
    )
    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION_ERROR"


async def test_room_code_is_case_insensitive(client):
    table = await seat(client, guests=1)
    await ok(client, table.code.lower(), table.host, "start-game")
    snap = await state(client, table.code.lower(), table.host)
    assert snap["room"]["state"] == "SELECT_THEME"


# ─── Setup ───────────────────────────────────────────────────────

async def test_select_theme_rejects_unknown_theme(client):
    table = await seat(client, guests=1)
    await ok(client, table.code, table.host, "start-game")
    res = await act(client, table.code, table.host, "select-theme", theme_id="nope")
    assert res.status_code == 400


async def test_select_asker_must_be_member(client):
    table = await seat(client, guests=1)
    await ok(client, table.code, table.host, "start-game")
    await ok(client, table.code, table.host, "select-theme", theme_id="life")
    res = await act(
        client, table.code, table.host, "select-asker", asker_player_id="stranger",
    )
    assert res.status_code == 400
    snap = await state(client, table.code, table.host)
    assert snap["room"]["state"] == "SELECT_ASKER"


async def test_ordinary_theme_skips_target_selection(client):
    table = await seat(client, guests=2)
    await to_ranking(client, table, theme_id="drinks")
    snap = await state(client, table.code, table.host)
    assert snap["room"]["state"] == "ASKER_RANKING"
    assert snap["round"]["rank_sequence"] == [1, 2, 3, 5, 6]
    assert snap["labels"]["beer"] == "🍺 Beer"


# ─── Ranking ─────────────────────────────────────────────────────

async def test_only_asker_may_submit_ranking(client):
    table = await seat(client, guests=2)
    await to_ranking(client, table)
    res = await act(
        client, table.code, table.guests[1], "submit-ranking", ranking=ORDINARY_RANKING,
    )
    assert res.status_code == 403


@pytest.mark.parametrize("ranking", [
    ORDINARY_RANKING[:6],
    ORDINARY_RANKING[:6] + ["face"],
    ORDINARY_RANKING[:6] + ["money"],
])
async def test_ranking_must_be_a_permutation(client, ranking):
    table = await seat(client, guests=2)
    asker = await to_ranking(client, table)
    res = await act(client, table.code, asker, "submit-ranking", ranking=ranking)
    assert res.status_code == 400
    snap = await state(client, table.code, table.host)
    assert snap["room"]["state"] == "ASKER_RANKING"


async def test_ranking_cannot_be_resubmitted(client):
    table = await seat(client, guests=2)
    asker = await to_ranking(client, table)
    await ok(client, table.code, asker, "submit-ranking", ranking=ORDINARY_RANKING)

    res = await act(
        client, table.code, asker, "submit-ranking",
        ranking=list(reversed(ORDINARY_RANKING)),
    )
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_STATE"


# ─── Guessing ────────────────────────────────────────────────────

async def test_resubmitted_guess_keeps_latest_value(client, test_session_factory):
    table = await seat(client, guests=2)
    await to_guessing(client, table)
    guesser = table.guests[1]

    await ok(client, table.code, guesser, "submit-guess", guess_top1="face")
    await ok(client, table.code, guesser, "submit-guess", guess_top1="income")

    async with test_session_factory() as db:
        rows = (await db.execute(
            select(Guess).where(Guess.player_id == guesser),
        )).scalars().all()
    assert len(rows) == 1
    assert rows[0].guess_top1 == "income"
    assert rows[0].guess_rank == 1


async def test_guess_bumps_version(client):
    table = await seat(client, guests=2)
    await to_guessing(client, table)
    before = await state(client, table.code, table.host)
    await ok(client, table.code, table.guests[1], "submit-guess", guess_top1="face")
    after = await state(client, table.code, table.host, ver=before["version"])
    assert after["changed"] is True


async def test_asker_cannot_guess(client):
    table = await seat(client, guests=2)
    asker = await to_guessing(client, table)
    res = await act(client, table.code, asker, "submit-guess", guess_top1="face")
    assert res.status_code == 403


async def test_guess_must_be_an_eligible_item(client):
    table = await seat(client, guests=2)
    await to_guessing(client, table)
    res = await act(
        client, table.code, table.guests[1], "submit-guess", guess_top1="money",
    )
    assert res.status_code == 400


async def test_guess_rejected_once_closed(client):
    table = await seat(client, guests=2)
    await to_guessing(client, table)
    await ok(client, table.code, table.host, "close-guess")
    res = await act(
        client, table.code, table.guests[1], "submit-guess", guess_top1="face",
    )
    assert res.status_code == 400


async def test_summary_requires_final_rank(client):
    table = await seat(client, guests=2)
    await to_guessing(client, table)
    await _reveal(client, table)
    res = await act(client, table.code, table.host, "show-summary")
    assert res.status_code == 400
    snap = await state(client, table.code, table.host)
    assert snap["room"]["state"] == "RESULT_REVEALED"


async def test_next_rank_rejected_at_final_rank(client):
    table = await seat(client, guests=2)
    await to_guessing(client, table)
    await _reveal(client, table)
    for _ in range(4):
        await ok(client, table.code, table.host, "next-rank")
        await _reveal(client, table)

    res = await act(client, table.code, table.host, "next-rank")
    assert res.status_code == 400
    assert "summary" in res.json()["error"]


# ─── Round transitions ───────────────────────────────────────────

async def test_back_to_theme_resets_round(client, test_session_factory):
    table = await seat(client, guests=2)
    await to_ranking(client, table)

    await ok(client, table.code, table.host, "back-to-theme")

    snap = await state(client, table.code, table.host)
    assert snap["room"]["state"] == "SELECT_THEME"
    assert snap["room"]["current_round"] == 1
    assert snap["room"]["asker_player_id"] is None
    async with test_session_factory() as db:
        round_ = (await db.execute(select(Round))).scalar_one()
    assert round_.asker_player_id is None
    assert round_.rank_sequence is None

    await ok(client, table.code, table.host, "select-theme", theme_id="life")


async def test_back_to_theme_not_allowed_once_guessing(client):
    table = await seat(client, guests=2)
    await to_guessing(client, table)
    res = await act(client, table.code, table.host, "back-to-theme")
    assert res.status_code == 400


async def test_next_round_increments_and_clears(client):
    table = await seat(client, guests=2)
    await to_guessing(client, table, gui_mode=True)
    await _reveal(client, table)
    for _ in range(4):
        await ok(client, table.code, table.host, "next-rank")
        await _reveal(client, table)
    await ok(client, table.code, table.host, "show-summary")

    await ok(client, table.code, table.host, "next-round")

    snap = await state(client, table.code, table.host)
    room = snap["room"]
    assert room["state"] == "SELECT_THEME"
    assert room["current_round"] == 2
    assert room["asker_player_id"] is None
    assert room["current_guess_rank"] is None
    assert room["gui_mode"] is False
    assert snap["round"] is None


# ─── Kick ────────────────────────────────────────────────────────

async def test_kick_removes_player_and_guesses(client, test_session_factory):
    table = await seat(client, guests=2)
    await to_guessing(client, table)
    victim = table.guests[1]
    await ok(client, table.code, victim, "submit-guess", guess_top1="face")
    before = await state(client, table.code, table.host)

    await ok(client, table.code, table.host, "kick-player", kick_player_id=victim)

    after = await state(client, table.code, table.host)
    assert after["version"] != before["version"]
    assert after["room"]["state"] == "GUESSING_OPEN"
    assert victim not in [p["id"] for p in after["players"]]
    async with test_session_factory() as db:
        assert (await db.execute(
            select(Guess).where(Guess.player_id == victim),
        )).first() is None
        assert await db.get(Player, victim) is None


async def test_kick_self_rejected(client):
    table = await seat(client, guests=1)
    res = await act(client, table.code, table.host, "kick-player", kick_player_id=table.host)
    assert res.status_code == 400


async def test_kick_unknown_player_is_404(client):
    table = await seat(client, guests=1)
    res = await act(client, table.code, table.host, "kick-player", kick_player_id="ghost")
    assert res.status_code == 404


async def test_only_host_may_kick(client):
    table = await seat(client, guests=2)
    res = await act(
        client, table.code, table.guests[0], "kick-player",
        kick_player_id=table.guests[1],
    )
    assert res.status_code == 403
