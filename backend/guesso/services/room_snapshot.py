"""Room Snapshot: the masked, per-caller view returned by the state query.

Invariants:
    - The ranking mask is the same for every caller (reveal_masking is caller-agnostic)
    - Per-caller data is limited to my_guess, available_actions and, for the host,
      the verification code
    - The guess list and correct answer appear only in RESULT_REVEALED
    - Scores and badges appear only in ROUND_SUMMARY
    - Read-only: never writes, never commits

Design Decisions:
    - Every derived view recomputed per request from rows; the version short-circuit in
      the route keeps this off the hot polling path (ADR: no cached projections)
"""

from sqlalchemy.ext.asyncio import AsyncSession

from guesso.core.domain_types import HINT_VISIBLE_STATES, RoomState
from guesso.core.item_resolver import label_map, resolver_for_round
from guesso.core.rank_sequence import hint_rank
from guesso.core.reveal_masking import correct_answer, mask_ranking, revealed_ranks
from guesso.core.score_aggregator import (
    GuessRecord, aggregate_scores, is_correct, understander_badges,
)
from guesso.core.state_machine import CallerContext, legal_actions
from guesso.core.theme_catalog import get_theme
from guesso.models.player import Player
from guesso.models.room import Room
from guesso.models.round import Round
from guesso.services import room_store


def unchanged(room: Room) -> dict:
    return {"changed": False, "version": str(room.version)}


async def build_snapshot(db: AsyncSession, room: Room, player_id: str) -> dict:
    state = room.room_state
    players = await room_store.list_players(db, room.code)
    caller = next((p for p in players if p.id == player_id), None)
    round_ = None
    if room.current_round:
        round_ = await room_store.get_round(db, room.code, room.current_round)
    theme = get_theme(round_.theme_id) if round_ and round_.theme_id else None

    snapshot = {
        "changed": True,
        "version": str(room.version),
        "updated_at": room.updated_at.isoformat(),
        "room": _room_summary(room, caller),
        "players": [_player_view(p) for p in players],
        "theme": theme.to_dict() if theme else None,
        "round": None,
        "labels": {},
        "guess_count": 0,
        "my_guess": None,
        "guesses": None,
        "correct_answer": None,
        "scores": None,
        "round_scores": None,
        "badges": None,
        "available_actions": _available_actions(room, caller),
    }
    if round_ is None:
        return snapshot

    ranking = round_.ranking_json
    snapshot["round"] = _round_view(room, round_)
    if theme is not None:
        resolver = resolver_for_round(
            theme, round_.target_player_ids, {p.id: p.name for p in players},
        )
        snapshot["labels"] = label_map(resolver)

    rank = room.current_guess_rank
    if rank is not None and state in (
        RoomState.GUESSING_OPEN, RoomState.GUESSING_CLOSED, RoomState.RESULT_REVEALED,
    ):
        snapshot["guess_count"] = await room_store.count_guesses(
            db, room.code, room.current_round, rank,
        )
        if caller is not None:
            mine = await room_store.get_guess(
                db, room.code, room.current_round, caller.id, rank,
            )
            snapshot["my_guess"] = mine.guess_top1 if mine else None

    if state == RoomState.RESULT_REVEALED and rank is not None:
        guesses = await room_store.list_guesses(
            db, room.code, round_no=room.current_round, rank=rank,
        )
        snapshot["correct_answer"] = correct_answer(ranking, rank)
        snapshot["guesses"] = [
            {
                "player_id": g.player_id,
                "guess_top1": g.guess_top1,
                "correct": is_correct(_record(g), ranking),
            }
            for g in guesses
        ]

    if state == RoomState.ROUND_SUMMARY:
        snapshot.update(await _summary(db, room, round_, [p.id for p in players]))

    return snapshot


def _room_summary(room: Room, caller: Player | None) -> dict:
    summary = {
        "code": room.code,
        "state": room.state,
        "current_round": room.current_round,
        "host_player_id": room.host_player_id,
        "asker_player_id": room.asker_player_id,
        "current_guess_rank": room.current_guess_rank,
        "gui_mode": room.gui_mode,
        "verification_flag": room.verification_flag,
        "premium_unlocked": room.premium_unlocked,
    }
    # Only the host relays the code to the verification bot
    if caller is not None and caller.is_host:
        summary["verification_code"] = room.verification_code
    return summary


def _player_view(player: Player) -> dict:
    return {
        "id": player.id,
        "name": player.name,
        "is_host": player.is_host,
        "joined_at": player.joined_at.isoformat(),
        "last_seen": player.last_seen.isoformat(),
    }


def _round_view(room: Room, round_: Round) -> dict:
    state = room.room_state
    sequence = round_.rank_sequence or []
    n = round_.item_count
    hint = hint_rank(n, round_.is_person_rank) if round_.ranking_json else None
    revealed = revealed_ranks(n, hint, sequence, state, room.current_guess_rank)
    return {
        "round_no": round_.round_no,
        "theme_id": round_.theme_id,
        "is_person_rank": round_.is_person_rank,
        "asker_player_id": round_.asker_player_id,
        "target_player_ids": round_.target_player_ids,
        "rank_sequence": sequence,
        "item_count": n,
        "hint_rank": hint,
        "middle_revealed_value": (
            round_.middle_revealed_value if state in HINT_VISIBLE_STATES else None
        ),
        "ranking": mask_ranking(round_.ranking_json, revealed),
        "gui_counts": round_.gui_counts if state == RoomState.ROUND_SUMMARY else None,
    }


async def _summary(
    db: AsyncSession, room: Room, round_: Round, player_ids: list[str],
) -> dict:
    rounds = await room_store.list_rounds_upto(db, room.code, room.current_round)
    guesses = await room_store.list_guesses(db, room.code)
    board = aggregate_scores(
        [_record(g) for g in guesses],
        {r.round_no: r.ranking_json for r in rounds},
        room.current_round,
        player_ids,
    )
    badges = understander_badges(board.round_scores, round_.asker_player_id)
    return {
        **board.to_dict(),
        "badges": {
            "best_understanders": badges.best_understanders,
            "worst_understanders": badges.worst_understanders,
            "all_tied": badges.all_tied,
        },
    }


def _available_actions(room: Room, caller: Player | None) -> list[str]:
    if caller is None:
        return []
    context = CallerContext(caller.id, caller.is_host, room.asker_player_id)
    return [a.value for a in legal_actions(room.room_state, context)]


def _record(guess) -> GuessRecord:
    return GuessRecord(guess.player_id, guess.round_no, guess.guess_rank, guess.guess_top1)
