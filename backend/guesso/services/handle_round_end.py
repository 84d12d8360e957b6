"""Round End Handlers: show-summary, next-round, kick-player.

Invariants:
    - show-summary only from the final rank of the sequence
    - gui_counts computed once, at show-summary, and only when gui_mode is on
    - kick-player removes the player and their guesses; the room keeps its state
"""

import logging

from guesso.core.domain_types import RoomState
from guesso.core.enforce_payloads import require
from guesso.core.errors import ResourceNotFoundError
from guesso.core.rank_sequence import is_final_rank
from guesso.core.score_aggregator import GuessRecord, compute_gui_counts
from guesso.services import room_store
from guesso.services.action_context import ActionContext
from guesso.services.room_store import TransitionOutcome

logger = logging.getLogger(__name__)


class RoundEndHandlers:

    async def show_summary(self, ctx: ActionContext) -> TransitionOutcome:
        round_ = await ctx.current_round()
        sequence = round_.rank_sequence or []
        if not is_final_rank(sequence, ctx.room.current_guess_rank):
            ctx.reject({
                "error_code": "INVALID_STATE",
                "message": "Reveal every rank before showing the summary.",
            })

        if ctx.room.gui_mode:
            guesses = await room_store.list_guesses(
                ctx.db, ctx.room.code, round_no=round_.round_no,
            )
            round_.gui_counts = compute_gui_counts(
                sequence,
                round_.ranking_json or [],
                [
                    GuessRecord(g.player_id, g.round_no, g.guess_rank, g.guess_top1)
                    for g in guesses
                ],
                round_.asker_player_id,
            )
        return TransitionOutcome(
            target=RoomState.ROUND_SUMMARY,
            guard={"current_guess_rank": ctx.room.current_guess_rank},
        )

    async def next_round(self, ctx: ActionContext) -> TransitionOutcome:
        return TransitionOutcome(
            target=RoomState.SELECT_THEME,
            patch={
                "current_round": ctx.room.current_round + 1,
                "asker_player_id": None,
                "current_guess_rank": None,
                "gui_mode": False,
            },
        )

    async def kick_player(self, ctx: ActionContext) -> TransitionOutcome:
        target_id = ctx.request.kick_player_id
        if err := require(target_id, "kick_player_id"):
            ctx.reject(err)
        if target_id == ctx.caller.id:
            ctx.reject({
                "error_code": "VALIDATION_ERROR",
                "message": "You cannot kick yourself.",
            })
        if await room_store.get_member(ctx.db, ctx.room.code, target_id) is None:
            raise ResourceNotFoundError("Player", target_id, ctx.error_context)

        await room_store.delete_player(ctx.db, ctx.room.code, target_id)
        logger.info(
            "Player kicked",
            extra={"room_code": ctx.room.code, "player_id": target_id},
        )
        return TransitionOutcome(conditional=False)
