"""Guessing Handlers: submit-guess, close-guess, reveal-result, next-rank.

Invariants:
    - A guess is keyed by (room, round, player, current_guess_rank); resubmission overwrites
    - submit-guess never changes Room.state but still bumps the version
    - next-rank refuses to move past the last sequence element

Design Decisions:
    - submit-guess guards its write on current_guess_rank as well as state/round: a
      guess racing a next-rank must not land on the rank that was just closed
"""

from guesso.core.domain_types import RoomState
from guesso.core.enforce_payloads import check_guess
from guesso.core.rank_sequence import next_rank
from guesso.services import room_store
from guesso.services.action_context import ActionContext
from guesso.services.room_store import TransitionOutcome


class GuessingHandlers:

    async def submit_guess(self, ctx: ActionContext) -> TransitionOutcome:
        rank = ctx.room.current_guess_rank
        if rank is None:
            ctx.reject({
                "error_code": "INVALID_STATE",
                "message": "No rank is open for guessing.",
            })
        resolver = await ctx.resolver()
        if err := check_guess(ctx.request.guess_top1, resolver.eligible_ids):
            ctx.reject(err)

        await room_store.upsert_guess(
            ctx.db, ctx.room.code, ctx.room.current_round,
            ctx.caller.id, rank, ctx.request.guess_top1,
        )
        return TransitionOutcome(guard={"current_guess_rank": rank})

    async def close_guess(self, ctx: ActionContext) -> TransitionOutcome:
        return TransitionOutcome(target=RoomState.GUESSING_CLOSED)

    async def reveal_result(self, ctx: ActionContext) -> TransitionOutcome:
        return TransitionOutcome(target=RoomState.RESULT_REVEALED)

    async def next_rank(self, ctx: ActionContext) -> TransitionOutcome:
        round_ = await ctx.current_round()
        upcoming = next_rank(round_.rank_sequence or [], ctx.room.current_guess_rank)
        if upcoming is None:
            ctx.reject({
                "error_code": "INVALID_STATE",
                "message": "That was the last rank. Show the summary instead.",
            })
        return TransitionOutcome(
            target=RoomState.GUESSING_OPEN,
            patch={"current_guess_rank": upcoming},
            guard={"current_guess_rank": ctx.room.current_guess_rank},
        )
