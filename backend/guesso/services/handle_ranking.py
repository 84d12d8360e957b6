"""Ranking Handlers: select-targets, submit-ranking, open-guessing.

Invariants:
    - ranking_json is written exactly once per round (ASKER_RANKING is left on success)
    - middle_revealed_value always equals ranking_json[hint_rank - 1] when a hint exists
    - A round without a hint skips REVEAL_MIDDLE and opens the first rank directly
"""

import logging

from guesso.core.domain_types import RoomState
from guesso.core.enforce_payloads import check_ranking, check_targets, require
from guesso.core.rank_sequence import compute_sequence, hint_rank
from guesso.services.action_context import ActionContext
from guesso.services.room_store import TransitionOutcome

logger = logging.getLogger(__name__)


class RankingHandlers:

    async def select_targets(self, ctx: ActionContext) -> TransitionOutcome:
        """Person-rank only: the asker picks which players get ranked."""
        body = ctx.request
        if err := require(body.target_player_ids, "target_player_ids"):
            ctx.reject(err)
        if err := check_targets(body.target_player_ids, await ctx.member_ids()):
            ctx.reject(err)

        round_ = await ctx.current_round()
        round_.target_player_ids = list(body.target_player_ids)
        round_.rank_sequence = compute_sequence(len(body.target_player_ids), True)
        return TransitionOutcome(target=RoomState.ASKER_RANKING)

    async def submit_ranking(self, ctx: ActionContext) -> TransitionOutcome:
        body = ctx.request
        if err := require(body.ranking, "ranking"):
            ctx.reject(err)
        round_ = await ctx.current_round()
        if round_.ranking_json is not None:
            ctx.reject({
                "error_code": "INVALID_STATE",
                "message": "The ranking for this round was already submitted.",
            })
        resolver = await ctx.resolver()
        if err := check_ranking(body.ranking, resolver.eligible_ids):
            ctx.reject(err)

        n = len(body.ranking)
        hint = hint_rank(n, round_.is_person_rank)
        round_.ranking_json = list(body.ranking)
        if not round_.rank_sequence:
            round_.rank_sequence = compute_sequence(n, round_.is_person_rank)

        if hint is None:
            round_.middle_revealed_value = None
            logger.info(
                "No hint rank, opening guessing directly",
                extra={"room_code": ctx.room.code, "round_no": round_.round_no},
            )
            return TransitionOutcome(
                target=RoomState.GUESSING_OPEN,
                patch={"current_guess_rank": round_.rank_sequence[0]},
            )

        round_.middle_revealed_value = body.ranking[hint - 1]
        return TransitionOutcome(target=RoomState.REVEAL_MIDDLE)

    async def open_guessing(self, ctx: ActionContext) -> TransitionOutcome:
        round_ = await ctx.current_round()
        if not round_.rank_sequence:
            ctx.reject({
                "error_code": "INVALID_STATE",
                "message": "This round has no ranks to guess.",
            })
        return TransitionOutcome(
            target=RoomState.GUESSING_OPEN,
            patch={"current_guess_rank": round_.rank_sequence[0]},
        )
