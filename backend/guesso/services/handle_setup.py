"""Round Setup Handlers: start-game, select-theme, select-asker, back-to-theme.

Invariants:
    - Role and state were already checked by ActionDispatch
    - select-theme upserts the Round row for current_round in one statement
    - back-to-theme never increments current_round
"""

import logging

from guesso.core.domain_types import RoomState
from guesso.core.enforce_payloads import check_theme_selectable, require
from guesso.core.rank_sequence import compute_sequence
from guesso.core.theme_catalog import get_theme
from guesso.services import room_store
from guesso.services.action_context import ActionContext
from guesso.services.room_store import TransitionOutcome

logger = logging.getLogger(__name__)


class SetupHandlers:

    async def start_game(self, ctx: ActionContext) -> TransitionOutcome:
        return TransitionOutcome(
            target=RoomState.SELECT_THEME, patch={"current_round": 1},
        )

    async def select_theme(self, ctx: ActionContext) -> TransitionOutcome:
        body = ctx.request
        if err := require(body.theme_id, "theme_id"):
            ctx.reject(err)
        theme = get_theme(body.theme_id)
        entitled = ctx.room.premium_unlocked or ctx.premium_debug
        if err := check_theme_selectable(theme, ctx.room.verification_flag, entitled):
            ctx.reject(err)

        await room_store.upsert_round(
            ctx.db, ctx.room.code, ctx.room.current_round,
            theme_id=theme.id,
            is_person_rank=theme.is_person_rank,
            asker_player_id=None,
            target_player_ids=None,
            ranking_json=None,
            middle_revealed_value=None,
            gui_counts=None,
            # Person-rank sequences depend on the target count, known only after select-targets
            rank_sequence=(
                None if theme.is_person_rank else compute_sequence(len(theme.items), False)
            ),
        )
        return TransitionOutcome(target=RoomState.SELECT_ASKER)

    async def select_asker(self, ctx: ActionContext) -> TransitionOutcome:
        body = ctx.request
        if err := require(body.asker_player_id, "asker_player_id"):
            ctx.reject(err)
        if body.asker_player_id not in await ctx.member_ids():
            ctx.reject({
                "error_code": "VALIDATION_ERROR",
                "message": "The chosen asker is not a player in this room.",
            })

        round_ = await ctx.current_round()
        round_.asker_player_id = body.asker_player_id
        target = (
            RoomState.SELECT_TARGETS if round_.is_person_rank
            else RoomState.ASKER_RANKING
        )
        return TransitionOutcome(
            target=target,
            patch={
                "asker_player_id": body.asker_player_id,
                "gui_mode": body.gui_mode,
            },
        )

    async def back_to_theme(self, ctx: ActionContext) -> TransitionOutcome:
        round_ = await room_store.get_round(ctx.db, ctx.room.code, ctx.room.current_round)
        if round_ is not None:
            round_.asker_player_id = None
            round_.ranking_json = None
            round_.middle_revealed_value = None
            round_.is_person_rank = False
            round_.target_player_ids = None
            round_.rank_sequence = None
            round_.gui_counts = None
        logger.info(
            "Round reset to theme selection",
            extra={"room_code": ctx.room.code, "round_no": ctx.room.current_round},
        )
        return TransitionOutcome(
            target=RoomState.SELECT_THEME,
            patch={"asker_player_id": None, "current_guess_rank": None},
        )
