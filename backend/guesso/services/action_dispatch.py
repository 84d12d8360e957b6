"""Action Dispatch: explicit routing from action name to handler, plus the transition commit.

Invariants:
    - Every action->handler mapping is visible: no getattr magic, no auto-discovery
    - Unknown actions raise ActionValidationError before any DB read
    - Membership, then role, then state are checked before a handler runs
    - A handler may only land in a state TRANSITIONS declares for its action
    - The room row is written once per action, through commit_transition()
    - Any failure rolls back every write the handler made (Round, Guess, Player)

Design Decisions:
    - Explicit dict over getattr: every mapping visible in one place
      (ADR: no convention-over-config)
    - Split handlers by round phase: max ~4 methods per class (ADR: no god objects)
    - Handlers return a TransitionOutcome instead of writing the room themselves, so
      the conditional UPDATE lives in exactly one place
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from guesso.core.domain_types import ActionKind
from guesso.core.errors import (
    ActionValidationError, ErrorContext, GuessoError, RoleViolationError, from_check,
)
from guesso.core.state_machine import CallerContext, check_target, validate_transition
from guesso.schemas.action import ActionRequest
from guesso.services import room_store
from guesso.services.action_context import ActionContext
from guesso.services.handle_guessing import GuessingHandlers
from guesso.services.handle_ranking import RankingHandlers
from guesso.services.handle_round_end import RoundEndHandlers
from guesso.services.handle_setup import SetupHandlers

logger = logging.getLogger(__name__)


class ActionDispatch:
    """Routes action -> handler. Explicit registration, no auto-discovery."""

    def __init__(self, db: AsyncSession, premium_debug: bool = False):
        self._db = db
        self._premium_debug = premium_debug
        setup = SetupHandlers()
        ranking = RankingHandlers()
        guessing = GuessingHandlers()
        round_end = RoundEndHandlers()

        # ADR: every mapping explicit, adding an action requires editing this dict
        self._handlers = {
            # Round setup (4 actions)
            ActionKind.START_GAME: setup.start_game,
            ActionKind.SELECT_THEME: setup.select_theme,
            ActionKind.SELECT_ASKER: setup.select_asker,
            ActionKind.BACK_TO_THEME: setup.back_to_theme,

            # Ranking (3 actions)
            ActionKind.SELECT_TARGETS: ranking.select_targets,
            ActionKind.SUBMIT_RANKING: ranking.submit_ranking,
            ActionKind.OPEN_GUESSING: ranking.open_guessing,

            # Guessing loop (4 actions)
            ActionKind.SUBMIT_GUESS: guessing.submit_guess,
            ActionKind.CLOSE_GUESS: guessing.close_guess,
            ActionKind.REVEAL_RESULT: guessing.reveal_result,
            ActionKind.NEXT_RANK: guessing.next_rank,

            # Round end and roster (3 actions)
            ActionKind.SHOW_SUMMARY: round_end.show_summary,
            ActionKind.NEXT_ROUND: round_end.next_round,
            ActionKind.KICK_PLAYER: round_end.kick_player,
        }

    @property
    def actions(self) -> frozenset[ActionKind]:
        return frozenset(self._handlers)

    async def apply(self, room_code: str, request: ActionRequest) -> dict:
        """Validate and apply one action. Returns {"ok": True} or raises GuessoError."""
        error_ctx = ErrorContext(
            room_code=room_code, player_id=request.player_id, action=request.action,
        )
        try:
            action = ActionKind(request.action)
        except ValueError:
            raise ActionValidationError(
                f"Unknown action: {request.action}", field="action", context=error_ctx,
            ) from None

        try:
            await self._apply(room_code, action, request, error_ctx)
        except GuessoError as e:
            await self._db.rollback()
            logger.warning(
                f"Action rejected: {e.message}",
                extra={
                    "room_code": room_code,
                    "player_id": request.player_id,
                    "action": action.value,
                    "error_code": e.code,
                },
            )
            raise
        return {"ok": True}

    async def _apply(
        self, room_code: str, action: ActionKind,
        request: ActionRequest, error_ctx: ErrorContext,
    ) -> None:
        room = await room_store.get_room_or_404(self._db, room_code)
        error_ctx.round_no = room.current_round
        caller = await room_store.get_member(self._db, room_code, request.player_id)
        if caller is None:
            raise RoleViolationError("You are not a player in this room.", error_ctx)

        source = room.room_state
        check = validate_transition(
            action, source,
            CallerContext(caller.id, caller.is_host, room.asker_player_id),
        )
        if check:
            raise from_check(check, error_ctx)

        ctx = ActionContext(
            db=self._db, room=room, caller=caller, action=action,
            request=request, premium_debug=self._premium_debug,
        )
        outcome = await self._handlers[action](ctx)
        if err := check_target(action, outcome.target):
            raise from_check(err, error_ctx)

        await room_store.commit_transition(self._db, room, outcome)
        await self._db.commit()
        logger.info(
            f"Action applied: {action.value}",
            extra={
                "room_code": room_code,
                "player_id": caller.id,
                "action": action.value,
                "state": (outcome.target or source).value,
                "round_no": room.current_round,
            },
        )
