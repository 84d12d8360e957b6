"""Action Context: everything a handler needs for one dispatched action.

Invariants:
    - Built once per request by ActionDispatch after role/state checks passed
    - room reflects the row as read for this request; handlers never write it
      directly (they return a TransitionOutcome)
    - reject() raises the typed error for a failed pure check, never returns

Design Decisions:
    - Lazy round lookup cached on the context: most actions need it, a few do not
"""

from dataclasses import dataclass, field
from typing import NoReturn

from sqlalchemy.ext.asyncio import AsyncSession

from guesso.core.domain_types import ActionKind
from guesso.core.errors import ErrorContext, InvalidStateError, from_check
from guesso.core.item_resolver import ItemResolver, resolver_for_round
from guesso.core.theme_catalog import get_theme
from guesso.models.player import Player
from guesso.models.room import Room
from guesso.models.round import Round
from guesso.schemas.action import ActionRequest
from guesso.services import room_store


@dataclass
class ActionContext:
    db: AsyncSession
    room: Room
    caller: Player
    action: ActionKind
    request: ActionRequest
    premium_debug: bool = False
    _round: Round | None = field(default=None, repr=False)

    @property
    def error_context(self) -> ErrorContext:
        return ErrorContext(
            room_code=self.room.code,
            player_id=self.caller.id,
            action=self.action.value,
            round_no=self.room.current_round,
        )

    def reject(self, check: dict) -> NoReturn:
        raise from_check(check, self.error_context)

    async def current_round(self) -> Round:
        """Round row for room.current_round; INVALID_STATE if the theme was never chosen."""
        if self._round is None:
            self._round = await room_store.get_round(
                self.db, self.room.code, self.room.current_round,
            )
        if self._round is None:
            raise InvalidStateError(
                "No theme has been selected for this round.", self.error_context,
            )
        return self._round

    async def member_ids(self) -> set[str]:
        players = await room_store.list_players(self.db, self.room.code)
        return {p.id for p in players}

    async def resolver(self) -> ItemResolver:
        round_ = await self.current_round()
        theme = get_theme(round_.theme_id or "")
        if theme is None:
            raise InvalidStateError(
                "This round's theme no longer exists.", self.error_context,
            )
        players = await room_store.list_players(self.db, self.room.code)
        return resolver_for_round(
            theme, round_.target_player_ids, {p.id: p.name for p in players},
        )
