"""Room Store: every read and write the dispatcher and snapshot builder need.

Invariants:
    - commit_transition() is the only writer of rooms.state / current_round / cursor
    - Every room write bumps version and updated_at in the same statement
    - A transition's UPDATE is conditional on the state and round it was validated
      against; zero affected rows raises ConcurrencyError
    - Guess writes are atomic upserts keyed by (room, round, player, rank)
    - Round writes from select-theme are atomic upserts keyed by (room, round_no)

Design Decisions:
    - Conditional UPDATE over ORM version_id_col: guess submissions bump the version
      too, and they must never make a host transition fail (ADR: guesses commute)
    - Dialect-native INSERT ... ON CONFLICT for guesses: no read-then-write window
      between two submissions from the same player, or two select-theme clicks
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from guesso.core.domain_types import RoomState
from guesso.core.errors import (
    ConcurrencyError, DatabaseError, ErrorContext, ResourceNotFoundError,
)
from guesso.models.guess import Guess
from guesso.models.player import Player
from guesso.models.room import Room
from guesso.models.round import Round

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


@dataclass
class TransitionOutcome:
    """What a handler wants written to the room row.

    target=None keeps the current state. guard adds equality predicates to the
    conditional UPDATE. conditional=False skips the state/round predicate entirely
    (roster changes that are legal in any state).
    """
    target: RoomState | None = None
    patch: dict[str, Any] = field(default_factory=dict)
    guard: dict[str, Any] = field(default_factory=dict)
    conditional: bool = True


# ─── Reads ──────────────────────────────────────────────────────

async def get_room(db: AsyncSession, code: str) -> Room | None:
    result = await db.execute(select(Room).where(Room.code == code))
    return result.scalar_one_or_none()


async def get_room_or_404(db: AsyncSession, code: str) -> Room:
    room = await get_room(db, code)
    if room is None:
        raise ResourceNotFoundError("Room", code, ErrorContext(room_code=code))
    return room


async def get_room_for_update(db: AsyncSession, code: str) -> Room:
    """Room row locked until the transaction ends. 404 if missing.

    SQLite ignores FOR UPDATE; callers re-check their invariant after writing.
    """
    result = await db.execute(
        select(Room).where(Room.code == code).with_for_update(),
    )
    room = result.scalar_one_or_none()
    if room is None:
        raise ResourceNotFoundError("Room", code, ErrorContext(room_code=code))
    return room


async def get_member(db: AsyncSession, code: str, player_id: str) -> Player | None:
    result = await db.execute(
        select(Player).where(Player.id == player_id, Player.room_code == code),
    )
    return result.scalar_one_or_none()


async def list_players(db: AsyncSession, code: str) -> list[Player]:
    result = await db.execute(
        select(Player)
        .where(Player.room_code == code)
        .order_by(Player.joined_at, Player.id),
    )
    return list(result.scalars().all())


async def count_players(db: AsyncSession, code: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(Player).where(Player.room_code == code),
    )
    return result.scalar_one()


async def get_round(db: AsyncSession, code: str, round_no: int) -> Round | None:
    result = await db.execute(
        select(Round).where(Round.room_code == code, Round.round_no == round_no),
    )
    return result.scalar_one_or_none()


async def list_rounds_upto(db: AsyncSession, code: str, round_no: int) -> list[Round]:
    result = await db.execute(
        select(Round)
        .where(Round.room_code == code, Round.round_no <= round_no)
        .order_by(Round.round_no),
    )
    return list(result.scalars().all())


async def list_guesses(
    db: AsyncSession, code: str,
    round_no: int | None = None, rank: int | None = None,
) -> list[Guess]:
    """Guesses in a room, optionally narrowed to one round and one rank."""
    query = select(Guess).where(Guess.room_code == code)
    if round_no is not None:
        query = query.where(Guess.round_no == round_no)
    if rank is not None:
        query = query.where(Guess.guess_rank == rank)
    result = await db.execute(query.order_by(Guess.submitted_at, Guess.id))
    return list(result.scalars().all())


async def count_guesses(db: AsyncSession, code: str, round_no: int, rank: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(Guess).where(
            Guess.room_code == code,
            Guess.round_no == round_no,
            Guess.guess_rank == rank,
        ),
    )
    return result.scalar_one()


async def get_guess(
    db: AsyncSession, code: str, round_no: int, player_id: str, rank: int,
) -> Guess | None:
    result = await db.execute(
        select(Guess).where(
            Guess.room_code == code,
            Guess.round_no == round_no,
            Guess.player_id == player_id,
            Guess.guess_rank == rank,
        ),
    )
    return result.scalar_one_or_none()


# ─── Writes ─────────────────────────────────────────────────────

async def upsert_guess(
    db: AsyncSession, code: str, round_no: int, player_id: str,
    rank: int, guess_top1: str,
) -> None:
    """Insert or overwrite the guess for (room, round, player, rank). Last write wins."""
    insert = _upsert_insert(db)
    now = datetime.now(timezone.utc)
    stmt = insert(Guess).values(
        room_code=code, round_no=round_no, player_id=player_id,
        guess_rank=rank, guess_top1=guess_top1, submitted_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["room_code", "round_no", "player_id", "guess_rank"],
        set_={"guess_top1": guess_top1, "submitted_at": now},
    )
    await db.execute(stmt)


async def upsert_round(
    db: AsyncSession, code: str, round_no: int, **values: Any,
) -> None:
    """Create the Round for (room, round_no) or overwrite the given columns on it.

    Two concurrent select-theme requests both land here; the loser's write is
    undone when its conditional room UPDATE finds the state already moved on.
    """
    insert = _upsert_insert(db)
    stmt = insert(Round).values(room_code=code, round_no=round_no, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["room_code", "round_no"],
        set_={column: stmt.excluded[column] for column in values},
    )
    await db.execute(stmt)


async def delete_player(db: AsyncSession, code: str, player_id: str) -> None:
    """Remove a player and their guess history from the room."""
    await db.execute(
        delete(Guess).where(Guess.room_code == code, Guess.player_id == player_id),
    )
    await db.execute(
        delete(Player).where(Player.room_code == code, Player.id == player_id),
    )


async def commit_transition(
    db: AsyncSession, room: Room, outcome: TransitionOutcome,
) -> None:
    """Apply the outcome to the room row with a conditional UPDATE (not committed).

    The WHERE clause pins the state and round the dispatcher validated against, so
    if another request moved the room in between, nothing is written.
    """
    values: dict[str, Any] = dict(outcome.patch)
    if outcome.target is not None:
        values["state"] = outcome.target.value
    values["version"] = Room.version + 1
    values["updated_at"] = datetime.now(timezone.utc)

    stmt = update(Room).where(Room.code == room.code)
    if outcome.conditional:
        stmt = stmt.where(
            Room.state == room.state,
            Room.current_round == room.current_round,
        )
    for column, expected in outcome.guard.items():
        stmt = stmt.where(getattr(Room, column) == expected)

    result = await db.execute(
        stmt.values(**values).execution_options(synchronize_session=False),
    )
    if result.rowcount != 1:
        logger.warning(
            "Conditional room update lost a race",
            extra={"room_code": room.code, "state": room.state},
        )
        raise ConcurrencyError(
            "The room changed while your request was processed. Refresh and try again.",
            ErrorContext(room_code=room.code, round_no=room.current_round),
        )


async def bump_version(db: AsyncSession, code: str, **values: Any) -> bool:
    """Unconditional room write (joins, webhooks). False when the room is gone."""
    result = await db.execute(
        update(Room)
        .where(Room.code == code)
        .values(
            version=Room.version + 1,
            updated_at=datetime.now(timezone.utc),
            **values,
        )
        .execution_options(synchronize_session=False),
    )
    return result.rowcount == 1


def _upsert_insert(db: AsyncSession):
    insert = _UPSERT_INSERTS.get(db.bind.dialect.name)
    if insert is None:
        raise DatabaseError(
            f"upsert unsupported on {db.bind.dialect.name}", "upsert",
        )
    return insert


async def touch_last_seen(db: AsyncSession, code: str, player_id: str) -> None:
    await db.execute(
        update(Player)
        .where(Player.id == player_id, Player.room_code == code)
        .values(last_seen=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False),
    )
