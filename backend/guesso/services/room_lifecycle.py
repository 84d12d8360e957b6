"""Room Lifecycle: creating a room with its host and joining guests.

Invariants:
    - A new room starts in WAITING_PLAYERS, round 0, unverified, not premium
    - The creator is the only player with is_host = True
    - Membership never exceeds the configured capacity, even under concurrent joins
    - A join bumps the room version so polling hosts see the newcomer

Design Decisions:
    - Code collisions retried a bounded number of times, then 500: the alphabet gives
      ~10^9 codes, so exhaustion means something else is wrong
    - A code taken between lookup and insert counts as a collision, not an error
    - Joining is allowed in any state: late arrivals sit out until the next round
"""

import logging
import uuid
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from guesso.core.errors import ErrorContext, RoomCodeExhaustedError, RoomFullError
from guesso.core.room_codes import generate_room_code, generate_verification_code
from guesso.models.player import Player
from guesso.models.room import Room
from guesso.services import room_store

logger = logging.getLogger(__name__)


async def create_room(
    db: AsyncSession, host_name: str, attempts: int,
    code_factory: Callable[[], str] = generate_room_code,
) -> tuple[str, str]:
    """Create a room and its host. Returns (room_code, host_player_id)."""
    host_id = str(uuid.uuid4())
    for _ in range(attempts):
        code = code_factory()
        if await room_store.get_room(db, code) is not None:
            continue
        db.add(Room(
            code=code,
            host_player_id=host_id,
            verification_code=generate_verification_code(),
        ))
        try:
            await db.flush()
        except IntegrityError:
            # Another request took the code between the lookup and the insert
            await db.rollback()
            logger.info("Room code taken concurrently, retrying", extra={"room_code": code})
            continue
        break
    else:
        raise RoomCodeExhaustedError(attempts)

    db.add(Player(id=host_id, room_code=code, name=host_name, is_host=True))
    await db.commit()
    logger.info("Room created", extra={"room_code": code, "player_id": host_id})
    return code, host_id


async def join_room(
    db: AsyncSession, code: str, name: str, capacity: int,
) -> str:
    """Add a guest to the room. Returns the new player id.

    The room row is locked first, so concurrent joins queue behind each other. The
    head count is taken after the insert, which also catches a join that slipped in
    on a database without row locks.
    """
    await room_store.get_room_for_update(db, code)

    player_id = str(uuid.uuid4())
    db.add(Player(id=player_id, room_code=code, name=name, is_host=False))
    await db.flush()
    if await room_store.count_players(db, code) > capacity:
        raise RoomFullError(capacity, ErrorContext(room_code=code))

    await room_store.bump_version(db, code)
    await db.commit()
    logger.info("Player joined", extra={"room_code": code, "player_id": player_id})
    return player_id
