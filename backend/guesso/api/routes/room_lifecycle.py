"""Room Lifecycle Routes: create a room, join a room.

Invariants:
    - Both endpoints sit behind the rate limiter
    - Names and codes are normalized by the schemas before reaching the service
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from guesso.api.dependencies import rate_limited
from guesso.config import get_settings
from guesso.infrastructure.database import get_db
from guesso.schemas.room import RoomCreate, RoomCreated, RoomJoin, RoomJoined
from guesso.services import room_lifecycle

router = APIRouter(prefix="/api/v1/rooms", tags=["rooms"])


@router.post(
    "", response_model=RoomCreated,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limited)],
)
async def create_room(body: RoomCreate, db: AsyncSession = Depends(get_db)):
    """Create a room; the caller becomes its host."""
    code, player_id = await room_lifecycle.create_room(
        db, body.host_name, get_settings().room_code_attempts,
    )
    return RoomCreated(room_code=code, player_id=player_id)


@router.post(
    "/join", response_model=RoomJoined, dependencies=[Depends(rate_limited)],
)
async def join_room(body: RoomJoin, db: AsyncSession = Depends(get_db)):
    player_id = await room_lifecycle.join_room(
        db, body.room_code, body.name, get_settings().max_players_per_room,
    )
    return RoomJoined(player_id=player_id, room_code=body.room_code)
