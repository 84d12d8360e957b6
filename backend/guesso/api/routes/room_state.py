"""Room State Route: the polling endpoint.

Invariants:
    - ver equal to str(room.version) -> {"changed": false, "version": ...}, no derivation
    - update_seen refreshes the caller's last_seen even when nothing changed
    - Presence updates never bump the version (they would defeat the short-circuit)
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from guesso.core.room_codes import normalize_room_code
from guesso.infrastructure.database import get_db
from guesso.services import room_store
from guesso.services.room_snapshot import build_snapshot, unchanged

router = APIRouter(prefix="/api/v1/rooms", tags=["state"])


@router.get("/{code}/state")
async def get_room_state(
    code: str,
    player_id: str | None = Query(None, max_length=64),
    ver: str | None = Query(None, max_length=32),
    update_seen: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """Masked snapshot of the room for player_id, or an unchanged marker."""
    room = await room_store.get_room_or_404(db, normalize_room_code(code))

    if update_seen and player_id:
        await room_store.touch_last_seen(db, room.code, player_id)
        await db.commit()

    if ver is not None and ver == str(room.version):
        return unchanged(room)
    return await build_snapshot(db, room, player_id or "")
