"""Integrations: side-channel writes from the verification bot and the payment provider.

Invariants:
    - These are the only writers of Room.verification_flag and Room.premium_unlocked
    - Both flags are one-way: nothing ever clears them
    - Every flag write bumps the room version
    - Signatures are compared in constant time over the raw request body
"""

import hashlib
import hmac
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guesso.core.errors import ErrorContext, ResourceNotFoundError
from guesso.models.room import Room
from guesso.services import room_store

logger = logging.getLogger(__name__)


def sign(body: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


def signature_valid(body: bytes, signature: str | None, secret: str) -> bool:
    if not signature:
        return False
    return hmac.compare_digest(sign(body, secret), signature.strip().lower())


async def verify_room(db: AsyncSession, verification_code: str) -> str | None:
    """Mark the unverified room holding this code as verified. Returns its code or None."""
    result = await db.execute(
        select(Room)
        .where(
            Room.verification_code == verification_code,
            Room.verification_flag.is_(False),
        )
        .order_by(Room.created_at.desc())
        .limit(1),
    )
    room = result.scalar_one_or_none()
    if room is None:
        logger.info("Verification code matched no room")
        return None

    await room_store.bump_version(db, room.code, verification_flag=True)
    await db.commit()
    logger.info("Room verified", extra={"room_code": room.code})
    return room.code


async def unlock_premium(db: AsyncSession, room_code: str) -> None:
    if not await room_store.bump_version(db, room_code, premium_unlocked=True):
        raise ResourceNotFoundError("Room", room_code, ErrorContext(room_code=room_code))
    await db.commit()
    logger.info("Premium unlocked", extra={"room_code": room_code})
