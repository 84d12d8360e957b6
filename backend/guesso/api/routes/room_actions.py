"""Room Action Route: the single write endpoint for gameplay.

Invariants:
    - All gameplay mutations go through ActionDispatch.apply
    - Response is {"ok": true} or the GuessoError envelope
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from guesso.api.dependencies import rate_limited
from guesso.config import get_settings
from guesso.core.room_codes import normalize_room_code
from guesso.infrastructure.database import get_db
from guesso.schemas.action import ActionRequest, ActionResult
from guesso.services.action_dispatch import ActionDispatch

router = APIRouter(prefix="/api/v1/rooms", tags=["actions"])


@router.post(
    "/{code}/action", response_model=ActionResult,
    dependencies=[Depends(rate_limited)],
)
async def apply_action(
    code: str, body: ActionRequest, db: AsyncSession = Depends(get_db),
):
    dispatch = ActionDispatch(db, premium_debug=get_settings().premium_debug)
    return await dispatch.apply(normalize_room_code(code), body)
