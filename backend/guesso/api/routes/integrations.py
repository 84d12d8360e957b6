"""Integration Webhooks: verification bot and payment provider callbacks.

Invariants:
    - Both endpoints require an HMAC-SHA256 X-Signature over the raw body
    - Unknown verification codes are a normal outcome (200, verified=false)
    - Unknown rooms on entitlement are 404
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from guesso.api.dependencies import signed_body
from guesso.core.errors import ActionValidationError
from guesso.infrastructure.database import get_db
from guesso.schemas.integration import (
    EntitlementRequest, VerificationRequest, VerificationResult,
)
from guesso.services import integrations

router = APIRouter(prefix="/api/v1/integrations", tags=["integrations"])


def _parse(model: type[BaseModel], body: bytes):
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"]) or None
        raise ActionValidationError(
            f"Invalid webhook payload: {first['msg']}", field=field,
        ) from e


@router.post("/verification", response_model=VerificationResult)
async def verification_webhook(
    body: bytes = Depends(signed_body), db: AsyncSession = Depends(get_db),
):
    payload = _parse(VerificationRequest, body)
    room_code = await integrations.verify_room(db, payload.verification_code)
    return VerificationResult(verified=room_code is not None, room_code=room_code)


@router.post("/entitlement")
async def entitlement_webhook(
    body: bytes = Depends(signed_body), db: AsyncSession = Depends(get_db),
):
    payload = _parse(EntitlementRequest, body)
    await integrations.unlock_premium(db, payload.room_code)
    return {"ok": True, "room_code": payload.room_code}
