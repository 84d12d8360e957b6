"""Integration Schemas: payloads posted by the verification bot and payment provider."""

from pydantic import BaseModel, Field, field_validator

from guesso.core.room_codes import normalize_room_code


class VerificationRequest(BaseModel):
    verification_code: str = Field(pattern=r"^\d{4}$")


class VerificationResult(BaseModel):
    verified: bool
    room_code: str | None = None


class EntitlementRequest(BaseModel):
    room_code: str = Field(min_length=1, max_length=16)

    @field_validator("room_code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return normalize_room_code(v)
