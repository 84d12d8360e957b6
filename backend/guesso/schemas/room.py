"""Room Schemas: room creation and join requests/responses.

Invariants:
    - Player names are stripped, 1-20 chars
    - Room codes are normalized to upper case before lookup
"""

from pydantic import BaseModel, Field, field_validator

from guesso.core.domain_types import MAX_NAME_LENGTH
from guesso.core.room_codes import normalize_room_code


def _strip_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name cannot be empty or whitespace")
    if len(v) > MAX_NAME_LENGTH:
        raise ValueError(f"name must be at most {MAX_NAME_LENGTH} characters")
    return v


class RoomCreate(BaseModel):
    host_name: str = Field(min_length=1, max_length=64)

    @field_validator("host_name")
    @classmethod
    def strip_host_name(cls, v: str) -> str:
        return _strip_name(v)


class RoomJoin(BaseModel):
    room_code: str = Field(min_length=1, max_length=16)
    name: str = Field(min_length=1, max_length=64)

    @field_validator("room_code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = normalize_room_code(v)
        if not v:
            raise ValueError("room_code cannot be empty")
        return v

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_name(v)


class RoomCreated(BaseModel):
    room_code: str
    player_id: str


class RoomJoined(BaseModel):
    player_id: str
    room_code: str
