"""Action Schemas: the single mutation request and its result.

Invariants:
    - action and player_id are required, non-empty strings
    - action-specific fields are optional here; the handler for each action decides
      which ones it needs and rejects their absence with a readable reason

Design Decisions:
    - action is a plain str, not Literal: an unknown action is a game-level rejection
      ("Unknown action: x") rather than a schema error
"""

from pydantic import BaseModel, Field, field_validator


class ActionRequest(BaseModel):
    action: str = Field(min_length=1, max_length=40)
    player_id: str = Field(min_length=1, max_length=64)

    theme_id: str | None = None
    asker_player_id: str | None = None
    gui_mode: bool = False
    target_player_ids: list[str] | None = None
    ranking: list[str] | None = None
    guess_top1: str | None = None
    kick_player_id: str | None = None

    @field_validator("action", "player_id")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ActionResult(BaseModel):
    ok: bool = True
