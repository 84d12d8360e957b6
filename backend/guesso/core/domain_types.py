"""Domain Types: enums and constants shared by every layer of the room engine.

Invariants:
    - All room states and action kinds are Enums, never bare string literals
    - PlayerId and RoomCode are NewTypes over str (ids are opaque to the core)
    - Numeric game limits live here and nowhere else

Design Decisions:
    - str Enums: serialize straight into JSON responses and DB columns (ADR: no custom encoders)
    - NewType over wrapper classes: zero runtime cost, full type-checker support
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RoomCode = NewType("RoomCode", str)
PlayerId = NewType("PlayerId", str)
ItemId = NewType("ItemId", str)   # catalog item id OR player id (person-rank)


# ─── Game Limits ─────────────────────────────────────────────────

ORDINARY_ITEM_COUNT: int = 7
MIN_TARGETS: int = 3
MAX_TARGETS: int = 7
MIN_TARGETS_FOR_HINT: int = 5
ROOM_CODE_LENGTH: int = 6
ROOM_CODE_ALPHABET: str = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
MAX_NAME_LENGTH: int = 20


# ─── Enums ───────────────────────────────────────────────────────

class RoomState(str, Enum):
    """Room lifecycle states, maps to DB `rooms.state` column."""
    WAITING_PLAYERS = "WAITING_PLAYERS"
    SELECT_THEME = "SELECT_THEME"
    SELECT_ASKER = "SELECT_ASKER"
    SELECT_TARGETS = "SELECT_TARGETS"
    ASKER_RANKING = "ASKER_RANKING"
    REVEAL_MIDDLE = "REVEAL_MIDDLE"
    GUESSING_OPEN = "GUESSING_OPEN"
    GUESSING_CLOSED = "GUESSING_CLOSED"
    RESULT_REVEALED = "RESULT_REVEALED"
    ROUND_SUMMARY = "ROUND_SUMMARY"


class ActionKind(str, Enum):
    """Every mutation a client may request through the action endpoint."""
    START_GAME = "start-game"
    SELECT_THEME = "select-theme"
    SELECT_ASKER = "select-asker"
    SELECT_TARGETS = "select-targets"
    SUBMIT_RANKING = "submit-ranking"
    OPEN_GUESSING = "open-guessing"
    SUBMIT_GUESS = "submit-guess"
    CLOSE_GUESS = "close-guess"
    REVEAL_RESULT = "reveal-result"
    NEXT_RANK = "next-rank"
    SHOW_SUMMARY = "show-summary"
    NEXT_ROUND = "next-round"
    BACK_TO_THEME = "back-to-theme"
    KICK_PLAYER = "kick-player"


class Role(str, Enum):
    """Who may trigger a transition."""
    HOST = "host"
    ASKER = "asker"
    GUESSER = "guesser"   # any member except the current asker


class ThemeCategory(str, Enum):
    LOVE = "love"
    LIFE = "life"
    LIGHT = "light"
    FETISH = "fetish"
    PERSON_RANK = "person-rank"


# States from which the hint rank (if any) is visible.
HINT_VISIBLE_STATES: frozenset[RoomState] = frozenset({
    RoomState.REVEAL_MIDDLE,
    RoomState.GUESSING_OPEN,
    RoomState.GUESSING_CLOSED,
    RoomState.RESULT_REVEALED,
    RoomState.ROUND_SUMMARY,
})
