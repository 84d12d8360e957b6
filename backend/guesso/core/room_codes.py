"""Room Codes: public room identifiers, verification codes, and name normalization."""

import secrets
from typing import Callable

from guesso.core.domain_types import ROOM_CODE_ALPHABET, ROOM_CODE_LENGTH


def generate_room_code(choice: Callable[[str], str] = secrets.choice) -> str:
    """6 characters from an alphabet without look-alikes (no I, O, 0, 1)."""
    return "".join(choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def generate_verification_code(randbelow: Callable[[int], int] = secrets.randbelow) -> str:
    """4-digit numeric code, distinguishable from room codes at a glance."""
    return str(1000 + randbelow(9000))


def normalize_room_code(code: str) -> str:
    return code.strip().upper()
