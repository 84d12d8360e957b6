"""ORM Models: SQLAlchemy declarative models for rooms and everything they own.

Invariants:
    - All models inherit from Base (db/base.py)
    - Room is the aggregate root; every other table is scoped by room_code

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from guesso.models.room import Room  # noqa: F401
from guesso.models.player import Player  # noqa: F401
from guesso.models.round import Round  # noqa: F401
from guesso.models.guess import Guess  # noqa: F401
