"""Room ORM: the aggregate root and single serialization point of a game.

Invariants:
    - code is the public primary key, immutable once created
    - state holds a RoomState value; only the action dispatcher writes it
    - version increments on every write a polling client can observe
    - current_guess_rank, when set, is a member of the active round's rank_sequence
    - Exactly one player per room has is_host = True (the creator)

Design Decisions:
    - Integer version column as the polling token rather than comparing timestamps:
      equality on an int is exact across drivers (ADR: ETag-equivalent)
    - Transitions are written with a conditional UPDATE (see services/room_store.py),
      not ORM attribute assignment, so a stale read can never win a race
    - cascade delete for players, rounds, guesses: room owns everything
    - Relationships are lazy="raise": rosters and rounds are read through
      services/room_store.py, so loading a room never drags its children along
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guesso.core.domain_types import RoomState
from guesso.db.base import Base


class Room(Base):
    """Room aggregate root: owns players, rounds and guesses."""
    __tablename__ = "rooms"

    code: Mapped[str] = mapped_column(String(6), primary_key=True)
    host_player_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    state: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RoomState.WAITING_PLAYERS.value,
    )
    current_round: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    asker_player_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    current_guess_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gui_mode: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Side-channel gates, written only by integration webhooks
    verification_flag: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    verification_code: Mapped[str | None] = mapped_column(
        String(4), nullable=True, index=True,
    )
    premium_unlocked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    players: Mapped[list["Player"]] = relationship(
        "Player", back_populates="room", cascade="all, delete-orphan",
        order_by="Player.joined_at", lazy="raise",
    )
    rounds: Mapped[list["Round"]] = relationship(
        "Round", back_populates="room", cascade="all, delete-orphan", lazy="raise",
    )

    @property
    def room_state(self) -> RoomState:
        return RoomState(self.state)
