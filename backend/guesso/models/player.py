"""Player ORM: one participant in one room.

Invariants:
    - Belongs to exactly one Room (room_code FK)
    - Created by room creation (host) or join (guest), deleted by kick
    - Membership is capped by settings.max_players_per_room (checked on join)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guesso.core.domain_types import MAX_NAME_LENGTH
from guesso.db.base import Base


class Player(Base):
    __tablename__ = "players"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    room_code: Mapped[str] = mapped_column(
        String(6), ForeignKey("rooms.code", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    is_host: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    last_seen: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    room: Mapped["Room"] = relationship("Room", back_populates="players")
