"""Round ORM: per-(room, round_no) theme, asker and secret ranking.

Invariants:
    - Unique per (room_code, round_no); select-theme upserts it
    - ranking_json has length N (7 ordinary, len(target_player_ids) person-rank)
    - ranking_json is written once by submit-ranking and never again for the round
      (back-to-theme may clear it only before guessing starts)
    - rank_sequence is computed from N, never supplied by a client

Design Decisions:
    - JSON columns for id lists: the lists are read whole and never queried into
    - asker_player_id duplicated from Room for audit of finished rounds
    - middle_revealed_value duplicated from ranking_json for cheap hint display
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from guesso.core.domain_types import ORDINARY_ITEM_COUNT
from guesso.db.base import Base


class Round(Base):
    __tablename__ = "rounds"
    __table_args__ = (
        UniqueConstraint("room_code", "round_no", name="uq_rounds_room_round"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_code: Mapped[str] = mapped_column(
        String(6), ForeignKey("rooms.code", ondelete="CASCADE"), nullable=False,
    )
    round_no: Mapped[int] = mapped_column(Integer, nullable=False)
    theme_id: Mapped[str | None] = mapped_column(String(40), nullable=True)
    is_person_rank: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    asker_player_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    target_player_ids: Mapped[list | None] = mapped_column(JSON, nullable=True)
    ranking_json: Mapped[list | None] = mapped_column(JSON, nullable=True)
    rank_sequence: Mapped[list | None] = mapped_column(JSON, nullable=True)
    middle_revealed_value: Mapped[str | None] = mapped_column(
        String(64), nullable=True,
    )
    gui_counts: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    room: Mapped["Room"] = relationship("Room", back_populates="rounds")

    @property
    def item_count(self) -> int:
        """N: number of ranked entries this round has (or will have)."""
        if self.is_person_rank:
            return len(self.target_player_ids or [])
        return ORDINARY_ITEM_COUNT
