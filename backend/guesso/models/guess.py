"""Guess ORM: the guess ledger, one row per (room, round, player, rank).

Invariants:
    - Unique on (room_code, round_no, player_id, guess_rank): resubmission overwrites
    - The asker of a round never has a row for that round
    - guess_rank is a member of the round's rank_sequence

Design Decisions:
    - No FK to rounds: the ledger is keyed by (room_code, round_no) like the round itself,
      so back-to-theme can reset a round without touching guesses (there are none yet)
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from guesso.db.base import Base


class Guess(Base):
    __tablename__ = "guesses"
    __table_args__ = (
        UniqueConstraint(
            "room_code", "round_no", "player_id", "guess_rank",
            name="uq_guesses_room_round_player_rank",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    room_code: Mapped[str] = mapped_column(
        String(6), ForeignKey("rooms.code", ondelete="CASCADE"), nullable=False,
    )
    round_no: Mapped[int] = mapped_column(Integer, nullable=False)
    player_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("players.id", ondelete="CASCADE"), nullable=False,
    )
    guess_rank: Mapped[int] = mapped_column(Integer, nullable=False)
    guess_top1: Mapped[str] = mapped_column(String(64), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
