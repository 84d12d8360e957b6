"""Initial schema: rooms, players, rounds, guesses.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Every room-scoped table cascades on room deletion. Guesses also cascade on player
deletion so a kick never leaves orphaned ledger rows.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "rooms",
        sa.Column("code", sa.String(6), primary_key=True),
        sa.Column("host_player_id", sa.String(36), nullable=True),
        sa.Column("state", sa.String(20), nullable=False, server_default="WAITING_PLAYERS"),
        sa.Column("current_round", sa.Integer, nullable=False, server_default="0"),
        sa.Column("asker_player_id", sa.String(36), nullable=True),
        sa.Column("current_guess_rank", sa.Integer, nullable=True),
        sa.Column("gui_mode", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("verification_flag", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("verification_code", sa.String(4), nullable=True),
        sa.Column("premium_unlocked", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_rooms_verification_code", "rooms", ["verification_code"])

    op.create_table(
        "players",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "room_code", sa.String(6),
            sa.ForeignKey("rooms.code", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("name", sa.String(20), nullable=False),
        sa.Column("is_host", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("last_seen", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_players_room_code", "players", ["room_code"])

    op.create_table(
        "rounds",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "room_code", sa.String(6),
            sa.ForeignKey("rooms.code", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("round_no", sa.Integer, nullable=False),
        sa.Column("theme_id", sa.String(40), nullable=True),
        sa.Column("is_person_rank", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("asker_player_id", sa.String(36), nullable=True),
        sa.Column("target_player_ids", sa.JSON, nullable=True),
        sa.Column("ranking_json", sa.JSON, nullable=True),
        sa.Column("rank_sequence", sa.JSON, nullable=True),
        sa.Column("middle_revealed_value", sa.String(64), nullable=True),
        sa.Column("gui_counts", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("room_code", "round_no", name="uq_rounds_room_round"),
    )

    op.create_table(
        "guesses",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "room_code", sa.String(6),
            sa.ForeignKey("rooms.code", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("round_no", sa.Integer, nullable=False),
        sa.Column(
            "player_id", sa.String(36),
            sa.ForeignKey("players.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("guess_rank", sa.Integer, nullable=False),
        sa.Column("guess_top1", sa.String(64), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            "room_code", "round_no", "player_id", "guess_rank",
            name="uq_guesses_room_round_player_rank",
        ),
    )


def downgrade() -> None:
    op.drop_table("guesses")
    op.drop_table("rounds")
    op.drop_index("ix_players_room_code", table_name="players")
    op.drop_table("players")
    op.drop_index("ix_rooms_verification_code", table_name="rooms")
    op.drop_table("rooms")
