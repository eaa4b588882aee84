"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

daily_scores: one row per tracked day; score columns nullable until scored.
scoring_config: singleton row (id = 1); absent row means settings defaults.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- daily_scores ---
    op.create_table(
        "daily_scores",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("phone_minutes", sa.Float(), nullable=True),
        sa.Column("positive_score", sa.Float(), nullable=True),
        sa.Column("vice_penalty", sa.Float(), nullable=True),
        sa.Column("base_score", sa.Float(), nullable=True),
        sa.Column("streak", sa.Integer(), nullable=True),
        sa.Column("final_score", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("day"),
    )
    op.create_index("ix_daily_scores_id", "daily_scores", ["id"])
    op.create_index("ix_daily_scores_day", "daily_scores", ["day"])

    # --- scoring_config ---
    op.create_table(
        "scoring_config",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("multiplier_productivity", sa.Float(), nullable=False),
        sa.Column("multiplier_health", sa.Float(), nullable=False),
        sa.Column("multiplier_growth", sa.Float(), nullable=False),
        sa.Column("target_fraction", sa.Float(), nullable=False),
        sa.Column("vice_cap", sa.Float(), nullable=False),
        sa.Column("streak_threshold", sa.Float(), nullable=False),
        sa.Column("streak_bonus_per_day", sa.Float(), nullable=False),
        sa.Column("max_streak_bonus", sa.Float(), nullable=False),
        sa.Column("phone_t1_min", sa.Float(), nullable=False),
        sa.Column("phone_t2_min", sa.Float(), nullable=False),
        sa.Column("phone_t3_min", sa.Float(), nullable=False),
        sa.Column("phone_t1_penalty", sa.Float(), nullable=False),
        sa.Column("phone_t2_penalty", sa.Float(), nullable=False),
        sa.Column("phone_t3_penalty", sa.Float(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("scoring_config")
    op.drop_index("ix_daily_scores_day", table_name="daily_scores")
    op.drop_index("ix_daily_scores_id", table_name="daily_scores")
    op.drop_table("daily_scores")
