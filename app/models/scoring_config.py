"""
ScoringConfigRow — singleton (id = 1) holding the active scoring config.

No row means the SCORING_* defaults from settings apply.
"""
from datetime import datetime
from sqlalchemy import Integer, Float, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

SINGLETON_ID = 1


class ScoringConfigRow(Base):
    __tablename__ = "scoring_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SINGLETON_ID)
    multiplier_productivity: Mapped[float] = mapped_column(Float, nullable=False)
    multiplier_health: Mapped[float] = mapped_column(Float, nullable=False)
    multiplier_growth: Mapped[float] = mapped_column(Float, nullable=False)
    target_fraction: Mapped[float] = mapped_column(Float, nullable=False)
    vice_cap: Mapped[float] = mapped_column(Float, nullable=False)
    streak_threshold: Mapped[float] = mapped_column(Float, nullable=False)
    streak_bonus_per_day: Mapped[float] = mapped_column(Float, nullable=False)
    max_streak_bonus: Mapped[float] = mapped_column(Float, nullable=False)
    phone_t1_min: Mapped[float] = mapped_column(Float, nullable=False)
    phone_t2_min: Mapped[float] = mapped_column(Float, nullable=False)
    phone_t3_min: Mapped[float] = mapped_column(Float, nullable=False)
    phone_t1_penalty: Mapped[float] = mapped_column(Float, nullable=False)
    phone_t2_penalty: Mapped[float] = mapped_column(Float, nullable=False)
    phone_t3_penalty: Mapped[float] = mapped_column(Float, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
