"""
HabitConfig — one row per habit (pool "good") or vice (pool "vice").

The active rows define what a day's raw entry values mean when it is saved:
points and category for habits, penalty and penalty mode for vices. Retiring
sets is_active = False and retired_at; rows are never deleted so old entries
stay readable.

options_json: JSON-encoded {label: score} object stored as Text, dropdown
habits only.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, Float, Boolean, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.engine.types import HabitCategory, HabitPool, InputType, PenaltyMode


class HabitConfig(Base):
    __tablename__ = "habit_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(64), nullable=False)
    pool: Mapped[HabitPool] = mapped_column(
        Enum(HabitPool, name="habit_pool_enum"), nullable=False
    )
    category: Mapped[HabitCategory | None] = mapped_column(
        Enum(HabitCategory, name="habit_category_enum"), nullable=True
    )
    input_type: Mapped[InputType] = mapped_column(
        Enum(InputType, name="habit_input_type_enum"), nullable=False
    )
    points: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    penalty: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    penalty_mode: Mapped[PenaltyMode] = mapped_column(
        Enum(PenaltyMode, name="penalty_mode_enum"), nullable=False, default=PenaltyMode.flat
    )
    options_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    retired_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
