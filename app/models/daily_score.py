"""
DailyScore — one row per tracked day with its computed scores.

Score columns are nullable: a day can be tracked before it is scored. Only
fully scored rows (base_score, streak and final_score all set) take part in
the forward cascade.

entry_values: JSON-encoded {habit name: raw value} object stored as Text, as
submitted on the last save of the day.
"""
import json
from datetime import datetime, date
from typing import Any, Optional

from sqlalchemy import Integer, Float, Text, DateTime, Date, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class DailyScore(Base):
    __tablename__ = "daily_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    day: Mapped[date] = mapped_column(Date, nullable=False, unique=True, index=True)
    phone_minutes: Mapped[float | None] = mapped_column(Float, nullable=True)
    positive_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    vice_penalty: Mapped[float | None] = mapped_column(Float, nullable=True)
    base_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    streak: Mapped[int | None] = mapped_column(Integer, nullable=True)
    final_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    entry_values: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @property
    def values(self) -> Optional[dict[str, Any]]:
        if self.entry_values is None:
            return None
        return json.loads(self.entry_values)
