"""
Habit definition schemas.

GET  /habits            → HabitListResponse
GET  /habits/{name}     → HabitConfigResponse
POST /habits            → HabitConfigCreate → HabitConfigResponse
PUT  /habits/{name}     → HabitConfigUpdate → HabitConfigResponse
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.engine.habit_validator import parse_dropdown_options
from app.engine.types import (
    HabitCategory,
    HabitConfigInput,
    HabitPool,
    InputType,
    PenaltyMode,
)
from app.models.habit_config import HabitConfig


class HabitConfigUpdate(BaseModel):
    """A full habit definition. Rule checks (H01–H19) run in the service."""
    model_config = ConfigDict(allow_inf_nan=False)

    display_name: str = Field(max_length=128, examples=["Gym"])
    pool: HabitPool
    category: Optional[HabitCategory] = Field(
        default=None, description="Required for good habits, absent for vices."
    )
    input_type: InputType
    points: float = Field(default=0.0, description="Good habits only; dropdowns use their best option.")
    penalty: float = Field(default=0.0, description="Flat / per_instance vices only.")
    penalty_mode: PenaltyMode = PenaltyMode.flat
    options: Optional[dict[str, Any]] = Field(
        default=None,
        examples=[{"Poor": 0, "Okay": 1, "Good": 2, "Great": 3}],
        description="Dropdown label → score.",
    )
    sort_order: int = 1
    is_active: bool = True

    def to_engine(self) -> HabitConfigInput:
        return HabitConfigInput(
            display_name=self.display_name,
            pool=self.pool,
            category=self.category,
            input_type=self.input_type,
            points=self.points,
            penalty=self.penalty,
            penalty_mode=self.penalty_mode,
            options_json=None if self.options is None else json.dumps(self.options),
            sort_order=self.sort_order,
            is_active=self.is_active,
        )


class HabitConfigCreate(HabitConfigUpdate):
    name: str = Field(
        min_length=1,
        max_length=64,
        pattern=r"^[a-z0-9_]+$",
        examples=["cold_shower"],
        description="Key used in a day's entry values. Cannot be changed later.",
    )


class HabitConfigResponse(BaseModel):
    name: str
    display_name: str
    pool: HabitPool
    category: Optional[HabitCategory] = None
    input_type: InputType
    points: float
    penalty: float
    penalty_mode: PenaltyMode
    options: Optional[dict[str, Any]] = None
    sort_order: int
    is_active: bool
    created_at: Optional[datetime] = None
    retired_at: Optional[datetime] = None


class HabitListResponse(BaseModel):
    total: int
    items: list[HabitConfigResponse]


def habit_to_response(row: HabitConfig) -> HabitConfigResponse:
    return HabitConfigResponse(
        name=row.name,
        display_name=row.display_name,
        pool=row.pool,
        category=row.category,
        input_type=row.input_type,
        points=row.points,
        penalty=row.penalty,
        penalty_mode=row.penalty_mode,
        options=parse_dropdown_options(row.options_json),
        sort_order=row.sort_order,
        is_active=row.is_active,
        created_at=row.created_at,
        retired_at=row.retired_at,
    )
