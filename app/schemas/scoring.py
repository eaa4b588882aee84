"""
Scoring request / response schemas.

POST /scoring/compute          → ComputeScoresRequest → ScoringOutputResponse
POST /scoring/cascade          → CascadeRequest       → CascadeResponse
GET/PUT /scoring/config        → ScoringConfigSchema
POST /scoring/config/validate  → ScoringConfigSchema  → ConfigValidationResponse
PUT /days/{day}                → SaveDayRequest       → SaveDayResponse

Numeric inputs reject NaN and Infinity (422), except phone_minutes on
/scoring/compute, which the engine treats as 0.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.engine.types import (
    CascadeUpdate,
    HabitCategory,
    HabitValue,
    PenaltyMode,
    ScoringConfig,
    ScoringOutput,
    StoredDay,
    ViceValue,
)

# Highest number of subsequent days accepted by a stateless cascade request.
CASCADE_MAX_DAYS = 3660


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class HabitValueIn(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    name: str = Field(min_length=1, max_length=128)
    value: float = Field(ge=0, description="Achieved amount for the day.")
    points: float = Field(ge=0, description="Maximum attainable amount.")
    category: HabitCategory

    def to_engine(self) -> HabitValue:
        return HabitValue(
            name=self.name,
            value=self.value,
            points=self.points,
            category=self.category,
        )


class ViceValueIn(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    name: str = Field(min_length=1, max_length=128)
    triggered: bool = False
    count: Optional[int] = Field(
        default=None, ge=0, description="Instances; used only in per_instance mode."
    )
    penalty_value: float = Field(ge=0)
    penalty_mode: PenaltyMode

    def to_engine(self) -> ViceValue:
        return ViceValue(
            name=self.name,
            triggered=self.triggered,
            count=self.count,
            penalty_value=self.penalty_value,
            penalty_mode=self.penalty_mode,
        )


class ScoringConfigSchema(BaseModel):
    """Full scoring config. Defaults match the seed configuration."""
    model_config = ConfigDict(from_attributes=True, allow_inf_nan=False)

    multiplier_productivity: float = 1.5
    multiplier_health: float = 1.3
    multiplier_growth: float = 1.0
    target_fraction: float = 0.85
    vice_cap: float = 0.40
    streak_threshold: float = 0.65
    streak_bonus_per_day: float = 0.01
    max_streak_bonus: float = 0.10
    phone_t1_min: float = 61
    phone_t2_min: float = 181
    phone_t3_min: float = 301
    phone_t1_penalty: float = 0.03
    phone_t2_penalty: float = 0.07
    phone_t3_penalty: float = 0.12

    def to_engine(self) -> ScoringConfig:
        return ScoringConfig(**self.model_dump())


class ComputeScoresRequest(BaseModel):
    habits: list[HabitValueIn] = Field(default_factory=list)
    vices: list[ViceValueIn] = Field(default_factory=list)
    phone_minutes: float = Field(
        default=0.0, description="NaN or negative values are treated as 0."
    )
    previous_streak: int = Field(
        default=-1,
        ge=-1,
        description="-1 = no earlier tracked day, 0 = gap before this day, else prior streak.",
    )
    config: Optional[ScoringConfigSchema] = Field(
        default=None, description="Omit to use the stored scoring config."
    )


class SaveDayRequest(BaseModel):
    """Body of PUT /days/{day}: raw entry values keyed by habit name."""
    model_config = ConfigDict(allow_inf_nan=False)

    values: dict[str, Union[bool, int, float, str]] = Field(
        default_factory=dict,
        examples=[{"gym": True, "meal_quality": "Good", "relapse": 0, "phone_use": 95}],
        description=(
            "Checkbox: true/false. Dropdown: an option label. Number: a non-negative "
            "count or amount; the tiered vice takes phone minutes. Missing habits count as 0."
        ),
    )


class ScoringOutputIn(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    positive_score: float = Field(ge=0, le=1)
    vice_penalty: float = Field(ge=0, le=1)
    base_score: float = Field(ge=0, le=1)
    streak: int = Field(ge=0)
    final_score: float = Field(ge=0, le=1)

    def to_engine(self) -> ScoringOutput:
        return ScoringOutput(**self.model_dump())


class StoredDayIn(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    # Kept as a string: unparseable dates surface as INVALID_DATE from the engine.
    date: str = Field(examples=["2026-02-04"])
    base_score: float
    streak: int = Field(ge=0)
    final_score: float

    def to_engine(self) -> StoredDay:
        return StoredDay(self.date, self.base_score, self.streak, self.final_score)


class CascadeRequest(BaseModel):
    edited_date: str = Field(examples=["2026-02-03"])
    edited_scores: ScoringOutputIn
    subsequent_days: list[StoredDayIn] = Field(
        default_factory=list,
        max_length=CASCADE_MAX_DAYS,
        description="Stored later days, ascending by date.",
    )
    config: Optional[ScoringConfigSchema] = None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

class ScoringOutputResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    positive_score: float
    vice_penalty: float
    base_score: float
    streak: int
    final_score: float


class CascadeUpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    streak: int
    final_score: float
    positive_score: Optional[float] = Field(
        default=None, description="Set only on the edited day."
    )
    vice_penalty: Optional[float] = None
    base_score: Optional[float] = None


class CascadeResponse(BaseModel):
    total: int = Field(description="Number of updates, edited day included.")
    updates: list[CascadeUpdateResponse]


class ValidationIssueResponse(BaseModel):
    field: str
    rule: str
    message: str
    value: Any = None


class ConfigValidationResponse(BaseModel):
    valid: bool
    errors: list[ValidationIssueResponse]
    warnings: list[ValidationIssueResponse]


class DailyScoreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: date
    phone_minutes: Optional[float] = None
    positive_score: Optional[float] = None
    vice_penalty: Optional[float] = None
    base_score: Optional[float] = None
    streak: Optional[int] = None
    final_score: Optional[float] = None
    values: Optional[dict[str, Any]] = Field(
        default=None, description="Raw entry values of the last save, when saved from values."
    )


class SaveDayResponse(BaseModel):
    day: DailyScoreResponse
    previous_streak: int
    cascaded: list[CascadeUpdateResponse] = Field(
        description="Later days whose streak / final_score were rewritten."
    )


class DailyScoreListResponse(BaseModel):
    total: int
    items: list[DailyScoreResponse]


def cascade_update_to_response(update: CascadeUpdate) -> CascadeUpdateResponse:
    return CascadeUpdateResponse.model_validate(update)
