"""
Scoring engine value types.

Plain frozen dataclasses — no ORM, no Pydantic. Everything here is built per
call from caller-supplied data and discarded afterwards; the engine never
mutates what it is given.

HabitValue.category and ViceValue.penalty_mode are coerced to their enums on
construction, so an unknown category or mode fails there (ValueError) and
never inside compute_scores.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import NamedTuple, Optional, Union


class HabitCategory(str, enum.Enum):
    productivity = "productivity"
    health = "health"
    growth = "growth"


class PenaltyMode(str, enum.Enum):
    flat = "flat"
    per_instance = "per_instance"
    tiered = "tiered"


class HabitPool(str, enum.Enum):
    good = "good"
    vice = "vice"


class InputType(str, enum.Enum):
    checkbox = "checkbox"
    dropdown = "dropdown"
    number = "number"


@dataclass(frozen=True)
class ScoringConfig:
    multiplier_productivity: float = 1.5
    multiplier_health: float = 1.3
    multiplier_growth: float = 1.0
    target_fraction: float = 0.85
    vice_cap: float = 0.40
    streak_threshold: float = 0.65
    streak_bonus_per_day: float = 0.01
    max_streak_bonus: float = 0.10
    phone_t1_min: float = 61.0
    phone_t2_min: float = 181.0
    phone_t3_min: float = 301.0
    phone_t1_penalty: float = 0.03
    phone_t2_penalty: float = 0.07
    phone_t3_penalty: float = 0.12


@dataclass(frozen=True)
class HabitValue:
    """One active good habit's contribution for one day."""
    name: str
    value: float        # achieved amount
    points: float       # maximum attainable amount
    category: HabitCategory

    def __post_init__(self):
        object.__setattr__(self, "category", HabitCategory(self.category))


@dataclass(frozen=True)
class ViceValue:
    """One active vice's contribution for one day."""
    name: str
    triggered: bool
    penalty_value: float
    penalty_mode: PenaltyMode
    count: Optional[int] = None     # per_instance only

    def __post_init__(self):
        object.__setattr__(self, "penalty_mode", PenaltyMode(self.penalty_mode))


@dataclass(frozen=True)
class ScoringInput:
    habit_values: tuple[HabitValue, ...] | list[HabitValue]
    vice_values: tuple[ViceValue, ...] | list[ViceValue]
    phone_minutes: float
    # -1 = no earlier tracked day, 0 = gap before this day, else prior streak
    previous_streak: int
    config: ScoringConfig = field(default_factory=ScoringConfig)


@dataclass(frozen=True)
class ScoringOutput:
    positive_score: float
    vice_penalty: float
    base_score: float
    streak: int
    final_score: float


class StoredDay(NamedTuple):
    """Stored scores of a day after the edited one, as read from the store."""
    date: Union[str, date]
    base_score: float
    streak: int
    final_score: float


@dataclass(frozen=True)
class CascadeUpdate:
    date: str
    streak: int
    final_score: float
    # Present only for the edited day (first element of a cascade).
    positive_score: Optional[float] = None
    vice_penalty: Optional[float] = None
    base_score: Optional[float] = None

    @property
    def is_edited_day(self) -> bool:
        return self.base_score is not None


@dataclass(frozen=True)
class HabitConfigInput:
    """A habit or vice definition as submitted for a write, before it is stored."""
    display_name: str
    pool: HabitPool
    category: Optional[HabitCategory]
    input_type: InputType
    points: float = 0.0
    penalty: float = 0.0
    penalty_mode: PenaltyMode = PenaltyMode.flat
    # Dropdown label -> score, as the raw JSON text that will be stored.
    options_json: Optional[str] = None
    sort_order: int = 1
    is_active: bool = True


@dataclass(frozen=True)
class HabitValidationContext:
    """Counts over the OTHER stored habits (the one being written excluded)."""
    existing_display_names: tuple[str, ...] = ()
    tiered_vice_count: int = 0
    active_good_habit_count: int = 0
