"""
Habit service — habit / vice definitions and the raw-entry → engine-input step.

A day is saved as raw entry values keyed by habit name:

  checkbox   true / false (or a number, >= 1 counts as done)
  dropdown   an option label, scored through the habit's options_json
  number     a non-negative number: instances for a per_instance vice,
             minutes for the tiered (phone) vice, amount for a good habit
             (capped at its points)

Only ACTIVE definitions are used. A missing entry counts as not done / zero;
an entry for an unknown or retired habit is rejected.

Public API
----------
list_habits(db, include_inactive)         -> list[HabitConfig]
get_habit(db, name)                       -> HabitConfig
load_active_habit_configs(db)             -> list[HabitConfig]
create_habit(db, name, habit)             -> HabitConfig
update_habit(db, name, habit)             -> HabitConfig
retire_habit(db, name)                    -> HabitConfig
resolve_dropdown_value(label, options)    -> float
build_scoring_inputs(values, configs)     -> EntryInputs
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.errors import (
    HabitAlreadyExistsError,
    HabitNotFoundError,
    InvalidEntryValueError,
    InvalidHabitConfigError,
)
from app.core.logging import get_logger
from app.engine.habit_validator import (
    dropdown_points,
    parse_dropdown_options,
    validate_habit_config,
)
from app.engine.types import (
    HabitConfigInput,
    HabitPool,
    HabitValidationContext,
    HabitValue,
    InputType,
    PenaltyMode,
    ViceValue,
)
from app.models.habit_config import HabitConfig

logger = get_logger(__name__)


@dataclass
class EntryInputs:
    habits: list[HabitValue]
    vices: list[ViceValue]
    phone_minutes: float


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def list_habits(db: Session, include_inactive: bool = False) -> list[HabitConfig]:
    query = db.query(HabitConfig)
    if not include_inactive:
        query = query.filter(HabitConfig.is_active.is_(True))
    return query.order_by(HabitConfig.pool, HabitConfig.sort_order, HabitConfig.id).all()


def load_active_habit_configs(db: Session) -> list[HabitConfig]:
    return list_habits(db)


def get_habit(db: Session, name: str) -> HabitConfig:
    row = db.query(HabitConfig).filter(HabitConfig.name == name).first()
    if row is None:
        raise HabitNotFoundError(name)
    return row


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def _validation_context(db: Session, exclude_id: Optional[int]) -> HabitValidationContext:
    others = db.query(HabitConfig)
    if exclude_id is not None:
        others = others.filter(HabitConfig.id != exclude_id)
    others = others.all()
    return HabitValidationContext(
        existing_display_names=tuple(o.display_name for o in others),
        tiered_vice_count=sum(
            1 for o in others
            if o.is_active and o.pool == HabitPool.vice and o.penalty_mode == PenaltyMode.tiered
        ),
        active_good_habit_count=sum(
            1 for o in others if o.is_active and o.pool == HabitPool.good
        ),
    )


def _with_synced_points(habit: HabitConfigInput) -> HabitConfigInput:
    """A good dropdown habit is worth its best option."""
    if habit.pool != HabitPool.good or habit.input_type != InputType.dropdown:
        return habit
    points = dropdown_points(habit.options_json)
    if points is None:
        return habit
    return replace(habit, points=points)


def _validated(db: Session, habit: HabitConfigInput, exclude_id: Optional[int]) -> HabitConfigInput:
    habit = _with_synced_points(habit)
    result = validate_habit_config(habit, _validation_context(db, exclude_id))
    if not result.valid:
        raise InvalidHabitConfigError([e.to_dict() for e in result.errors])
    return habit


def _apply(row: HabitConfig, habit: HabitConfigInput) -> None:
    was_active = row.is_active
    row.display_name = habit.display_name
    row.pool = habit.pool
    row.category = habit.category
    row.input_type = habit.input_type
    row.points = habit.points
    row.penalty = habit.penalty
    row.penalty_mode = habit.penalty_mode
    row.options_json = habit.options_json
    row.sort_order = habit.sort_order
    row.is_active = habit.is_active
    if was_active is not False and not habit.is_active:
        row.retired_at = datetime.now(timezone.utc)
    elif habit.is_active:
        row.retired_at = None


def create_habit(db: Session, name: str, habit: HabitConfigInput) -> HabitConfig:
    if db.query(HabitConfig.id).filter(HabitConfig.name == name).first() is not None:
        raise HabitAlreadyExistsError(name)
    habit = _validated(db, habit, exclude_id=None)

    row = HabitConfig(name=name)
    _apply(row, habit)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created %s habit %s", row.pool.value, name)
    return row


def update_habit(db: Session, name: str, habit: HabitConfigInput) -> HabitConfig:
    """Replace every field but the name. Already-saved days are not rescored."""
    row = get_habit(db, name)
    habit = _validated(db, habit, exclude_id=row.id)

    _apply(row, habit)
    db.commit()
    db.refresh(row)
    logger.info("Updated habit %s (active=%s)", name, row.is_active)
    return row


def _to_input(row: HabitConfig, **overrides: Any) -> HabitConfigInput:
    fields = dict(
        display_name=row.display_name,
        pool=row.pool,
        category=row.category,
        input_type=row.input_type,
        points=row.points,
        penalty=row.penalty,
        penalty_mode=row.penalty_mode,
        options_json=row.options_json,
        sort_order=row.sort_order,
        is_active=row.is_active,
    )
    fields.update(overrides)
    return HabitConfigInput(**fields)


def retire_habit(db: Session, name: str) -> HabitConfig:
    row = get_habit(db, name)
    return update_habit(db, name, _to_input(row, is_active=False))


# ---------------------------------------------------------------------------
# Raw entry values → engine inputs
# ---------------------------------------------------------------------------

def resolve_dropdown_value(label: str, options_json: Optional[str]) -> Optional[float]:
    """Score of `label`, or None when it is not one of the options."""
    options = parse_dropdown_options(options_json) or {}
    score = options.get(label)
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    return float(score)


def _number(row: HabitConfig, raw: Any) -> float:
    if isinstance(raw, str):
        raise InvalidEntryValueError(row.name, raw, "expected a number or boolean")
    value = float(raw)
    if math.isnan(value):
        raise InvalidEntryValueError(row.name, raw, "expected a number")
    return value


def _habit_value(row: HabitConfig, raw: Any) -> float:
    if raw is None:
        return 0.0
    if row.input_type == InputType.dropdown:
        if not isinstance(raw, str):
            raise InvalidEntryValueError(row.name, raw, "expected an option label")
        score = resolve_dropdown_value(raw, row.options_json)
        if score is None:
            raise InvalidEntryValueError(row.name, raw, "not one of the habit's options")
        return score
    value = _number(row, raw)
    if value < 0:
        raise InvalidEntryValueError(row.name, raw, "must not be negative")
    if row.input_type == InputType.checkbox:
        return row.points if value >= 1 else 0.0
    return min(value, row.points)


def _vice_value(row: HabitConfig, raw: Any) -> ViceValue:
    value = 0.0 if raw is None else _number(row, raw)
    if row.penalty_mode == PenaltyMode.per_instance:
        if value < 0 or not value.is_integer():
            raise InvalidEntryValueError(row.name, raw, "expected a whole, non-negative count")
        return ViceValue(row.name, value > 0, row.penalty, PenaltyMode.per_instance,
                         count=int(value))
    if row.penalty_mode == PenaltyMode.tiered:
        return ViceValue(row.name, False, 0.0, PenaltyMode.tiered)
    return ViceValue(row.name, value >= 1, row.penalty, PenaltyMode.flat)


def build_habit_values(values: Mapping[str, Any], configs: Sequence[HabitConfig]) -> list[HabitValue]:
    return [
        HabitValue(c.name, _habit_value(c, values.get(c.name)), c.points, c.category)
        for c in configs
        if c.pool == HabitPool.good
    ]


def build_vice_values(values: Mapping[str, Any], configs: Sequence[HabitConfig]) -> list[ViceValue]:
    return [
        _vice_value(c, values.get(c.name))
        for c in configs
        if c.pool == HabitPool.vice
    ]


def phone_minutes_from_entry(values: Mapping[str, Any], configs: Sequence[HabitConfig]) -> float:
    """Raw value of the tiered vice; 0 when there is none or it was not entered."""
    for c in configs:
        if c.pool == HabitPool.vice and c.penalty_mode == PenaltyMode.tiered:
            raw = values.get(c.name)
            return 0.0 if raw is None else _number(c, raw)
    return 0.0


def build_scoring_inputs(values: Mapping[str, Any], configs: Sequence[HabitConfig]) -> EntryInputs:
    known = {c.name for c in configs}
    for name, raw in values.items():
        if name not in known:
            raise InvalidEntryValueError(name, raw, "not an active habit or vice")

    return EntryInputs(
        habits=build_habit_values(values, configs),
        vices=build_vice_values(values, configs),
        phone_minutes=phone_minutes_from_entry(values, configs),
    )
