"""
Habit / vice definition validation, run before any habit_config write.

Errors
------
  H01            display_name 1–50 characters
  H_UNIQUE_NAME  display_name not used by another habit
  H02            sort_order a positive integer
  H03–H05        good habit: category set, whole points >= 1, penalty 0
  H06–H07        vice: no category, points 0
  H08            flat / per_instance vice: penalty in [0, 1]
  H09            tiered vice: penalty 0 (phone tiers come from the scoring config)
  H18            at most one tiered vice
  H10            checkbox: no options_json
  H11–H17        dropdown: options_json is a JSON object of 2–10 labels
                 (1–50 chars each) mapping to non-negative numbers, exactly
                 one of them 0
  H19            the last active good habit cannot be retired

Points of a good dropdown habit follow its options (see dropdown_points);
that sync happens on the write path, not here.
"""
from __future__ import annotations

import json
import math
from typing import Any, Optional

from app.engine.config_validator import ValidationIssue, ValidationResult
from app.engine.types import (
    HabitConfigInput,
    HabitPool,
    HabitValidationContext,
    InputType,
    PenaltyMode,
)

MIN_OPTIONS = 2
MAX_OPTIONS = 10
MAX_LABEL_LENGTH = 50


def parse_dropdown_options(options_json: Optional[str]) -> Optional[dict[str, Any]]:
    """The decoded options object, or None when absent or not a JSON object."""
    if options_json is None:
        return None
    try:
        parsed = json.loads(options_json)
    except (TypeError, ValueError):
        return None
    if not isinstance(parsed, dict):
        return None
    return parsed


def _is_score(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value >= 0
    )


def dropdown_points(options_json: Optional[str]) -> Optional[float]:
    """Highest option score, or None if the options cannot be read."""
    options = parse_dropdown_options(options_json)
    if not options:
        return None
    scores = [v for v in options.values() if _is_score(v)]
    return float(max(scores)) if scores else None


def _validate_dropdown_options(habit: HabitConfigInput, result: ValidationResult) -> None:
    options = parse_dropdown_options(habit.options_json)
    if options is None:
        if habit.pool == HabitPool.good or habit.options_json is not None:
            result.errors.append(ValidationIssue(
                "options_json", "H11", "Dropdown habits require options_json",
                habit.options_json,
            ))
        return

    if len(options) < MIN_OPTIONS:
        result.errors.append(ValidationIssue(
            "options_json", "H15",
            f"Dropdown habits must have at least {MIN_OPTIONS} options", len(options),
        ))
    if len(options) > MAX_OPTIONS:
        result.errors.append(ValidationIssue(
            "options_json", "H16",
            f"Dropdown habits cannot exceed {MAX_OPTIONS} options", len(options),
        ))

    for label in options:
        if not 1 <= len(label) <= MAX_LABEL_LENGTH:
            result.errors.append(ValidationIssue(
                "options_json", "H17",
                f"Option labels must be 1-{MAX_LABEL_LENGTH} characters", label,
            ))

    scores = []
    for value in options.values():
        if _is_score(value):
            scores.append(value)
        else:
            result.errors.append(ValidationIssue(
                "options_json", "H12",
                "options_json values must be non-negative numbers", value,
            ))

    zero_count = sum(1 for v in scores if v == 0)
    if zero_count != 1:
        result.errors.append(ValidationIssue(
            "options_json", "H13",
            "options_json must contain exactly one option with value 0", zero_count,
        ))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_habit_config(
    habit: HabitConfigInput, context: HabitValidationContext
) -> ValidationResult:
    result = ValidationResult()
    errors = result.errors

    if not 1 <= len(habit.display_name) <= MAX_LABEL_LENGTH:
        errors.append(ValidationIssue(
            "display_name", "H01",
            f"display_name must be 1-{MAX_LABEL_LENGTH} characters", habit.display_name,
        ))
    if habit.display_name in context.existing_display_names:
        errors.append(ValidationIssue(
            "display_name", "H_UNIQUE_NAME",
            "A habit with this display name already exists", habit.display_name,
        ))

    if isinstance(habit.sort_order, bool) or not isinstance(habit.sort_order, int) \
            or habit.sort_order < 1:
        errors.append(ValidationIssue(
            "sort_order", "H02", "sort_order must be a positive integer", habit.sort_order,
        ))

    if habit.pool == HabitPool.good:
        if habit.category is None:
            errors.append(ValidationIssue(
                "category", "H03", "Good habits must have a category", habit.category,
            ))
        if not (math.isfinite(habit.points) and float(habit.points).is_integer()
                and habit.points >= 1):
            errors.append(ValidationIssue(
                "points", "H04", "Good habit points must be at least 1", habit.points,
            ))
        if habit.penalty != 0:
            errors.append(ValidationIssue(
                "penalty", "H05", "Good habits cannot have a penalty", habit.penalty,
            ))
    else:
        if habit.category is not None:
            errors.append(ValidationIssue(
                "category", "H06", "Vices cannot have a category", habit.category,
            ))
        if habit.points != 0:
            errors.append(ValidationIssue(
                "points", "H07", "Vices cannot contribute positive points", habit.points,
            ))
        if habit.penalty_mode == PenaltyMode.tiered:
            if habit.penalty != 0:
                errors.append(ValidationIssue(
                    "penalty", "H09",
                    "Tiered vices use the scoring config phone penalties; penalty must be 0",
                    habit.penalty,
                ))
            if context.tiered_vice_count > 0:
                errors.append(ValidationIssue(
                    "penalty_mode", "H18",
                    "Only one tiered vice is supported", habit.penalty_mode,
                ))
        elif not 0.0 <= habit.penalty <= 1.0:
            errors.append(ValidationIssue(
                "penalty", "H08", "penalty must be between 0 and 1.0", habit.penalty,
            ))

    if habit.input_type == InputType.checkbox and habit.options_json is not None:
        errors.append(ValidationIssue(
            "options_json", "H10", "Checkbox habits cannot have options_json",
            habit.options_json,
        ))
    if habit.input_type == InputType.dropdown:
        _validate_dropdown_options(habit, result)

    if not habit.is_active and habit.pool == HabitPool.good \
            and context.active_good_habit_count < 1:
        errors.append(ValidationIssue(
            "is_active", "H19", "Cannot retire the last active good habit", habit.is_active,
        ))

    return result
