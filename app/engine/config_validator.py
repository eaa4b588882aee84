"""
Scoring config validation — hard-blocks an invalid config before it is saved.

The scoring engine itself accepts any config; this check runs only on the
config write path (PUT /scoring/config).

Errors
------
  R03–R05  category multipliers in (0, 10]
  R06      target_fraction in (0, 1]
  R07      vice_cap in [0, 1]
  R08      streak_threshold in [0, 1]
  R09      streak_bonus_per_day in [0, 0.1]
  R10      max_streak_bonus in [0, 0.5]
  R11–R13  phone tier minutes: whole numbers in [0, 1440]
  R14–R16  phone tier penalties in [0, 1]
  R26–R27  phone tier minutes strictly ascending
  R28–R29  phone tier penalties strictly ascending

Warnings (never block)
----------------------
  W01  max_streak_bonus < streak_bonus_per_day (cap is hit on day 1)
  W02  a phone tier penalty ≥ vice_cap (phone use alone maxes the cap)
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any

from app.engine.types import ScoringConfig

MINUTES_PER_DAY = 1440


@dataclass
class ValidationIssue:
    field: str
    rule: str
    message: str
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationResult:
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Range helpers
# ---------------------------------------------------------------------------

def _check_range(
    result: ValidationResult,
    name: str,
    rule: str,
    value: float,
    low: float,
    high: float,
    low_exclusive: bool,
    message: str,
) -> None:
    above_low = value > low if low_exclusive else value >= low
    # NaN fails both comparisons and is reported.
    if not above_low or not value <= high:
        result.errors.append(ValidationIssue(name, rule, message, value))


def _check_whole_minutes(
    result: ValidationResult, name: str, rule: str, value: float, message: str
) -> None:
    is_whole = math.isfinite(value) and float(value).is_integer()
    if not is_whole or value < 0 or value > MINUTES_PER_DAY:
        result.errors.append(ValidationIssue(name, rule, message, value))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_scoring_config(config: ScoringConfig) -> ValidationResult:
    result = ValidationResult()

    for name, rule in (
        ("multiplier_productivity", "R03"),
        ("multiplier_health", "R04"),
        ("multiplier_growth", "R05"),
    ):
        _check_range(
            result, name, rule, getattr(config, name), 0.0, 10.0, True,
            f"{name} must be between 0 (exclusive) and 10.0 (inclusive)",
        )

    _check_range(
        result, "target_fraction", "R06", config.target_fraction, 0.0, 1.0, True,
        "target_fraction must be greater than 0 and at most 1.0",
    )
    _check_range(
        result, "vice_cap", "R07", config.vice_cap, 0.0, 1.0, False,
        "vice_cap must be between 0 and 1.0 inclusive",
    )
    _check_range(
        result, "streak_threshold", "R08", config.streak_threshold, 0.0, 1.0, False,
        "streak_threshold must be between 0 and 1.0 inclusive",
    )
    _check_range(
        result, "streak_bonus_per_day", "R09", config.streak_bonus_per_day, 0.0, 0.1, False,
        "streak_bonus_per_day must be between 0 and 0.1 inclusive",
    )
    _check_range(
        result, "max_streak_bonus", "R10", config.max_streak_bonus, 0.0, 0.5, False,
        "max_streak_bonus must be between 0 and 0.5 inclusive",
    )

    for tier, rule in ((1, "R11"), (2, "R12"), (3, "R13")):
        name = f"phone_t{tier}_min"
        _check_whole_minutes(
            result, name, rule, getattr(config, name),
            f"{name} must be a whole number of minutes between 0 and {MINUTES_PER_DAY}",
        )

    for tier, rule in ((1, "R14"), (2, "R15"), (3, "R16")):
        name = f"phone_t{tier}_penalty"
        _check_range(
            result, name, rule, getattr(config, name), 0.0, 1.0, False,
            f"{name} must be between 0 and 1.0 inclusive",
        )

    # Tier ordering
    if config.phone_t1_min >= config.phone_t2_min:
        result.errors.append(ValidationIssue(
            "phone_t1_min", "R26",
            "phone_t1_min must be less than phone_t2_min", config.phone_t1_min,
        ))
    if config.phone_t2_min >= config.phone_t3_min:
        result.errors.append(ValidationIssue(
            "phone_t2_min", "R27",
            "phone_t2_min must be less than phone_t3_min", config.phone_t2_min,
        ))
    if config.phone_t1_penalty >= config.phone_t2_penalty:
        result.errors.append(ValidationIssue(
            "phone_t1_penalty", "R28",
            "phone_t1_penalty must be less than phone_t2_penalty (tiers must escalate)",
            config.phone_t1_penalty,
        ))
    if config.phone_t2_penalty >= config.phone_t3_penalty:
        result.errors.append(ValidationIssue(
            "phone_t2_penalty", "R29",
            "phone_t2_penalty must be less than phone_t3_penalty (tiers must escalate)",
            config.phone_t2_penalty,
        ))

    # Warnings
    if config.max_streak_bonus < config.streak_bonus_per_day:
        result.warnings.append(ValidationIssue(
            "max_streak_bonus", "W01",
            "max_streak_bonus is less than streak_bonus_per_day; "
            "the bonus cap will be hit on day 1",
            config.max_streak_bonus,
        ))
    if config.vice_cap > 0:
        for tier in (1, 2, 3):
            name = f"phone_t{tier}_penalty"
            value = getattr(config, name)
            if value >= config.vice_cap:
                result.warnings.append(ValidationIssue(
                    name, "W02",
                    f"{name} equals or exceeds vice_cap; "
                    "phone use alone will max the cap",
                    value,
                ))

    return result
