"""
Scoring engine — one day's habit/vice inputs to a bounded composite score.

Pipeline (each step depends only on config and the previous step)
------------------------------------------------------------------
  1. max_weighted   = Σ points × category multiplier
  2. positive_score = min(1, Σ value × multiplier / (max_weighted × target_fraction))
  3. vice_penalty   = min(vice_cap, vice sum + highest qualifying phone tier)
  4. base_score     = positive_score × (1 − vice_penalty)
  5. streak         = previous_streak + 1 if base_score ≥ threshold else 0
  6. final_score    = min(1, base_score × (1 + min(streak × bonus, max_bonus)))

Total for any input: no habits or a zero target give positive_score 0, and
NaN / negative phone minutes count as 0. Operand order is fixed so that a
recomputation reproduces stored floats bit for bit.

Zero I/O, stdlib-only.
"""
from __future__ import annotations

import math
from typing import Iterable

from app.engine.types import (
    HabitCategory,
    HabitValue,
    PenaltyMode,
    ScoringConfig,
    ScoringInput,
    ScoringOutput,
    ViceValue,
)


# ---------------------------------------------------------------------------
# Category → multiplier
# ---------------------------------------------------------------------------

_MULTIPLIER_FIELDS = {
    HabitCategory.productivity: "multiplier_productivity",
    HabitCategory.health: "multiplier_health",
    HabitCategory.growth: "multiplier_growth",
}


def category_multiplier(category: HabitCategory, config: ScoringConfig) -> float:
    """Raises ValueError only for a value outside HabitCategory."""
    return getattr(config, _MULTIPLIER_FIELDS[HabitCategory(category)])


# ---------------------------------------------------------------------------
# Positive side
# ---------------------------------------------------------------------------

def compute_max_weighted(habits: Iterable[HabitValue], config: ScoringConfig) -> float:
    """Theoretical ceiling used as the scoring denominator."""
    total = 0.0
    for h in habits:
        total += h.points * category_multiplier(h.category, config)
    return total


def compute_positive_score(
    habits: Iterable[HabitValue],
    max_weighted: float,
    target_fraction: float,
    config: ScoringConfig,
) -> float:
    if max_weighted == 0.0:
        return 0.0
    target = max_weighted * target_fraction
    if target == 0.0:
        return 0.0
    weighted_sum = 0.0
    for h in habits:
        weighted_sum += h.value * category_multiplier(h.category, config)
    return min(1.0, weighted_sum / target)


# ---------------------------------------------------------------------------
# Vice side
# ---------------------------------------------------------------------------

def sanitize_phone_minutes(phone_minutes: float) -> float:
    """NaN and negative minutes come from untrusted input; both count as 0."""
    if math.isnan(phone_minutes) or phone_minutes < 0.0:
        return 0.0
    return phone_minutes


def phone_tier_penalty(phone_minutes: float, config: ScoringConfig) -> float:
    """Tiers are mutually exclusive: only the highest qualifying one applies."""
    if phone_minutes >= config.phone_t3_min:
        return config.phone_t3_penalty
    if phone_minutes >= config.phone_t2_min:
        return config.phone_t2_penalty
    if phone_minutes >= config.phone_t1_min:
        return config.phone_t1_penalty
    return 0.0


def compute_vice_penalty(
    vices: Iterable[ViceValue],
    phone_minutes: float,
    config: ScoringConfig,
) -> float:
    safe_phone = sanitize_phone_minutes(phone_minutes)

    total = 0.0
    for v in vices:
        if v.penalty_mode == PenaltyMode.flat:
            if v.triggered:
                total += v.penalty_value
        elif v.penalty_mode == PenaltyMode.per_instance:
            total += float(v.count or 0) * v.penalty_value
        # tiered: phone use is resolved from phone_minutes below

    total += phone_tier_penalty(safe_phone, config)
    return min(config.vice_cap, total)


# ---------------------------------------------------------------------------
# Combination, streak, bonus
# ---------------------------------------------------------------------------

def compute_base_score(positive_score: float, vice_penalty: float) -> float:
    return positive_score * (1.0 - vice_penalty)


def compute_streak(base_score: float, previous_streak: int, streak_threshold: float) -> int:
    """
    Day 1 convention: previous_streak = -1 → a qualifying day yields 0.
    Gap convention:   previous_streak = 0  → a qualifying day yields 1.
    """
    if base_score >= streak_threshold:
        return previous_streak + 1
    return 0


def compute_final_score(
    base_score: float,
    streak: int,
    streak_bonus_per_day: float,
    max_streak_bonus: float,
) -> float:
    streak_multiplier = min(float(streak) * streak_bonus_per_day, max_streak_bonus)
    return min(1.0, base_score * (1.0 + streak_multiplier))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_scores(scoring_input: ScoringInput) -> ScoringOutput:
    """
    Run the full pipeline for one day. Deterministic and total: HabitValue and
    ViceValue already hold valid enums, so no input data makes it raise.
    """
    config = scoring_input.config
    habits = scoring_input.habit_values

    max_weighted = compute_max_weighted(habits, config)
    positive_score = compute_positive_score(
        habits, max_weighted, config.target_fraction, config
    )
    vice_penalty = compute_vice_penalty(
        scoring_input.vice_values, scoring_input.phone_minutes, config
    )
    base_score = compute_base_score(positive_score, vice_penalty)
    streak = compute_streak(base_score, scoring_input.previous_streak, config.streak_threshold)
    final_score = compute_final_score(
        base_score, streak, config.streak_bonus_per_day, config.max_streak_bonus
    )

    return ScoringOutput(
        positive_score=positive_score,
        vice_penalty=vice_penalty,
        base_score=base_score,
        streak=streak,
        final_score=final_score,
    )
