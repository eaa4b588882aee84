"""
Scoring service — the persistence side of the scoring engine.

Save flow (one transaction)
---------------------------
  1. Resolve previous_streak for the day:
       no earlier row              → -1  (day 1)
       no row for day - 1          →  0  (gap)
       row for day - 1, NULL streak →  0
       otherwise                   → that row's streak
  2. compute_scores() for the day
  3. Upsert the day's row with all five scores (plus the raw entry values)
  4. compute_cascade() over load_subsequent_days() and write
     streak + final_score for every update after the first
  5. db.commit() once. Any failure rolls the whole save back.

Public API
----------
get_scoring_config(db)                       -> ScoringConfig
update_scoring_config(db, config)            -> ValidationResult
determine_previous_streak(db, day)           -> int
load_subsequent_days(db, day)                -> list[StoredDay]
save_day_scores(db, day, habits, vices, ...) -> SaveResult
save_day_entry(db, day, values)              -> SaveResult
get_day_scores(db, day)                      -> DailyScore
list_day_scores(db, start, end)              -> list[DailyScore]
"""
from __future__ import annotations

import json
from dataclasses import dataclass, fields
from datetime import date, timedelta
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import DayNotFoundError, InvalidDateRangeError, InvalidScoringConfigError
from app.core.logging import get_logger
from app.engine.cascade import compute_cascade, parse_day
from app.engine.config_validator import ValidationResult, validate_scoring_config
from app.engine.scoring import compute_scores, sanitize_phone_minutes
from app.engine.types import (
    CascadeUpdate,
    HabitValue,
    ScoringConfig,
    ScoringInput,
    ScoringOutput,
    StoredDay,
    ViceValue,
)
from app.models.daily_score import DailyScore
from app.models.scoring_config import SINGLETON_ID, ScoringConfigRow
from app.services.habit_service import build_scoring_inputs, load_active_habit_configs

logger = get_logger(__name__)

_CONFIG_FIELDS = tuple(f.name for f in fields(ScoringConfig))


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class SaveResult:
    row: DailyScore
    scores: ScoringOutput
    previous_streak: int
    updates: list[CascadeUpdate]    # first element is the saved day

    @property
    def cascaded(self) -> list[CascadeUpdate]:
        """Later days rewritten by the cascade."""
        return self.updates[1:]


# ---------------------------------------------------------------------------
# Scoring config (singleton row)
# ---------------------------------------------------------------------------

def get_scoring_config(db: Session) -> ScoringConfig:
    row = db.get(ScoringConfigRow, SINGLETON_ID)
    if row is None:
        return ScoringConfig(**settings.scoring_defaults)
    return ScoringConfig(**{name: getattr(row, name) for name in _CONFIG_FIELDS})


def update_scoring_config(db: Session, config: ScoringConfig) -> ValidationResult:
    """Validate and persist. Raises InvalidScoringConfigError on any error."""
    result = validate_scoring_config(config)
    if not result.valid:
        raise InvalidScoringConfigError([e.to_dict() for e in result.errors])

    row = db.get(ScoringConfigRow, SINGLETON_ID)
    if row is None:
        row = ScoringConfigRow(id=SINGLETON_ID)
        db.add(row)
    for name in _CONFIG_FIELDS:
        setattr(row, name, getattr(config, name))
    db.commit()

    for w in result.warnings:
        logger.warning("Scoring config saved with warning %s: %s", w.rule, w.message)
    return result


# ---------------------------------------------------------------------------
# Cascade inputs
# ---------------------------------------------------------------------------

def determine_previous_streak(db: Session, day: date) -> int:
    earlier = db.query(DailyScore.id).filter(DailyScore.day < day).first()
    if earlier is None:
        return -1

    prev = (
        db.query(DailyScore.streak)
        .filter(DailyScore.day == day - timedelta(days=1))
        .first()
    )
    if prev is None or prev.streak is None:
        return 0
    return prev.streak


def load_subsequent_days(db: Session, day: date) -> list[StoredDay]:
    """Stored (date, base_score, streak, final_score) of fully scored days after `day`."""
    rows = (
        db.query(DailyScore.day, DailyScore.base_score, DailyScore.streak, DailyScore.final_score)
        .filter(
            DailyScore.day > day,
            DailyScore.base_score.isnot(None),
            DailyScore.streak.isnot(None),
            DailyScore.final_score.isnot(None),
        )
        .order_by(DailyScore.day.asc())
        .all()
    )
    return [StoredDay(r.day.isoformat(), r.base_score, r.streak, r.final_score) for r in rows]


def _apply_cascade(db: Session, updates: Sequence[CascadeUpdate]) -> None:
    """Write streak + final_score of every cascaded (non-edited) day."""
    cascaded = {parse_day(u.date): u for u in updates if not u.is_edited_day}
    if not cascaded:
        return
    for row in db.query(DailyScore).filter(DailyScore.day.in_(list(cascaded))).all():
        update = cascaded[row.day]
        row.streak = update.streak
        row.final_score = update.final_score


# ---------------------------------------------------------------------------
# Save (score + cascade, atomic)
# ---------------------------------------------------------------------------

def save_day_scores(
    db: Session,
    day: date,
    habits: Sequence[HabitValue],
    vices: Sequence[ViceValue],
    phone_minutes: float = 0.0,
    config: Optional[ScoringConfig] = None,
    entry_values: Optional[Mapping[str, Any]] = None,
) -> SaveResult:
    """
    Score `day`, upsert its row and rewrite every later day the cascade
    reaches. All writes commit together or not at all.
    """
    try:
        config = config or get_scoring_config(db)
        previous_streak = determine_previous_streak(db, day)
        scores = compute_scores(ScoringInput(
            habit_values=list(habits),
            vice_values=list(vices),
            phone_minutes=phone_minutes,
            previous_streak=previous_streak,
            config=config,
        ))

        row = db.query(DailyScore).filter(DailyScore.day == day).first()
        if row is None:
            row = DailyScore(day=day)
            db.add(row)
        row.phone_minutes = sanitize_phone_minutes(phone_minutes)
        row.positive_score = scores.positive_score
        row.vice_penalty = scores.vice_penalty
        row.base_score = scores.base_score
        row.streak = scores.streak
        row.final_score = scores.final_score
        if entry_values is not None:
            row.entry_values = json.dumps(dict(entry_values), sort_keys=True)

        updates = compute_cascade(
            day.isoformat(), scores, load_subsequent_days(db, day), config
        )
        _apply_cascade(db, updates)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(row)
    logger.info(
        "Saved scores for %s (streak=%d, final=%.4f); cascade rewrote %d later day(s)",
        day, scores.streak, scores.final_score, len(updates) - 1,
    )
    return SaveResult(
        row=row,
        scores=scores,
        previous_streak=previous_streak,
        updates=updates,
    )


def save_day_entry(db: Session, day: date, values: Mapping[str, Any]) -> SaveResult:
    """
    Save a day from raw entry values keyed by habit name. The values are scored
    against the active habit definitions and stored alongside the scores.
    """
    inputs = build_scoring_inputs(values, load_active_habit_configs(db))
    return save_day_scores(
        db,
        day,
        inputs.habits,
        inputs.vices,
        phone_minutes=inputs.phone_minutes,
        entry_values=values,
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def get_day_scores(db: Session, day: date) -> DailyScore:
    row = db.query(DailyScore).filter(DailyScore.day == day).first()
    if row is None:
        raise DayNotFoundError(day)
    return row


def list_day_scores(db: Session, start: date, end: date) -> list[DailyScore]:
    """Rows with start <= day <= end, oldest first."""
    if start > end:
        raise InvalidDateRangeError(start, end)
    return (
        db.query(DailyScore)
        .filter(DailyScore.day >= start, DailyScore.day <= end)
        .order_by(DailyScore.day.asc())
        .all()
    )
