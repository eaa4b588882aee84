"""
Cascade propagator — forward recomputation after one day's scores change.

Day N+1's streak depends only on day N's *streak* (never on its final score),
so the walk recomputes streak / final_score day by day and stops at the first
day whose recomputed values equal the stored ones: from there on every later
day would reproduce its stored values too.

Gap rule: when the calendar day before a row is not the last processed day,
that row restarts from previous_streak = 0.

Convergence uses exact float equality. The formulas in app.engine.scoring
are the same ones that produced the stored values, so an unchanged day
reproduces them bit for bit.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterable, Union

from app.core.errors import InvalidDateError
from app.core.logging import get_logger
from app.engine.scoring import compute_final_score, compute_streak
from app.engine.types import CascadeUpdate, ScoringConfig, ScoringOutput, StoredDay

logger = get_logger(__name__)

DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

DateLike = Union[str, date]


# ---------------------------------------------------------------------------
# Date helpers
# ---------------------------------------------------------------------------

def parse_day(value: DateLike) -> date:
    """Parse a zero-padded YYYY-MM-DD string (dates pass through). Raises InvalidDateError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise InvalidDateError(value, reason="expected YYYY-MM-DD")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise InvalidDateError(value, reason=str(exc)) from exc


def previous_calendar_day(value: DateLike) -> date:
    day = parse_day(value)
    try:
        return day - timedelta(days=1)
    except OverflowError as exc:
        raise InvalidDateError(value, reason="no calendar day before it") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_cascade(
    edited_date: DateLike,
    edited_scores: ScoringOutput,
    subsequent_days: Iterable[StoredDay | tuple],
    config: ScoringConfig,
) -> list[CascadeUpdate]:
    """
    Return the updates produced by editing `edited_date`.

    `subsequent_days` holds the STORED (date, base_score, streak, final_score)
    of every day after the edited one, ascending by date. The first returned
    update is the edited day with all five scores; the rest carry only
    streak + final_score for days whose values actually change.

    Raises InvalidDateError if any date cannot be parsed; the caller must then
    discard the whole result rather than apply part of it.
    """
    edited_day = parse_day(edited_date)
    updates: list[CascadeUpdate] = [
        CascadeUpdate(
            date=edited_day.isoformat(),
            streak=edited_scores.streak,
            final_score=edited_scores.final_score,
            positive_score=edited_scores.positive_score,
            vice_penalty=edited_scores.vice_penalty,
            base_score=edited_scores.base_score,
        )
    ]

    last_processed = edited_day
    last_streak = edited_scores.streak

    for raw in subsequent_days:
        stored = StoredDay(*raw)
        day = parse_day(stored.date)

        if previous_calendar_day(day) == last_processed:
            prev_streak = last_streak
        else:
            prev_streak = 0  # gap

        new_streak = compute_streak(stored.base_score, prev_streak, config.streak_threshold)
        new_final = compute_final_score(
            stored.base_score,
            new_streak,
            config.streak_bonus_per_day,
            config.max_streak_bonus,
        )

        if new_streak == stored.streak and new_final == stored.final_score:
            logger.debug("Cascade from %s converged at %s", edited_day, day)
            break

        logger.debug(
            "Cascade %s: streak %s -> %s, final %s -> %s",
            day, stored.streak, new_streak, stored.final_score, new_final,
        )
        updates.append(CascadeUpdate(
            date=day.isoformat(),
            streak=new_streak,
            final_score=new_final,
        ))
        last_processed = day
        last_streak = new_streak

    return updates
