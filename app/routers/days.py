"""
Days router — persisted day scores.

PUT /days/{day}          — score a day's entry values, store them and cascade forward
GET /days/{day}          — stored scores for one day
GET /days?start=&end=    — stored scores in a date range (oldest first)
"""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.schemas.scoring import (
    DailyScoreListResponse,
    DailyScoreResponse,
    SaveDayRequest,
    SaveDayResponse,
    cascade_update_to_response,
)
from app.services.scoring_service import get_day_scores, list_day_scores, save_day_entry

router = APIRouter(prefix="/days", tags=["days"])


@router.put(
    "/{day}",
    response_model=SaveDayResponse,
    summary="Save a day's entry values and recompute its scores",
    responses={422: {"description": "INVALID_ENTRY_VALUE"}},
)
def save_day(day: date, body: SaveDayRequest, db: Session = Depends(get_db)):
    """
    Scores the raw values against the active habit definitions and the stored
    scoring config, upserts the day and rewrites streak / final_score of later
    days until the chain converges. The whole save is one transaction.
    """
    result = save_day_entry(db, day, body.values)
    return SaveDayResponse(
        day=DailyScoreResponse.model_validate(result.row),
        previous_streak=result.previous_streak,
        cascaded=[cascade_update_to_response(u) for u in result.cascaded],
    )


@router.get(
    "/{day}",
    response_model=DailyScoreResponse,
    summary="Stored scores for one day",
    responses={404: {"description": "DAY_NOT_FOUND"}},
)
def read_day(day: date, db: Session = Depends(get_db)):
    return DailyScoreResponse.model_validate(get_day_scores(db, day))


@router.get(
    "",
    response_model=DailyScoreListResponse,
    summary="Stored scores in a date range",
)
def list_days(
    start: date = Query(description="First day (inclusive).", examples=["2026-02-01"]),
    end: date = Query(description="Last day (inclusive).", examples=["2026-02-28"]),
    db: Session = Depends(get_db),
):
    rows = list_day_scores(db, start, end)
    return DailyScoreListResponse(
        total=len(rows),
        items=[DailyScoreResponse.model_validate(r) for r in rows],
    )
