"""
Habits router — habit and vice definitions.

GET    /habits               — active definitions (?include_inactive=true for all)
GET    /habits/{name}        — one definition
POST   /habits               — create a definition
PUT    /habits/{name}        — replace a definition (name is fixed)
DELETE /habits/{name}        — retire a definition; it is kept, not deleted
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.schemas.habits import (
    HabitConfigCreate,
    HabitConfigResponse,
    HabitConfigUpdate,
    HabitListResponse,
    habit_to_response,
)
from app.services.habit_service import (
    create_habit,
    get_habit,
    list_habits,
    retire_habit,
    update_habit,
)

router = APIRouter(prefix="/habits", tags=["habits"])


@router.get("", response_model=HabitListResponse, summary="List habit definitions")
def list_habit_configs(
    include_inactive: bool = Query(False, description="Include retired definitions."),
    db: Session = Depends(get_db),
):
    rows = list_habits(db, include_inactive=include_inactive)
    return HabitListResponse(total=len(rows), items=[habit_to_response(r) for r in rows])


@router.get(
    "/{name}",
    response_model=HabitConfigResponse,
    summary="One habit definition",
    responses={404: {"description": "HABIT_NOT_FOUND"}},
)
def read_habit_config(name: str, db: Session = Depends(get_db)):
    return habit_to_response(get_habit(db, name))


@router.post(
    "",
    response_model=HabitConfigResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a habit definition",
    responses={
        409: {"description": "HABIT_EXISTS"},
        422: {"description": "INVALID_HABIT_CONFIG"},
    },
)
def create_habit_config(body: HabitConfigCreate, db: Session = Depends(get_db)):
    """
    Good dropdown habits take their points from their best option. Days that
    are already saved keep their scores.
    """
    return habit_to_response(create_habit(db, body.name, body.to_engine()))


@router.put(
    "/{name}",
    response_model=HabitConfigResponse,
    summary="Replace a habit definition",
    responses={
        404: {"description": "HABIT_NOT_FOUND"},
        422: {"description": "INVALID_HABIT_CONFIG"},
    },
)
def update_habit_config(name: str, body: HabitConfigUpdate, db: Session = Depends(get_db)):
    return habit_to_response(update_habit(db, name, body.to_engine()))


@router.delete(
    "/{name}",
    response_model=HabitConfigResponse,
    summary="Retire a habit definition",
    responses={
        404: {"description": "HABIT_NOT_FOUND"},
        422: {"description": "INVALID_HABIT_CONFIG (last active good habit)"},
    },
)
def retire_habit_config(name: str, db: Session = Depends(get_db)):
    return habit_to_response(retire_habit(db, name))
