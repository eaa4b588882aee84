"""
Scoring router — stateless engine calls and the scoring config.

POST /scoring/compute          — score one day from raw inputs
POST /scoring/cascade          — forward cascade over caller-supplied stored days
GET  /scoring/config           — active scoring config
PUT  /scoring/config           — validate + replace the scoring config
POST /scoring/config/validate  — validate without saving
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.engine.cascade import compute_cascade
from app.engine.config_validator import ValidationResult, validate_scoring_config
from app.engine.scoring import compute_scores
from app.engine.types import ScoringInput
from app.schemas.scoring import (
    CascadeRequest,
    CascadeResponse,
    ComputeScoresRequest,
    ConfigValidationResponse,
    ScoringConfigSchema,
    ScoringOutputResponse,
    ValidationIssueResponse,
    cascade_update_to_response,
)
from app.services.scoring_service import get_scoring_config, update_scoring_config

router = APIRouter(prefix="/scoring", tags=["scoring"])


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _validation_to_response(result: ValidationResult) -> ConfigValidationResponse:
    return ConfigValidationResponse(
        valid=result.valid,
        errors=[ValidationIssueResponse(**e.to_dict()) for e in result.errors],
        warnings=[ValidationIssueResponse(**w.to_dict()) for w in result.warnings],
    )


# ---------------------------------------------------------------------------
# POST /scoring/compute
# ---------------------------------------------------------------------------

@router.post(
    "/compute",
    response_model=ScoringOutputResponse,
    summary="Compute one day's scores",
)
def compute_day_scores(body: ComputeScoresRequest, db: Session = Depends(get_db)):
    """
    Pure computation: nothing is stored. When `config` is omitted the stored
    scoring config is used.
    """
    config = body.config.to_engine() if body.config else get_scoring_config(db)
    result = compute_scores(ScoringInput(
        habit_values=[h.to_engine() for h in body.habits],
        vice_values=[v.to_engine() for v in body.vices],
        phone_minutes=body.phone_minutes,
        previous_streak=body.previous_streak,
        config=config,
    ))
    return ScoringOutputResponse.model_validate(result)


# ---------------------------------------------------------------------------
# POST /scoring/cascade
# ---------------------------------------------------------------------------

@router.post(
    "/cascade",
    response_model=CascadeResponse,
    summary="Propagate an edited day through later stored days",
    responses={
        422: {"description": "INVALID_DATE when any date cannot be parsed."},
    },
)
def cascade(body: CascadeRequest, db: Session = Depends(get_db)):
    """
    Returns the edited day first (all five scores) followed by every later day
    whose streak / final_score changes. The walk stops at the first day whose
    recomputed values equal its stored ones.
    """
    config = body.config.to_engine() if body.config else get_scoring_config(db)
    updates = compute_cascade(
        body.edited_date,
        body.edited_scores.to_engine(),
        [d.to_engine() for d in body.subsequent_days],
        config,
    )
    return CascadeResponse(
        total=len(updates),
        updates=[cascade_update_to_response(u) for u in updates],
    )


# ---------------------------------------------------------------------------
# Scoring config
# ---------------------------------------------------------------------------

@router.get("/config", response_model=ScoringConfigSchema, summary="Active scoring config")
def read_config(db: Session = Depends(get_db)):
    return ScoringConfigSchema.model_validate(get_scoring_config(db))


@router.put(
    "/config",
    response_model=ConfigValidationResponse,
    summary="Replace the scoring config",
    responses={
        422: {"description": "INVALID_SCORING_CONFIG with the failed rules."},
    },
)
def replace_config(body: ScoringConfigSchema, db: Session = Depends(get_db)):
    """
    Saves only when every rule passes. Warnings are returned but never block.
    Already-stored day scores are not recomputed.
    """
    return _validation_to_response(update_scoring_config(db, body.to_engine()))


@router.post(
    "/config/validate",
    response_model=ConfigValidationResponse,
    summary="Validate a scoring config without saving it",
)
def check_config(body: ScoringConfigSchema):
    return _validation_to_response(validate_scoring_config(body.to_engine()))
