"""
Custom exception hierarchy for Habitline.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from app.core.logging import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class HabitlineException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidDateError(HabitlineException):
    """A date string could not be parsed as a YYYY-MM-DD calendar date."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_DATE"

    def __init__(self, value: Any, reason: str | None = None):
        message = f"Invalid date '{value}'."
        if reason:
            message = f"Invalid date '{value}': {reason}"
        super().__init__(message=message, details={"value": str(value)})


class InvalidScoringConfigError(HabitlineException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_SCORING_CONFIG"

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__(
            message=f"Scoring config failed validation with {len(errors)} error(s).",
            details={"errors": errors},
        )


class InvalidHabitConfigError(HabitlineException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_HABIT_CONFIG"

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__(
            message=f"Habit definition failed validation with {len(errors)} error(s).",
            details={"errors": errors},
        )


class HabitNotFoundError(HabitlineException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "HABIT_NOT_FOUND"

    def __init__(self, name: str):
        super().__init__(
            message=f"No habit named '{name}'.",
            details={"name": name},
        )


class HabitAlreadyExistsError(HabitlineException):
    http_status = status.HTTP_409_CONFLICT
    code = "HABIT_EXISTS"

    def __init__(self, name: str):
        super().__init__(
            message=f"A habit named '{name}' already exists.",
            details={"name": name},
        )


class InvalidEntryValueError(HabitlineException):
    """A raw entry value does not fit the active habit it is given for."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_ENTRY_VALUE"

    def __init__(self, name: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid value for '{name}': {reason}",
            details={"name": name, "value": value},
        )


class DayNotFoundError(HabitlineException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "DAY_NOT_FOUND"

    def __init__(self, day: date):
        super().__init__(
            message=f"No scores recorded for {day}.",
            details={"day": str(day)},
        )


class InvalidDateRangeError(HabitlineException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_DATE_RANGE"

    def __init__(self, start: date, end: date):
        super().__init__(
            message=f"Start date {start} is after end date {end}.",
            details={"start": str(start), "end": str(end)},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def habitline_exception_handler(request: Request, exc: HabitlineException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
