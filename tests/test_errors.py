"""
Tests for the exception hierarchy and the JSON error envelope.
"""
from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.errors import (
    DayNotFoundError,
    HabitAlreadyExistsError,
    HabitlineException,
    HabitNotFoundError,
    InvalidDateError,
    InvalidDateRangeError,
    InvalidEntryValueError,
    InvalidHabitConfigError,
    InvalidScoringConfigError,
    habitline_exception_handler,
    unhandled_exception_handler,
)


@pytest.mark.parametrize("exc,status,code", [
    (InvalidDateError("2026-02-30"), 422, "INVALID_DATE"),
    (InvalidScoringConfigError([]), 422, "INVALID_SCORING_CONFIG"),
    (DayNotFoundError(date(2026, 2, 1)), 404, "DAY_NOT_FOUND"),
    (InvalidDateRangeError(date(2026, 2, 5), date(2026, 2, 1)), 422, "INVALID_DATE_RANGE"),
    (InvalidHabitConfigError([]), 422, "INVALID_HABIT_CONFIG"),
    (HabitNotFoundError("gym"), 404, "HABIT_NOT_FOUND"),
    (HabitAlreadyExistsError("gym"), 409, "HABIT_EXISTS"),
    (InvalidEntryValueError("gym", "yes", "expected a number or boolean"), 422, "INVALID_ENTRY_VALUE"),
])
def test_status_and_code(exc, status, code):
    assert isinstance(exc, HabitlineException)
    assert exc.http_status == status
    assert exc.code == code
    assert exc.to_dict()["code"] == code


def test_invalid_date_message_includes_reason():
    exc = InvalidDateError("garbage", reason="does not match format")
    assert exc.message == "Invalid date 'garbage': does not match format"
    assert exc.to_dict() == {
        "code": "INVALID_DATE",
        "message": "Invalid date 'garbage': does not match format",
        "details": {"value": "garbage"},
    }


def test_invalid_scoring_config_carries_errors():
    errors = [{"field": "vice_cap", "rule": "R07", "message": "bad", "value": 2.0}]
    exc = InvalidScoringConfigError(errors)
    assert exc.details == {"errors": errors}
    assert "1 error" in exc.message


def test_invalid_entry_value_names_the_habit():
    exc = InvalidEntryValueError("meal_quality", "Amazing", "not one of the habit's options")
    assert exc.to_dict() == {
        "code": "INVALID_ENTRY_VALUE",
        "message": "Invalid value for 'meal_quality': not one of the habit's options",
        "details": {"name": "meal_quality", "value": "Amazing"},
    }


def test_details_omitted_when_empty():
    assert HabitlineException("boom").to_dict() == {
        "code": "INTERNAL_ERROR",
        "message": "boom",
    }


def _app_raising(exc: Exception) -> TestClient:
    app = FastAPI()
    app.add_exception_handler(HabitlineException, habitline_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/boom")
    def boom():
        raise exc

    return TestClient(app, raise_server_exceptions=False)


def test_application_error_envelope():
    resp = _app_raising(DayNotFoundError(date(2026, 2, 1))).get("/boom")
    assert resp.status_code == 404
    assert resp.json() == {
        "code": "DAY_NOT_FOUND",
        "message": "No scores recorded for 2026-02-01.",
        "details": {"day": "2026-02-01"},
    }


def test_unexpected_error_is_hidden():
    resp = _app_raising(RuntimeError("secret")).get("/boom")
    assert resp.status_code == 500
    assert resp.json() == {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred.",
    }
