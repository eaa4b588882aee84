"""
Tests for the habit service: definition writes and raw entry values → engine inputs.
"""
from __future__ import annotations

import json

import pytest

from app.core.errors import (
    HabitAlreadyExistsError,
    HabitNotFoundError,
    InvalidEntryValueError,
    InvalidHabitConfigError,
)
from app.engine.types import (
    HabitCategory,
    HabitConfigInput,
    HabitPool,
    InputType,
    PenaltyMode,
)
from app.services.habit_service import (
    build_habit_values,
    build_scoring_inputs,
    build_vice_values,
    create_habit,
    get_habit,
    list_habits,
    load_active_habit_configs,
    phone_minutes_from_entry,
    resolve_dropdown_value,
    retire_habit,
    update_habit,
)
from factories import (
    MEAL_OPTIONS,
    SOCIAL_OPTIONS,
    make_habit,
    make_vice,
    seed_habit_configs,
    seed_habit_rows,
)

MEAL = make_habit(
    "meal_quality", input_type=InputType.dropdown, points=3.0,
    options_json=json.dumps(MEAL_OPTIONS),
)
GYM = make_habit("gym", points=3.0)
PAGES = make_habit("pages", input_type=InputType.number, points=2.0, category=HabitCategory.growth)
WEED = make_vice("weed", 0.12)
RELAPSE = make_vice("relapse", 0.25, PenaltyMode.per_instance)
PHONE = make_vice("phone_use", 0.0, PenaltyMode.tiered)
CONFIGS = [GYM, MEAL, PAGES, WEED, RELAPSE, PHONE]


def cold_shower(**overrides) -> HabitConfigInput:
    fields = dict(
        display_name="Cold Shower",
        pool=HabitPool.good,
        category=HabitCategory.health,
        input_type=InputType.checkbox,
        points=1.0,
    )
    fields.update(overrides)
    return HabitConfigInput(**fields)


# ---------------------------------------------------------------------------
# Dropdown labels
# ---------------------------------------------------------------------------

class TestResolveDropdownValue:
    @pytest.mark.parametrize("label,expected", [
        ("Poor", 0.0), ("Okay", 1.0), ("Good", 2.0), ("Great", 3.0),
    ])
    def test_meal_labels(self, label, expected):
        assert resolve_dropdown_value(label, json.dumps(MEAL_OPTIONS)) == expected

    def test_fractional_score(self):
        assert resolve_dropdown_value("Brief/Text", json.dumps(SOCIAL_OPTIONS)) == 0.5

    def test_unknown_label(self):
        assert resolve_dropdown_value("Amazing", json.dumps(MEAL_OPTIONS)) is None

    def test_unreadable_options(self):
        assert resolve_dropdown_value("Good", "not json") is None
        assert resolve_dropdown_value("Good", None) is None


# ---------------------------------------------------------------------------
# Good habits
# ---------------------------------------------------------------------------

class TestBuildHabitValues:
    def _by_name(self, values):
        return {h.name: h for h in build_habit_values(values, CONFIGS)}

    def test_missing_entries_count_as_zero(self):
        habits = self._by_name({})
        assert [h.value for h in habits.values()] == [0.0, 0.0, 0.0]
        assert habits["gym"].points == 3.0
        assert habits["gym"].category is HabitCategory.health

    @pytest.mark.parametrize("raw,expected", [(True, 3.0), (False, 0.0), (1, 3.0), (0, 0.0), (0.5, 0.0)])
    def test_checkbox(self, raw, expected):
        assert self._by_name({"gym": raw})["gym"].value == expected

    def test_dropdown_label_is_scored(self):
        assert self._by_name({"meal_quality": "Good"})["meal_quality"].value == 2.0

    def test_number_is_capped_at_points(self):
        assert self._by_name({"pages": 1.5})["pages"].value == 1.5
        assert self._by_name({"pages": 40})["pages"].value == 2.0

    def test_vices_are_not_included(self):
        assert set(self._by_name({})) == {"gym", "meal_quality", "pages"}

    @pytest.mark.parametrize("name,raw", [
        ("gym", "yes"),
        ("gym", -1),
        ("meal_quality", 2),
        ("meal_quality", "Amazing"),
        ("pages", "ten"),
        ("pages", float("nan")),
    ])
    def test_wrong_value_rejected(self, name, raw):
        with pytest.raises(InvalidEntryValueError) as exc_info:
            build_habit_values({name: raw}, CONFIGS)
        assert exc_info.value.details["name"] == name


# ---------------------------------------------------------------------------
# Vices and phone minutes
# ---------------------------------------------------------------------------

class TestBuildViceValues:
    def _by_name(self, values):
        return {v.name: v for v in build_vice_values(values, CONFIGS)}

    def test_missing_entries_are_off(self):
        vices = self._by_name({})
        assert not any(v.triggered for v in vices.values())
        assert vices["relapse"].count == 0

    def test_flat_checkbox(self):
        weed = self._by_name({"weed": True})["weed"]
        assert weed.triggered
        assert weed.penalty_value == 0.12
        assert weed.penalty_mode is PenaltyMode.flat

    def test_per_instance_count(self):
        relapse = self._by_name({"relapse": 2})["relapse"]
        assert relapse.triggered
        assert relapse.count == 2
        assert relapse.penalty_mode is PenaltyMode.per_instance

    def test_tiered_vice_carries_no_penalty(self):
        phone = self._by_name({"phone_use": 400})["phone_use"]
        assert not phone.triggered
        assert phone.penalty_value == 0.0

    @pytest.mark.parametrize("raw", [-1, 1.5, "two"])
    def test_bad_count_rejected(self, raw):
        with pytest.raises(InvalidEntryValueError):
            build_vice_values({"relapse": raw}, CONFIGS)

    def test_phone_minutes_from_tiered_vice(self):
        assert phone_minutes_from_entry({"phone_use": 95}, CONFIGS) == 95.0
        assert phone_minutes_from_entry({}, CONFIGS) == 0.0

    def test_phone_minutes_without_tiered_vice(self):
        assert phone_minutes_from_entry({"phone_use": 95}, [GYM, WEED]) == 0.0


class TestBuildScoringInputs:
    def test_full_entry(self):
        inputs = build_scoring_inputs(
            {"gym": True, "meal_quality": "Great", "relapse": 1, "phone_use": 200},
            CONFIGS,
        )
        assert [h.value for h in inputs.habits] == [3.0, 3.0, 0.0]
        assert [v.name for v in inputs.vices if v.triggered] == ["relapse"]
        assert inputs.phone_minutes == 200.0

    def test_unknown_name_rejected(self):
        with pytest.raises(InvalidEntryValueError) as exc_info:
            build_scoring_inputs({"gym": True, "juggling": True}, CONFIGS)
        assert exc_info.value.details == {"name": "juggling", "value": True}

    def test_seed_rows_cover_every_seed_name(self):
        rows = seed_habit_rows()
        inputs = build_scoring_inputs({}, rows)
        assert len(inputs.habits) == 13
        assert len(inputs.vices) == 9


# ---------------------------------------------------------------------------
# Definition writes
# ---------------------------------------------------------------------------

class TestHabitWrites:
    @pytest.fixture(autouse=True)
    def _habits(self, db):
        seed_habit_configs(db)

    def test_list_orders_good_before_vices(self, db):
        rows = list_habits(db)
        assert len(rows) == 22
        assert rows[0].name == "schoolwork"
        assert rows[-1].name == "phone_use"

    def test_create(self, db):
        row = create_habit(db, "cold_shower", cold_shower())
        assert row.id is not None
        assert row.is_active
        assert get_habit(db, "cold_shower").display_name == "Cold Shower"

    def test_create_duplicate_name(self, db):
        with pytest.raises(HabitAlreadyExistsError):
            create_habit(db, "gym", cold_shower())

    def test_create_duplicate_display_name(self, db):
        with pytest.raises(InvalidHabitConfigError) as exc_info:
            create_habit(db, "gym_again", cold_shower(display_name="Gym"))
        assert [e["rule"] for e in exc_info.value.details["errors"]] == ["H_UNIQUE_NAME"]

    def test_second_tiered_vice_rejected(self, db):
        screen = cold_shower(
            display_name="Screen Time", pool=HabitPool.vice, category=None,
            input_type=InputType.number, points=0.0, penalty_mode=PenaltyMode.tiered,
        )
        with pytest.raises(InvalidHabitConfigError) as exc_info:
            create_habit(db, "screen_time", screen)
        assert [e["rule"] for e in exc_info.value.details["errors"]] == ["H18"]

    def test_dropdown_points_synced_before_validation(self, db):
        focus = cold_shower(
            display_name="Focus", input_type=InputType.dropdown, points=0.0,
            options_json=json.dumps({"None": 0, "Some": 2, "Deep": 4}),
        )
        assert create_habit(db, "focus", focus).points == 4.0

    def test_update_keeps_own_display_name(self, db):
        row = update_habit(db, "gym", cold_shower(display_name="Gym", points=2.0))
        assert row.points == 2.0

    def test_update_missing(self, db):
        with pytest.raises(HabitNotFoundError):
            update_habit(db, "juggling", cold_shower())

    def test_retire(self, db):
        row = retire_habit(db, "gym")
        assert not row.is_active
        assert row.retired_at is not None
        assert "gym" not in {r.name for r in load_active_habit_configs(db)}
        assert "gym" in {r.name for r in list_habits(db, include_inactive=True)}

    def test_reactivate_clears_retired_at(self, db):
        retire_habit(db, "read")
        row = update_habit(db, "read", cold_shower(display_name="Read", category=HabitCategory.growth))
        assert row.is_active
        assert row.retired_at is None

    def test_last_good_habit_cannot_retire(self, db):
        names = [r.name for r in list_habits(db) if r.pool == HabitPool.good]
        for name in names[:-1]:
            retire_habit(db, name)
        with pytest.raises(InvalidHabitConfigError) as exc_info:
            retire_habit(db, names[-1])
        assert [e["rule"] for e in exc_info.value.details["errors"]] == ["H19"]
        assert get_habit(db, names[-1]).is_active
