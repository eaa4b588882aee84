"""
Tests for scoring config validation (rules R03–R16, R26–R29, W01–W02).
"""
import math

import pytest

from app.engine.config_validator import validate_scoring_config
from factories import default_config


def _rules(issues) -> set[str]:
    return {i.rule for i in issues}


class TestDefaults:
    def test_default_config_is_valid(self):
        result = validate_scoring_config(default_config())
        assert result.valid
        assert result.errors == []
        assert result.warnings == []


class TestRanges:
    @pytest.mark.parametrize("field,rule", [
        ("multiplier_productivity", "R03"),
        ("multiplier_health", "R04"),
        ("multiplier_growth", "R05"),
    ])
    @pytest.mark.parametrize("value", [0.0, -1.0, 10.5])
    def test_multiplier_out_of_range(self, field, rule, value):
        result = validate_scoring_config(default_config(**{field: value}))
        assert not result.valid
        assert rule in _rules(result.errors)

    def test_multiplier_upper_bound_inclusive(self):
        assert validate_scoring_config(default_config(multiplier_growth=10.0)).valid

    def test_target_fraction_zero_rejected(self):
        result = validate_scoring_config(default_config(target_fraction=0.0))
        assert "R06" in _rules(result.errors)

    def test_target_fraction_one_accepted(self):
        assert validate_scoring_config(default_config(target_fraction=1.0)).valid

    @pytest.mark.parametrize("field,rule,value", [
        ("vice_cap", "R07", 1.1),
        ("vice_cap", "R07", -0.1),
        ("streak_threshold", "R08", 1.5),
        ("streak_bonus_per_day", "R09", 0.2),
        ("max_streak_bonus", "R10", 0.6),
    ])
    def test_bounded_fields(self, field, rule, value):
        result = validate_scoring_config(default_config(**{field: value}))
        assert rule in _rules(result.errors)
        assert any(e.field == field and e.value == value for e in result.errors)

    def test_zero_vice_cap_is_valid(self):
        assert validate_scoring_config(default_config(vice_cap=0.0)).valid

    def test_nan_is_rejected(self):
        result = validate_scoring_config(default_config(vice_cap=math.nan))
        assert "R07" in _rules(result.errors)


class TestPhoneTiers:
    @pytest.mark.parametrize("value", [60.5, -1.0, 1441.0, math.inf])
    def test_minutes_must_be_whole_and_in_day(self, value):
        result = validate_scoring_config(default_config(phone_t1_min=value))
        assert "R11" in _rules(result.errors)

    def test_penalty_range(self):
        result = validate_scoring_config(default_config(phone_t3_penalty=1.2))
        assert "R16" in _rules(result.errors)

    def test_minutes_must_ascend(self):
        result = validate_scoring_config(
            default_config(phone_t1_min=200.0, phone_t2_min=181.0, phone_t3_min=181.0)
        )
        assert {"R26", "R27"} <= _rules(result.errors)

    def test_penalties_must_escalate(self):
        result = validate_scoring_config(
            default_config(phone_t1_penalty=0.07, phone_t2_penalty=0.07, phone_t3_penalty=0.05)
        )
        assert {"R28", "R29"} <= _rules(result.errors)


class TestWarnings:
    def test_bonus_cap_hit_on_day_one(self):
        result = validate_scoring_config(
            default_config(streak_bonus_per_day=0.05, max_streak_bonus=0.02)
        )
        assert result.valid
        assert _rules(result.warnings) == {"W01"}

    def test_phone_penalty_reaches_vice_cap(self):
        result = validate_scoring_config(default_config(vice_cap=0.07))
        assert result.valid
        flagged = [w.field for w in result.warnings if w.rule == "W02"]
        assert flagged == ["phone_t2_penalty", "phone_t3_penalty"]

    def test_no_phone_warning_when_vice_cap_zero(self):
        result = validate_scoring_config(default_config(vice_cap=0.0))
        assert "W02" not in _rules(result.warnings)

    def test_issue_to_dict(self):
        result = validate_scoring_config(default_config(vice_cap=2.0))
        d = result.errors[0].to_dict()
        assert d == {
            "field": "vice_cap",
            "rule": "R07",
            "message": "vice_cap must be between 0 and 1.0 inclusive",
            "value": 2.0,
        }
