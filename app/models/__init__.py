from .daily_score import DailyScore
from .habit_config import HabitConfig
from .scoring_config import ScoringConfigRow

__all__ = [
    "DailyScore",
    "HabitConfig",
    "ScoringConfigRow",
]
