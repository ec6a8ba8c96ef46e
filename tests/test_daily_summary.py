# tests/test_daily_summary.py
from __future__ import annotations

from datetime import date, datetime

import pytest

from core.daily_summary import DailyTotals, daily_stats, goal_progress, period_start, sum_meals
from core.goal_calculator import EnergyGoal

MEALS = [
    {"created_at": datetime(2026, 3, 14, 8), "calories": 300, "protein": 10, "carbs": 50, "fat": 6},
    {"created_at": datetime(2026, 3, 14, 13), "calories": 450, "protein": 35, "carbs": 48, "fat": 12},
    {"created_at": datetime(2026, 3, 15, 19), "calories": 700, "protein": 40, "carbs": 60, "fat": 30},
]


def test_sum_meals():
    assert sum_meals(MEALS[:2]) == DailyTotals(calories=750, protein=45, carbs=98, fat=18)
    assert sum_meals([]) == DailyTotals()


def test_goal_progress():
    prog = goal_progress(DailyTotals(calories=1000, protein=200), EnergyGoal(2507, 157, 313, 70))
    assert prog["calories"] == {"consumed": 1000, "target": 2507, "remaining": 1507, "percent": 39.9}
    assert prog["protein"]["remaining"] == -43
    assert prog["fat"]["target"] == 70


def test_goal_progress_zero_target():
    prog = goal_progress(DailyTotals(calories=10), EnergyGoal(0, 0, 0, 0))
    assert prog["calories"]["percent"] == 0.0


def test_daily_stats_groups_by_day_newest_first():
    rows = daily_stats(MEALS)
    assert [r["date"] for r in rows] == [date(2026, 3, 15), date(2026, 3, 14)]
    assert rows[1]["calories"] == 750
    assert rows[1]["meals"] == 2
    assert rows[0]["meals"] == 1
    assert daily_stats([]) == []


def test_period_start():
    assert period_start("week", date(2026, 3, 15)) == date(2026, 3, 8)
    assert period_start("month", date(2026, 3, 31)) == date(2026, 3, 1)
    with pytest.raises(ValueError):
        period_start("year")
