# api/v1/deps.py
from __future__ import annotations

from fastapi import Request

from core.goal_calculator import GoalCalculator
from core.meal_pipeline import MealAnalysisPipeline

_calc = GoalCalculator()


def get_pipeline(request: Request) -> MealAnalysisPipeline:
    return request.app.state.pipeline


def get_calculator() -> GoalCalculator:
    return _calc
