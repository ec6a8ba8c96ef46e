from __future__ import annotations
import datetime as dt
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from .goal import GoalOut
from .meal import MealOut


class Totals(BaseModel):
    calories: float
    protein: float
    carbs: float
    fat: float


class Progress(BaseModel):
    consumed: float
    target: float
    remaining: float
    percent: float


class DailySummary(BaseModel):
    day: dt.date
    meals: list[MealOut]
    totals: Totals
    goal: GoalOut | None = None
    progress: Dict[str, Progress] | None = None


class DayStats(Totals):
    date: dt.date
    meals: int


class AiLogOut(BaseModel):
    id: int
    prompt: str
    response: str
    image_url: str | None = None
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class WeightIn(BaseModel):
    weight: float = Field(..., gt=0)
    date: dt.date


class WeightOut(WeightIn):
    id: int
    created_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)
