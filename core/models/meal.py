from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class MealCandidate(BaseModel):
    """Validated nutrition estimate that has not been stored yet."""

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    meal_type: MealType
    description: str = ""

    model_config = ConfigDict(frozen=True, use_enum_values=True)
