from __future__ import annotations
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from core.goal_calculator import ActivityLevel, BiologicalSex


class BiometricsIn(BaseModel):
    weight_kg: float = Field(..., examples=[70])
    height_cm: float = Field(..., examples=[170])
    age_years: float = Field(..., examples=[30])
    sex: BiologicalSex
    activity_level: ActivityLevel = Field(..., examples=["moderate"])


class GoalOut(BaseModel):
    calories: int
    protein: int
    carbs: int
    fats: int


class GoalPreview(GoalOut):
    bmi: float


class StoredGoalOut(GoalOut):
    user_id: str
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
