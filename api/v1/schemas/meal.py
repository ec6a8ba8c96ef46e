from __future__ import annotations
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.meal import MealType


class MealIn(BaseModel):
    """A (possibly user-edited) candidate the caller wants to keep."""
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    calories: float = Field(..., ge=0)
    protein: float = Field(..., ge=0)
    carbs: float = Field(..., ge=0)
    fat: float = Field(..., ge=0)
    meal_type: MealType
    description: str = ""
    image_url: str | None = None


class MealUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    calories: float | None = Field(None, ge=0)
    protein: float | None = Field(None, ge=0)
    carbs: float | None = Field(None, ge=0)
    fat: float | None = Field(None, ge=0)
    meal_type: MealType | None = None
    description: str | None = None
    image_url: str | None = None

    @field_validator("name", "calories", "protein", "carbs", "fat", "meal_type")
    @classmethod
    def reject_null(cls, v):
        # these columns are NOT NULL; leave the key out to keep the value
        if v is None:
            raise ValueError("may be omitted but not set to null")
        return v


class MealOut(BaseModel):
    id: int
    user_id: str
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    meal_type: MealType
    description: str | None = None
    image_url: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
