from __future__ import annotations
from typing import Literal

from pydantic import BaseModel

from core.models.meal import MealCandidate


class AnalysisOut(BaseModel):
    success: Literal[True] = True
    meal: MealCandidate
    image_url: str


class AnalysisFailure(BaseModel):
    success: Literal[False] = False
    error: str
    details: str | None = None
