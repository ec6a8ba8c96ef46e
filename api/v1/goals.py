# api/v1/goals.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.goal_calculator import GoalCalculator
from services import meal_store
from services.db import get_session
from api.v1.deps import get_calculator
from api.v1.schemas import BiometricsIn, GoalPreview, StoredGoalOut

router = APIRouter()


# ───────────────────────── preview ──────────────────────────
@router.post(
    "/goals/calculate",
    response_model=GoalPreview,
    status_code=status.HTTP_200_OK,
    summary="Compute a daily calorie/macro goal without saving it",
)
def calculate_goal(
    body: BiometricsIn,
    calc: GoalCalculator = Depends(get_calculator),
) -> GoalPreview:
    goal = calc.calculate(**body.model_dump())
    return GoalPreview(**goal.as_dict(), bmi=calc.bmi(body.weight_kg, body.height_cm))


# ───────────────────────── upsert ───────────────────────────
@router.put(
    "/users/{user_id}/goals",
    response_model=StoredGoalOut,
    status_code=status.HTTP_200_OK,
)
async def update_goals(
    user_id: str,
    body: BiometricsIn,
    calc: GoalCalculator = Depends(get_calculator),
    db: AsyncSession = Depends(get_session),
) -> StoredGoalOut:
    goal = calc.calculate(**body.model_dump())
    row = await meal_store.upsert_daily_goals(db, user_id, goal)
    return StoredGoalOut.model_validate(row, from_attributes=True)


# ───────────────────────── read ─────────────────────────────
@router.get("/users/{user_id}/goals", response_model=StoredGoalOut)
async def get_goals(
    user_id: str,
    db: AsyncSession = Depends(get_session),
) -> StoredGoalOut:
    row = await meal_store.get_daily_goals(db, user_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Daily goals not set")
    return StoredGoalOut.model_validate(row, from_attributes=True)
