# api/v1/tracking.py
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.daily_summary import daily_stats, goal_progress, period_start, sum_meals
from core.goal_calculator import EnergyGoal
from core.models.meal import MealType
from services import meal_store
from services.db import get_session
from api.v1.schemas import (
    AiLogOut,
    DailySummary,
    DayStats,
    GoalOut,
    MealOut,
    WeightIn,
    WeightOut,
)

router = APIRouter()


def _today() -> date:
    return datetime.now(timezone.utc).date()


# ───────────────────────── meals of a day ───────────────────
@router.get("/{user_id}/meals", response_model=list[MealOut])
async def list_day_meals(
    user_id: str,
    day: date | None = None,
    db: AsyncSession = Depends(get_session),
) -> list[MealOut]:
    meals = await meal_store.meals_for_day(db, user_id, day or _today())
    return [MealOut.model_validate(m, from_attributes=True) for m in meals]


@router.get("/{user_id}/meals/history", response_model=list[MealOut])
async def meal_history(
    user_id: str,
    start: date,
    end: date | None = None,
    meal_type: MealType | None = None,
    q: str | None = Query(None, description="case-insensitive name search"),
    db: AsyncSession = Depends(get_session),
) -> list[MealOut]:
    end = end or _today()
    if end < start:
        raise HTTPException(400, "end must not be before start")
    meals = await meal_store.meals_for_range(
        db, user_id, start, end,
        meal_type=meal_type.value if meal_type else None,
        search=q,
    )
    return [MealOut.model_validate(m, from_attributes=True) for m in meals]


# ───────────────────────── summary / stats ──────────────────
@router.get("/{user_id}/summary", response_model=DailySummary)
async def day_summary(
    user_id: str,
    day: date | None = None,
    db: AsyncSession = Depends(get_session),
) -> DailySummary:
    day = day or _today()
    meals = await meal_store.meals_for_day(db, user_id, day)
    totals = sum_meals(meals)

    row = await meal_store.get_daily_goals(db, user_id)
    goal = (
        EnergyGoal(calories=row.calories, protein=row.protein, carbs=row.carbs, fats=row.fats)
        if row else None
    )
    return DailySummary(
        day=day,
        meals=[MealOut.model_validate(m, from_attributes=True) for m in meals],
        totals=totals.as_dict(),
        goal=GoalOut(**goal.as_dict()) if goal else None,
        progress=goal_progress(totals, goal) if goal else None,
    )


@router.get("/{user_id}/stats", response_model=list[DayStats])
async def intake_stats(
    user_id: str,
    period: Literal["week", "month"] = "week",
    db: AsyncSession = Depends(get_session),
) -> list[DayStats]:
    today = _today()
    meals = await meal_store.meals_for_range(db, user_id, period_start(period, today), today)
    return [DayStats(**row) for row in daily_stats(meals)]


# ───────────────────────── AI logs ──────────────────────────
@router.get("/{user_id}/ai-logs", response_model=list[AiLogOut])
async def list_ai_logs(
    user_id: str,
    limit: int = Query(meal_store.AI_LOG_LIMIT, ge=1, le=meal_store.AI_LOG_LIMIT),
    db: AsyncSession = Depends(get_session),
) -> list[AiLogOut]:
    logs = await meal_store.list_ai_logs(db, user_id, limit)
    return [AiLogOut.model_validate(log, from_attributes=True) for log in logs]


# ───────────────────────── weight ───────────────────────────
@router.get("/{user_id}/weight", response_model=list[WeightOut])
async def list_weight(
    user_id: str,
    db: AsyncSession = Depends(get_session),
) -> list[WeightOut]:
    entries = await meal_store.list_weight_entries(db, user_id)
    return [WeightOut.model_validate(e, from_attributes=True) for e in entries]


@router.post(
    "/{user_id}/weight",
    response_model=WeightOut,
    status_code=status.HTTP_201_CREATED,
)
async def add_weight(
    user_id: str,
    body: WeightIn,
    db: AsyncSession = Depends(get_session),
) -> WeightOut:
    entry = await meal_store.add_weight_entry(db, user_id, body.weight, body.date)
    return WeightOut.model_validate(entry, from_attributes=True)
