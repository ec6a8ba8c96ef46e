"""
services/meal_store.py
────────────────────────────────────────────────────────────────────────
Small DAO helpers over `services.db` used by the routers.

Day boundaries are UTC; a day covers [00:00, next 00:00).
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.goal_calculator import EnergyGoal
from services.db import AiLog, DailyGoal, Meal, WeightEntry

AI_LOG_LIMIT = 50

_MEAL_FIELDS = (
    "name", "calories", "protein", "carbs", "fat",
    "meal_type", "description", "image_url",
)


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _day_bounds(start: date, end: date | None = None) -> tuple[datetime, datetime]:
    lo = datetime.combine(start, time.min)
    hi = datetime.combine((end or start) + timedelta(days=1), time.min)
    return lo, hi


# ───────── meals ─────────────────────────────────────────────────────
async def insert_meal(db: AsyncSession, user_id: str, fields: dict[str, Any]) -> Meal:
    meal = Meal(user_id=user_id, **{k: fields.get(k) for k in _MEAL_FIELDS})
    db.add(meal)
    await db.commit()
    await db.refresh(meal)
    return meal


async def get_meal(db: AsyncSession, meal_id: int) -> Meal | None:
    return await db.get(Meal, meal_id)


async def update_meal(db: AsyncSession, meal_id: int, changes: dict[str, Any]) -> Meal | None:
    meal = await db.get(Meal, meal_id)
    if meal is None:
        return None
    for k, v in changes.items():
        if k in _MEAL_FIELDS:
            setattr(meal, k, v)
    await db.commit()
    await db.refresh(meal)
    return meal


async def delete_meal(db: AsyncSession, meal_id: int) -> bool:
    res = await db.execute(delete(Meal).where(Meal.id == meal_id))
    await db.commit()
    return res.rowcount > 0


async def meals_for_range(
    db: AsyncSession,
    user_id: str,
    start: date,
    end: date,
    meal_type: str | None = None,
    search: str | None = None,
) -> Sequence[Meal]:
    lo, hi = _day_bounds(start, end)
    q = (
        select(Meal)
        .where(Meal.user_id == user_id, Meal.created_at >= lo, Meal.created_at < hi)
        .order_by(Meal.created_at.desc(), Meal.id.desc())
    )
    if meal_type:
        q = q.where(Meal.meal_type == meal_type)
    if search:
        q = q.where(Meal.name.ilike(_like_pattern(search), escape="\\"))
    return (await db.execute(q)).scalars().all()


async def meals_for_day(db: AsyncSession, user_id: str, day: date) -> Sequence[Meal]:
    return await meals_for_range(db, user_id, day, day)


# ───────── daily goals ───────────────────────────────────────────────
async def get_daily_goals(db: AsyncSession, user_id: str) -> DailyGoal | None:
    return await db.get(DailyGoal, user_id)


async def upsert_daily_goals(db: AsyncSession, user_id: str, goal: EnergyGoal) -> DailyGoal:
    row = await db.get(DailyGoal, user_id)
    if row is None:                       # Insert
        row = DailyGoal(user_id=user_id, **goal.as_dict())
        db.add(row)
    else:
        for k, v in goal.as_dict().items():
            setattr(row, k, v)
    await db.commit()
    await db.refresh(row)
    return row


# ───────── AI logs ───────────────────────────────────────────────────
async def insert_ai_log(
    db: AsyncSession,
    user_id: str,
    prompt: str,
    response: str,
    image_url: str | None = None,
) -> AiLog:
    log = AiLog(user_id=user_id, prompt=prompt, response=response, image_url=image_url)
    db.add(log)
    await db.commit()
    await db.refresh(log)
    return log


async def list_ai_logs(db: AsyncSession, user_id: str, limit: int = AI_LOG_LIMIT) -> Sequence[AiLog]:
    q = (
        select(AiLog)
        .where(AiLog.user_id == user_id)
        .order_by(AiLog.created_at.desc(), AiLog.id.desc())
        .limit(min(limit, AI_LOG_LIMIT))
    )
    return (await db.execute(q)).scalars().all()


# ───────── weight entries ────────────────────────────────────────────
async def add_weight_entry(db: AsyncSession, user_id: str, weight: float, day: date) -> WeightEntry:
    entry = WeightEntry(user_id=user_id, weight=weight, date=day)
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    return entry


async def list_weight_entries(db: AsyncSession, user_id: str) -> Sequence[WeightEntry]:
    q = (
        select(WeightEntry)
        .where(WeightEntry.user_id == user_id)
        .order_by(WeightEntry.date.desc(), WeightEntry.id.desc())
    )
    return (await db.execute(q)).scalars().all()
