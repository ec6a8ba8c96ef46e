"""
core/daily_summary.py
────────────────────────────────────────────────────────────────────────
Intake bookkeeping on top of stored meals:

  • `sum_meals()`      – calories / protein / carbs / fat for a set of meals
  • `goal_progress()`  – consumed vs. target for each macro
  • `daily_stats()`    – per-day totals over a period (pandas group-by)
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Mapping

import pandas as pd

from core.goal_calculator import EnergyGoal

TRACKED = ["calories", "protein", "carbs", "fat"]

PERIOD_DAYS = {"week": 7, "month": 30}


@dataclass(frozen=True)
class DailyTotals:
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


def _get(meal: Any, key: str) -> Any:
    if isinstance(meal, Mapping):
        return meal[key]
    return getattr(meal, key)


def sum_meals(meals: Iterable[Any]) -> DailyTotals:
    totals = {k: 0.0 for k in TRACKED}
    for m in meals:
        for k in TRACKED:
            totals[k] += float(_get(m, k))
    return DailyTotals(**totals)


def goal_progress(totals: DailyTotals, goal: EnergyGoal) -> dict[str, dict[str, float]]:
    """Consumed / target / remaining / percent per tracked field."""
    targets = {
        "calories": goal.calories,
        "protein": goal.protein,
        "carbs": goal.carbs,
        "fat": goal.fats,   # goals store it as “fats”
    }
    out: dict[str, dict[str, float]] = {}
    for k, target in targets.items():
        consumed = getattr(totals, k)
        out[k] = {
            "consumed": consumed,
            "target": target,
            "remaining": target - consumed,
            "percent": 0.0 if target == 0 else round(consumed / target * 100, 1),
        }
    return out


def period_start(period: str, today: date | None = None) -> date:
    if period not in PERIOD_DAYS:
        raise ValueError(f"unknown period {period!r}; use one of {sorted(PERIOD_DAYS)}")
    today = today or datetime.now(timezone.utc).date()
    return today - timedelta(days=PERIOD_DAYS[period])


def daily_stats(meals: Iterable[Any]) -> list[dict[str, Any]]:
    """
    One row per UTC day that has at least one meal, newest day first:
    `{date, calories, protein, carbs, fat, meals}`.
    """
    rows = [
        {"created_at": _get(m, "created_at"), **{k: float(_get(m, k)) for k in TRACKED}}
        for m in meals
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    df["date"] = pd.to_datetime(df["created_at"], utc=True).dt.date
    grouped = df.groupby("date")
    daily = grouped[TRACKED].sum()
    daily["meals"] = grouped.size()
    daily = daily.sort_index(ascending=False)

    return [
        {
            "date": day,
            **{k: float(row[k]) for k in TRACKED},
            "meals": int(row["meals"]),
        }
        for day, row in daily.iterrows()
    ]
