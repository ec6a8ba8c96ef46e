"""
scripts/calc_goal.py
────────────────────────────────────────────────────────────────────────
Print the daily calorie / macro goal for a set of biometrics:

    python -m scripts.calc_goal --weight 70 --height 170 --age 30 \
        --sex male --activity moderate

Add `--user <ID>` to also store it in `daily_goals`.
"""
from __future__ import annotations

import asyncio
import json
from argparse import ArgumentParser

from config import get_settings
from core.goal_calculator import ActivityLevel, BiologicalSex, GoalCalculator, InvalidInput
from services import meal_store
from services.db import Database

calc = GoalCalculator()


async def _store(user_id: str, goal) -> None:
    db = Database(get_settings().database_url)
    await db.create_all()
    try:
        async with db.sessionmaker() as session:
            await meal_store.upsert_daily_goals(session, user_id, goal)
    finally:
        await db.dispose()


def main(argv: list[str] | None = None) -> int:
    ap = ArgumentParser(description="Compute a daily energy goal")
    ap.add_argument("--weight", type=float, required=True, help="kg")
    ap.add_argument("--height", type=float, required=True, help="cm")
    ap.add_argument("--age", type=float, required=True, help="years")
    ap.add_argument("--sex", choices=[s.value for s in BiologicalSex], required=True)
    ap.add_argument(
        "--activity",
        choices=[a.value for a in ActivityLevel],
        default=ActivityLevel.moderate.value,
    )
    ap.add_argument("--user", help="store the goal for this user id")
    args = ap.parse_args(argv)

    try:
        goal = calc.calculate(args.weight, args.height, args.age, args.sex, args.activity)
    except InvalidInput as exc:
        ap.error(str(exc))

    print(json.dumps(goal.as_dict(), indent=2))
    if args.user:
        asyncio.run(_store(args.user, goal))
        print(f"✅ stored goal for user {args.user}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
