"""
core/goal_calculator.py
────────────────────────────────────────────────────────────────────────
Daily energy goal from biometrics:

1. RMR  (Mifflin–St Jeor)
2. TDEE (activity multiplier)
3. Calories + macro grams on a fixed 25 / 50 / 25 split
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real

Logger = logging.getLogger(__name__)


class BiologicalSex(str, Enum):
    male = "male"
    female = "female"


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    light = "light"
    moderate = "moderate"
    heavy = "heavy"
    athlete = "athlete"


ACTIVITY_FACTORS: dict[ActivityLevel, float] = {
    ActivityLevel.sedentary: 1.2,
    ActivityLevel.light: 1.375,
    ActivityLevel.moderate: 1.55,
    ActivityLevel.heavy: 1.7,
    ActivityLevel.athlete: 1.9,
}

# share of calories per macro, and kcal per gram
MACRO_SPLIT = {"protein": 0.25, "carbs": 0.50, "fat": 0.25}
KCAL_PER_GRAM = {"protein": 4, "carbs": 4, "fat": 9}


class InvalidInput(ValueError):
    """Raised before any computation when biometric inputs are out of range."""

    def __init__(self, fields: dict[str, str]) -> None:
        self.fields = fields
        listing = ", ".join(f"{k}: {v}" for k, v in fields.items())
        super().__init__(f"invalid biometric input ({listing})")


# ──────────────────────────────────────────────────────────────────────
#  Value objects
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class BiometricProfile:
    weight_kg: float
    height_cm: float
    age_years: float
    sex: BiologicalSex
    activity_level: ActivityLevel

    @classmethod
    def build(
        cls,
        weight_kg: float,
        height_cm: float,
        age_years: float,
        sex: str | BiologicalSex,
        activity_level: str | ActivityLevel,
    ) -> "BiometricProfile":
        """Check every constraint and collect all violations at once."""
        problems: dict[str, str] = {}
        for name, value in (
            ("weight_kg", weight_kg),
            ("height_cm", height_cm),
            ("age_years", age_years),
        ):
            if not _is_finite_number(value):
                problems[name] = "must be a finite number"
            elif value <= 0:
                problems[name] = "must be greater than 0"

        sex_enum = _coerce(BiologicalSex, sex)
        if sex_enum is None:
            problems["sex"] = "must be one of: male, female"

        activity_enum = _coerce(ActivityLevel, activity_level)
        if activity_enum is None:
            allowed = ", ".join(a.value for a in ActivityLevel)
            problems["activity_level"] = f"must be one of: {allowed}"

        if problems:
            raise InvalidInput(problems)

        return cls(
            weight_kg=float(weight_kg),
            height_cm=float(height_cm),
            age_years=float(age_years),
            sex=sex_enum,            # type: ignore[arg-type]
            activity_level=activity_enum,  # type: ignore[arg-type]
        )


@dataclass(frozen=True)
class EnergyGoal:
    calories: int
    protein: int
    carbs: int
    fats: int

    def as_dict(self) -> dict[str, int]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
        }


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_finite_number(value: object) -> bool:
    if not _is_number(value):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:          # ints beyond float range
        return False


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return None


def round_half_up(value: float) -> int:
    """x.5 always goes up, so goals never depend on banker's rounding."""
    return int(math.floor(value + 0.5))


# ──────────────────────────────────────────────────────────────────────
#  Calculator
# ──────────────────────────────────────────────────────────────────────
class GoalCalculator:
    """Stateless source-of-truth for daily kcal + macro targets."""

    # --------------- public entrypoints -------------------------------
    def calculate(
        self,
        weight_kg: float,
        height_cm: float,
        age_years: float,
        sex: str | BiologicalSex,
        activity_level: str | ActivityLevel,
    ) -> EnergyGoal:
        profile = BiometricProfile.build(
            weight_kg, height_cm, age_years, sex, activity_level
        )
        return self.goal(profile)

    def goal(self, p: BiometricProfile) -> EnergyGoal:
        calories = round_half_up(self.tdee(p))
        goal = EnergyGoal(
            calories=calories,
            protein=self._macro_grams(calories, "protein"),
            carbs=self._macro_grams(calories, "carbs"),
            fats=self._macro_grams(calories, "fat"),
        )
        Logger.debug("goal for %s → %s", p, goal)
        return goal

    # --------------- RMR / TDEE -------------------------------------
    def rmr(self, p: BiometricProfile) -> float:
        base = 10 * p.weight_kg + 6.25 * p.height_cm - 5 * p.age_years
        return base + (5 if p.sex is BiologicalSex.male else -161)

    def tdee(self, p: BiometricProfile) -> float:
        return self.rmr(p) * ACTIVITY_FACTORS[p.activity_level]

    # --------------- Macros -----------------------------------------
    @staticmethod
    def _macro_grams(calories: int, macro: str) -> int:
        return round_half_up(calories * MACRO_SPLIT[macro] / KCAL_PER_GRAM[macro])

    # --------------- BMI (reported next to a goal preview) ----------
    @staticmethod
    def bmi(weight_kg: float, height_cm: float) -> float:
        height_m = height_cm / 100
        return round(weight_kg / (height_m * height_m), 1)
