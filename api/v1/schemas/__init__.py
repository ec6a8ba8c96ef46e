"""Re-export individual schema modules for easy imports."""

from .meal import MealIn, MealUpdate, MealOut
from .analysis import AnalysisOut, AnalysisFailure
from .goal import BiometricsIn, GoalOut, GoalPreview, StoredGoalOut
from .tracking import AiLogOut, DailySummary, DayStats, WeightIn, WeightOut

__all__ = [
    "MealIn",
    "MealUpdate",
    "MealOut",
    "AnalysisOut",
    "AnalysisFailure",
    "BiometricsIn",
    "GoalOut",
    "GoalPreview",
    "StoredGoalOut",
    "AiLogOut",
    "DailySummary",
    "DayStats",
    "WeightIn",
    "WeightOut",
]
