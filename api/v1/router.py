# api/v1/router.py
from fastapi import APIRouter

from . import analyze, goals, meals, tracking

api_router = APIRouter()

api_router.include_router(analyze.router, prefix="/analyze-meal", tags=["Analysis"])
api_router.include_router(meals.router, prefix="/meals", tags=["Meals"])
api_router.include_router(goals.router, tags=["Goals"])

# per-user views live *under* the user resource
api_router.include_router(
    tracking.router,
    prefix="/users",          # results in /users/{user_id}/meals etc.
    tags=["Tracking"],
)
