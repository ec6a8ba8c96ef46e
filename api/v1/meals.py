# api/v1/meals.py
from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.ext.asyncio import AsyncSession

from services import meal_store
from services.db import get_session
from api.v1.schemas import MealIn, MealOut, MealUpdate

router = APIRouter()


@router.post(
    "",
    response_model=MealOut,
    status_code=status.HTTP_201_CREATED,
    summary="Store a confirmed meal",
)
async def create_meal(
    body: MealIn,
    db: AsyncSession = Depends(get_session),
) -> MealOut:
    fields = body.model_dump(exclude={"user_id"}, mode="json")
    meal = await meal_store.insert_meal(db, body.user_id, fields)
    return MealOut.model_validate(meal, from_attributes=True)


@router.get("/{meal_id}", response_model=MealOut)
async def fetch_meal(
    meal_id: int,
    db: AsyncSession = Depends(get_session),
) -> MealOut:
    meal = await meal_store.get_meal(db, meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return MealOut.model_validate(meal, from_attributes=True)


@router.patch("/{meal_id}", response_model=MealOut)
async def edit_meal(
    meal_id: int,
    body: MealUpdate,
    db: AsyncSession = Depends(get_session),
) -> MealOut:
    changes = body.model_dump(exclude_unset=True, mode="json")
    meal = await meal_store.update_meal(db, meal_id, changes)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return MealOut.model_validate(meal, from_attributes=True)


@router.delete(
    "/{meal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a meal by its ID",
)
async def remove_meal(
    meal_id: int,
    db: AsyncSession = Depends(get_session),
) -> Response:
    if not await meal_store.delete_meal(db, meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
