"""Meal logging endpoints."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from nutritrack.api.auth import require_api_token
from nutritrack.api.dependencies import get_container, require_user, timezone_for
from nutritrack.api.models import MealCorrection, MealCreate  # noqa: TC001
from nutritrack.api.serializers import serialize_meal

router = APIRouter(
    prefix="/users/{user_id}/meals",
    tags=["meals"],
    dependencies=[Depends(require_api_token)],
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def log_meal(
    user_id: UUID, body: MealCreate, request: Request
) -> dict[str, object]:
    """Log a meal with its nutrient snapshot."""
    require_user(user_id, request)
    meal = get_container(request).meal_service.log_meal(
        user_id,
        name=body.name,
        nutrients=body.model_dump(include={"calories", "protein_g", "fat_g", "carbs_g"}),
        consumed_at=body.consumed_at,
    )
    return serialize_meal(meal)


@router.get("")
async def list_meals(
    user_id: UUID, request: Request, day: date | None = None
) -> dict[str, object]:
    """Return the user's meals for a local day (today by default)."""
    container = get_container(request)
    user = require_user(user_id, request)
    timezone_name = timezone_for(container, user)
    resolved_day = day or datetime.now(tz=ZoneInfo(timezone_name)).date()
    meals = container.meal_service.list_for_day(user.id, resolved_day, timezone_name)
    return {
        "day": resolved_day.isoformat(),
        "meals": [serialize_meal(meal) for meal in meals],
    }


@router.patch("/{meal_id}")
async def correct_meal(
    user_id: UUID, meal_id: UUID, body: MealCorrection, request: Request
) -> dict[str, object]:
    """Correct the nutrient snapshot of a logged meal."""
    meal = get_container(request).meal_service.correct_meal(
        user_id, meal_id, body.model_dump(exclude_none=True)
    )
    if meal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found")
    return serialize_meal(meal)


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(user_id: UUID, meal_id: UUID, request: Request) -> Response:
    """Delete a logged meal."""
    if not get_container(request).meal_service.delete_meal(user_id, meal_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
