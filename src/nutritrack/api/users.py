"""User goal, notification and statistics endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Literal
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Request, status

from nutritrack.api.auth import require_api_token
from nutritrack.api.dependencies import get_container, require_user, timezone_for
from nutritrack.api.models import (  # noqa: TC001
    GoalsUpdate,
    GoalSuggestionRequest,
    PushTokenRequest,
    TimezoneRequest,
)
from nutritrack.api.serializers import (
    serialize_daily,
    serialize_evaluation,
    serialize_macros,
    serialize_period,
    serialize_user,
)
from nutritrack.services.goals import suggest_goals

if TYPE_CHECKING:
    from nutritrack.domain.models import UserRecord

router = APIRouter(
    prefix="/users", tags=["users"], dependencies=[Depends(require_api_token)]
)


def _found(user: UserRecord | None) -> dict[str, object]:
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return serialize_user(user)


@router.get("/{user_id}")
async def get_user(user_id: UUID, request: Request) -> dict[str, object]:
    """Return the user's goals and notification settings."""
    return serialize_user(require_user(user_id, request))


@router.put("/{user_id}/goals")
async def update_goals(
    user_id: UUID, body: GoalsUpdate, request: Request
) -> dict[str, object]:
    """Update some or all daily goals."""
    container = get_container(request)
    user = container.user_service.update_goals(user_id, body.model_dump())
    return _found(user)


@router.post("/{user_id}/goals/suggest")
async def suggest_user_goals(
    user_id: UUID, body: GoalSuggestionRequest, request: Request
) -> dict[str, object]:
    """Estimate daily goals from body data, optionally saving them."""
    require_user(user_id, request)
    goals = suggest_goals(
        age=body.age,
        gender=body.gender,
        height_cm=body.height_cm,
        weight_kg=body.weight_kg,
        goal_weight_kg=body.goal_weight_kg,
        activity_level=body.activity_level,
    )
    if body.apply:
        get_container(request).user_service.update_goals(
            user_id, serialize_macros(goals)
        )
    return {"goals": serialize_macros(goals), "applied": body.apply}


@router.put("/{user_id}/push-token")
async def set_push_token(
    user_id: UUID, body: PushTokenRequest, request: Request
) -> dict[str, object]:
    """Opt the user into push notifications."""
    container = get_container(request)
    return _found(container.user_service.set_push_token(user_id, body.push_token))


@router.delete("/{user_id}/push-token")
async def clear_push_token(user_id: UUID, request: Request) -> dict[str, object]:
    """Opt the user out of push notifications."""
    container = get_container(request)
    return _found(container.user_service.clear_push_token(user_id))


@router.put("/{user_id}/timezone")
async def set_timezone(
    user_id: UUID, body: TimezoneRequest, request: Request
) -> dict[str, object]:
    """Set the timezone used for daily totals and meal windows."""
    container = get_container(request)
    return _found(container.user_service.set_timezone(user_id, body.timezone))


@router.get("/{user_id}/goals/check")
async def check_goals(user_id: UUID, request: Request) -> dict[str, object]:
    """Compare today's totals against the user's goals."""
    container = get_container(request)
    user = require_user(user_id, request)
    tz = ZoneInfo(timezone_for(container, user))
    totals = container.aggregator.totals_for_day(
        user.id, datetime.now(tz=tz).date(), tz
    )
    evaluation = container.goal_evaluator.evaluate(totals, user.goals)
    return serialize_evaluation(evaluation)


@router.get("/{user_id}/stats/{period}")
async def get_stats(
    user_id: UUID, period: Literal["today", "week", "month"], request: Request
) -> dict[str, object]:
    """Return daily totals for today, week-to-date or month-to-date.

    Every day carries the goals it reached against the user's current goals.
    """
    container = get_container(request)
    user = require_user(user_id, request)
    timezone_name = timezone_for(container, user)
    evaluator = container.goal_evaluator
    if period == "today":
        today = container.aggregator.get_today(user.id, timezone_name)
        return serialize_daily(evaluator.evaluate_day(today, user.goals))
    if period == "week":
        summary = container.aggregator.get_week(user.id, timezone_name)
    else:
        summary = container.aggregator.get_month(user.id, timezone_name)
    return serialize_period(evaluator.evaluate_period(summary, user.goals))
