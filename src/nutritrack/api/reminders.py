"""Custom reminder endpoints and the on-demand scheduler tick."""

from __future__ import annotations

from dataclasses import asdict
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from nutritrack.api.auth import require_api_token
from nutritrack.api.dependencies import get_container, require_user
from nutritrack.api.models import ReminderCreate  # noqa: TC001
from nutritrack.api.serializers import serialize_reminder

router = APIRouter(tags=["reminders"], dependencies=[Depends(require_api_token)])


@router.post("/users/{user_id}/reminders", status_code=status.HTTP_201_CREATED)
async def create_reminder(
    user_id: UUID, body: ReminderCreate, request: Request
) -> dict[str, object]:
    """Schedule a custom reminder."""
    require_user(user_id, request)
    reminder = get_container(request).reminder_service.create_custom(
        user_id, scheduled_at=body.scheduled_at, message=body.message
    )
    return serialize_reminder(reminder)


@router.get("/users/{user_id}/reminders")
async def list_reminders(user_id: UUID, request: Request) -> dict[str, object]:
    """Return the user's reminders, newest first."""
    reminders = get_container(request).reminder_service.list_for_user(user_id)
    return {"reminders": [serialize_reminder(reminder) for reminder in reminders]}


@router.delete(
    "/users/{user_id}/reminders/{reminder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_reminder(
    user_id: UUID, reminder_id: UUID, request: Request
) -> Response:
    """Delete one of the user's reminders."""
    if not get_container(request).reminder_service.delete(user_id, reminder_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/reminders/tick")
async def run_tick(request: Request) -> dict[str, int]:
    """Run one scheduler tick immediately."""
    report = await get_container(request).reminder_scheduler.run_tick()
    return asdict(report)
