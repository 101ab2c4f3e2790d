"""Request-scoped helpers shared by the routers."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import HTTPException, Request, status

from nutritrack.services.users import resolve_zone

if TYPE_CHECKING:
    from nutritrack.containers import AppContainer
    from nutritrack.domain.models import UserRecord


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the app."""
    return request.app.state.container


def require_user(user_id: UUID, request: Request) -> UserRecord:
    """Resolve the path user or fail with 404."""
    user = get_container(request).user_service.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def timezone_for(container: AppContainer, user: UserRecord) -> str:
    """Return the timezone used to evaluate the user's day."""
    return resolve_zone(user.timezone, container.settings.reminder_timezone).key
