"""User-related business logic."""

import logging
import math
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from nutritrack.domain.models import UserRecord
from nutritrack.domain.nutrition import MacroProfile
from nutritrack.services.push import is_expo_push_token

_logger = logging.getLogger(__name__)

GOAL_FIELDS = ("calories", "protein_g", "fat_g", "carbs_g")


class InvalidGoalsError(ValueError):
    """Raised when a goal update contains negative or non-finite values."""


class InvalidPushTokenError(ValueError):
    """Raised when a push token is not an Expo push token."""


class InvalidTimezoneError(ValueError):
    """Raised when a timezone name is unknown."""


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""

    def update_goals(self, user_id: UUID, goals: MacroProfile) -> None:
        """Persist the user's daily goals."""

    def set_push_token(self, user_id: UUID, push_token: str | None) -> None:
        """Persist or clear the user's push token."""

    def set_timezone(self, user_id: UUID, timezone_name: str) -> None:
        """Persist the user's timezone."""

    def list_users_with_push_token(self) -> list[UserRecord]:
        """Return users that have a push token."""


@dataclass
class UserService:
    """Application service for user goals and notification settings."""

    repository: UserRepository

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id."""
        return self.repository.get_user(user_id)

    def update_goals(
        self, user_id: UUID, changes: dict[str, float | None]
    ) -> UserRecord | None:
        """Apply a partial goal update and return the updated user."""
        user = self.repository.get_user(user_id)
        if user is None:
            return None
        values = {
            key: float(value)
            for key, value in changes.items()
            if key in GOAL_FIELDS and value is not None
        }
        invalid = sorted(
            key
            for key, value in values.items()
            if not math.isfinite(value) or value < 0
        )
        if invalid:
            raise InvalidGoalsError(
                f"Goals must be non-negative numbers: {', '.join(invalid)}"
            )
        goals = replace(user.goals, **values)
        self.repository.update_goals(user_id, goals)
        return replace(user, goals=goals)

    def set_push_token(self, user_id: UUID, push_token: str) -> UserRecord | None:
        """Register the user's Expo push token."""
        token = push_token.strip()
        if not is_expo_push_token(token):
            raise InvalidPushTokenError("Not a valid Expo push token")
        user = self.repository.get_user(user_id)
        if user is None:
            return None
        self.repository.set_push_token(user_id, token)
        return replace(user, push_token=token)

    def clear_push_token(self, user_id: UUID) -> UserRecord | None:
        """Opt the user out of push notifications."""
        user = self.repository.get_user(user_id)
        if user is None:
            return None
        self.repository.set_push_token(user_id, None)
        return replace(user, push_token=None)

    def set_timezone(self, user_id: UUID, timezone_name: str) -> UserRecord | None:
        """Persist the user's IANA timezone."""
        try:
            ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise InvalidTimezoneError(f"Unknown timezone: {timezone_name}") from exc
        user = self.repository.get_user(user_id)
        if user is None:
            return None
        self.repository.set_timezone(user_id, timezone_name)
        return replace(user, timezone=timezone_name)

    def list_push_recipients(self) -> list[UserRecord]:
        """Return users whose stored token can receive Expo notifications."""
        return [
            user
            for user in self.repository.list_users_with_push_token()
            if user.push_token and is_expo_push_token(user.push_token)
        ]


def resolve_zone(timezone_name: str | None, default: str) -> ZoneInfo:
    """Return the user's zone, or the default zone when it is unset or unknown."""
    name = timezone_name or default
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        _logger.warning("Unknown timezone %r, using %s", name, default)
        return ZoneInfo(default)
