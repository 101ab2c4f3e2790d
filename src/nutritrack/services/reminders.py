"""Reminder storage, deduplication and user-created reminders."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from nutritrack.domain.reminders import ReminderCategory, ReminderNotification

MAX_MESSAGE_LENGTH = 500


class InvalidReminderError(ValueError):
    """Raised when a reminder request is invalid."""


class ReminderRepository(Protocol):
    """Persistence interface for reminder notifications."""

    def create_reminder(
        self,
        user_id: UUID,
        category: ReminderCategory,
        scheduled_at: datetime,
        message: str,
    ) -> ReminderNotification:
        """Create an unsent reminder."""

    def record_sent(  # noqa: PLR0913
        self,
        user_id: UUID,
        category: ReminderCategory,
        sent_at: datetime,
        message: str,
        window_key: str,
    ) -> bool:
        """Insert a sent notification; False if (user, category, window) exists."""

    def find_sent(
        self,
        user_id: UUID,
        category: ReminderCategory,
        start: datetime,
        end: datetime,
    ) -> ReminderNotification | None:
        """Return a sent notification with start <= scheduled_at < end."""

    def list_due(self, now: datetime) -> list[ReminderNotification]:
        """Return unsent reminders scheduled at or before now."""

    def mark_sent(self, reminder_id: UUID, sent_at: datetime) -> None:
        """Flip an unsent reminder to sent."""

    def list_for_user(self, user_id: UUID) -> list[ReminderNotification]:
        """Return a user's reminders, newest first."""

    def delete_reminder(self, user_id: UUID, reminder_id: UUID) -> bool:
        """Delete a user's reminder; False if it does not exist."""


@dataclass
class NotificationDeduplicator:
    """Guards scheduled pushes so each (user, category, window) sends once."""

    repository: ReminderRepository

    def already_sent(
        self,
        user_id: UUID,
        category: ReminderCategory,
        start: datetime,
        end: datetime,
    ) -> bool:
        """Return True if a sent notification exists inside [start, end)."""
        existing = self.repository.find_sent(
            user_id, category, start.astimezone(UTC), end.astimezone(UTC)
        )
        return existing is not None

    def record_sent(  # noqa: PLR0913
        self,
        user_id: UUID,
        category: ReminderCategory,
        message: str,
        sent_at: datetime,
        window_key: str,
    ) -> bool:
        """Persist a delivered notification for its evaluation window."""
        return self.repository.record_sent(
            user_id, category, sent_at, message, window_key
        )


@dataclass
class ReminderService:
    """Service for reminders the user schedules themselves."""

    repository: ReminderRepository

    def create_custom(
        self,
        user_id: UUID,
        scheduled_at: datetime,
        message: str,
        now: datetime | None = None,
    ) -> ReminderNotification:
        """Schedule a custom reminder in the future."""
        text = message.strip()
        if not text:
            raise InvalidReminderError("Reminder message is required")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise InvalidReminderError("Reminder message is too long")
        if scheduled_at.tzinfo is None:
            scheduled_at = scheduled_at.replace(tzinfo=UTC)
        current = now or datetime.now(tz=UTC)
        if scheduled_at <= current:
            raise InvalidReminderError("Reminder time must be in the future")
        return self.repository.create_reminder(
            user_id,
            ReminderCategory.CUSTOM,
            scheduled_at.astimezone(UTC),
            text,
        )

    def list_for_user(self, user_id: UUID) -> list[ReminderNotification]:
        """Return a user's reminders, newest first."""
        return self.repository.list_for_user(user_id)

    def delete(self, user_id: UUID, reminder_id: UUID) -> bool:
        """Delete one of the user's reminders."""
        return self.repository.delete_reminder(user_id, reminder_id)
