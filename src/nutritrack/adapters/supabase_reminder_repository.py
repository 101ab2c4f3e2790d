"""Supabase repository for reminder notifications.

System notifications carry a ``window_key`` and rely on a unique index on
``(user_id, category, window_key)`` in the ``reminders`` table, so two
overlapping ticks can never store the same notification twice.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutritrack.domain.reminders import ReminderCategory, ReminderNotification
from nutritrack.services.reminders import ReminderRepository

_REMINDER_COLUMNS = "id, user_id, category, scheduled_at, message, sent, window_key"


@dataclass
class SupabaseReminderRepository(ReminderRepository):
    """Supabase implementation for reminders."""

    client: Client

    def create_reminder(
        self,
        user_id: UUID,
        category: ReminderCategory,
        scheduled_at: datetime,
        message: str,
    ) -> ReminderNotification:
        """Create an unsent reminder row."""
        response = (
            self.client.table("reminders")
            .insert(
                {
                    "user_id": str(user_id),
                    "category": category.value,
                    "scheduled_at": scheduled_at.isoformat(),
                    "message": message,
                    "sent": False,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create reminder")
        return _parse_reminder(response.data[0])

    def record_sent(  # noqa: PLR0913
        self,
        user_id: UUID,
        category: ReminderCategory,
        sent_at: datetime,
        message: str,
        window_key: str,
    ) -> bool:
        """Insert a sent notification unless its window already has one."""
        response = (
            self.client.table("reminders")
            .upsert(
                {
                    "user_id": str(user_id),
                    "category": category.value,
                    "scheduled_at": sent_at.isoformat(),
                    "sent_at": sent_at.isoformat(),
                    "message": message,
                    "sent": True,
                    "window_key": window_key,
                },
                on_conflict="user_id,category,window_key",
                ignore_duplicates=True,
            )
            .execute()
        )
        return bool(response.data)

    def find_sent(
        self,
        user_id: UUID,
        category: ReminderCategory,
        start: datetime,
        end: datetime,
    ) -> ReminderNotification | None:
        """Return a sent notification of the category inside [start, end)."""
        response = (
            self.client.table("reminders")
            .select(_REMINDER_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("category", category.value)
            .eq("sent", True)
            .gte("scheduled_at", start.isoformat())
            .lt("scheduled_at", end.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_reminder(response.data[0])

    def list_due(self, now: datetime) -> list[ReminderNotification]:
        """Return unsent reminders whose time has come."""
        response = (
            self.client.table("reminders")
            .select(_REMINDER_COLUMNS)
            .eq("sent", False)
            .lte("scheduled_at", now.isoformat())
            .order("scheduled_at", desc=False)
            .execute()
        )
        return [_parse_reminder(row) for row in response.data or []]

    def mark_sent(self, reminder_id: UUID, sent_at: datetime) -> None:
        """Flip a reminder to sent; already-sent rows are left untouched."""
        self.client.table("reminders").update(
            {"sent": True, "sent_at": sent_at.isoformat()}
        ).eq("id", str(reminder_id)).eq("sent", False).execute()

    def list_for_user(self, user_id: UUID) -> list[ReminderNotification]:
        """Return a user's reminders, newest first."""
        response = (
            self.client.table("reminders")
            .select(_REMINDER_COLUMNS)
            .eq("user_id", str(user_id))
            .order("scheduled_at", desc=True)
            .execute()
        )
        return [_parse_reminder(row) for row in response.data or []]

    def delete_reminder(self, user_id: UUID, reminder_id: UUID) -> bool:
        """Delete a reminder owned by the user."""
        response = (
            self.client.table("reminders")
            .delete()
            .eq("id", str(reminder_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_reminder(row: dict[str, object]) -> ReminderNotification:
    return ReminderNotification(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        category=ReminderCategory(row["category"]),
        scheduled_at=datetime.fromisoformat(row["scheduled_at"]),
        message=str(row.get("message") or ""),
        sent=bool(row.get("sent")),
        window_key=row.get("window_key"),
    )
