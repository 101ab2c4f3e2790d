"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutritrack.domain.models import UserRecord
from nutritrack.domain.nutrition import MacroProfile
from nutritrack.services.users import UserRepository

_USER_COLUMNS = (
    "id, goal_calories, goal_protein_g, goal_fat_g, goal_carbs_g, "
    "push_token, timezone"
)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return the user row for an id, if present."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def update_goals(self, user_id: UUID, goals: MacroProfile) -> None:
        """Update the user's daily goal columns."""
        self.client.table("users").update(
            {
                "goal_calories": goals.calories,
                "goal_protein_g": goals.protein_g,
                "goal_fat_g": goals.fat_g,
                "goal_carbs_g": goals.carbs_g,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(user_id)).execute()

    def set_push_token(self, user_id: UUID, push_token: str | None) -> None:
        """Store or clear the user's push token."""
        self.client.table("users").update({"push_token": push_token}).eq(
            "id", str(user_id)
        ).execute()

    def set_timezone(self, user_id: UUID, timezone_name: str) -> None:
        """Update the user's timezone."""
        self.client.table("users").update({"timezone": timezone_name}).eq(
            "id", str(user_id)
        ).execute()

    def list_users_with_push_token(self) -> list[UserRecord]:
        """Return users that opted into push notifications."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .not_.is_("push_token", "null")
            .execute()
        )
        return [_parse_user(row) for row in response.data or []]


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=UUID(row["id"]),
        goals=MacroProfile(
            calories=float(row.get("goal_calories") or 0.0),
            protein_g=float(row.get("goal_protein_g") or 0.0),
            fat_g=float(row.get("goal_fat_g") or 0.0),
            carbs_g=float(row.get("goal_carbs_g") or 0.0),
        ),
        push_token=row.get("push_token") or None,
        timezone=row.get("timezone") or None,
    )
