"""Supabase repository for meal logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutritrack.domain.meals import MealRecord
from nutritrack.domain.nutrition import MacroProfile
from nutritrack.services.meals import MealRepository
from nutritrack.services.stats import StatsRepository

_MEAL_COLUMNS = (
    "id, user_id, name, logged_at, total_calories, total_protein_g, "
    "total_fat_g, total_carbs_g"
)


@dataclass
class SupabaseMealRepository(MealRepository, StatsRepository):
    """Supabase implementation for meal logs and their statistics."""

    client: Client

    def create_meal(
        self,
        user_id: UUID,
        name: str,
        consumed_at: datetime,
        macros: MacroProfile,
    ) -> MealRecord:
        """Create a meal log row and return it."""
        response = (
            self.client.table("meal_logs")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "logged_at": consumed_at.isoformat(),
                    **_macro_columns(macros),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal log")
        return _parse_meal(response.data[0])

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal log row by id."""
        response = (
            self.client.table("meal_logs")
            .select(_MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def update_meal_macros(self, meal_id: UUID, macros: MacroProfile) -> None:
        """Update totals for a meal log."""
        self.client.table("meal_logs").update(_macro_columns(macros)).eq(
            "id", str(meal_id)
        ).execute()

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal log row."""
        self.client.table("meal_logs").delete().eq("id", str(meal_id)).execute()

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meal logs in the time range."""
        response = (
            self.client.table("meal_logs")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]


def _macro_columns(macros: MacroProfile) -> dict[str, float]:
    return {
        "total_calories": macros.calories,
        "total_protein_g": macros.protein_g,
        "total_fat_g": macros.fat_g,
        "total_carbs_g": macros.carbs_g,
    }


def _parse_meal(row: dict[str, object]) -> MealRecord:
    return MealRecord(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        name=str(row.get("name") or ""),
        consumed_at=datetime.fromisoformat(row["logged_at"]),
        macros=MacroProfile(
            calories=float(row.get("total_calories") or 0.0),
            protein_g=float(row.get("total_protein_g") or 0.0),
            fat_g=float(row.get("total_fat_g") or 0.0),
            carbs_g=float(row.get("total_carbs_g") or 0.0),
        ),
    )
