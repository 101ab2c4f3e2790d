"""Meal logging service."""

import math
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from nutritrack.domain.meals import MealRecord
from nutritrack.domain.nutrition import MacroProfile
from nutritrack.services.stats import local_day_bounds


class InvalidMealError(ValueError):
    """Raised when a meal's nutrition snapshot is invalid."""


class MealRepository(Protocol):
    """Persistence interface for meal logs."""

    def create_meal(
        self,
        user_id: UUID,
        name: str,
        consumed_at: datetime,
        macros: MacroProfile,
    ) -> MealRecord:
        """Create a meal log and return it."""

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal by id."""

    def update_meal_macros(self, meal_id: UUID, macros: MacroProfile) -> None:
        """Replace a meal's nutrient snapshot."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return a user's meals with start <= consumed_at < end."""


@dataclass
class MealService:
    """Service that validates and persists meal logs."""

    repository: MealRepository

    def log_meal(
        self,
        user_id: UUID,
        name: str,
        nutrients: dict[str, object],
        consumed_at: datetime | None = None,
    ) -> MealRecord:
        """Validate the nutrient snapshot and persist the meal."""
        macros = macros_from_payload(nutrients)
        _validate(macros)
        when = consumed_at or datetime.now(tz=UTC)
        if when.tzinfo is None:
            when = when.replace(tzinfo=UTC)
        return self.repository.create_meal(
            user_id=user_id,
            name=name.strip() or "meal",
            consumed_at=when.astimezone(UTC),
            macros=macros,
        )

    def correct_meal(
        self, user_id: UUID, meal_id: UUID, nutrients: dict[str, object]
    ) -> MealRecord | None:
        """Overwrite the given nutrient fields of one of the user's meals."""
        meal = self.get_meal(user_id, meal_id)
        if meal is None:
            return None
        macros = macros_from_payload(nutrients, base=meal.macros)
        _validate(macros)
        self.repository.update_meal_macros(meal_id, macros)
        return MealRecord(
            id=meal.id,
            user_id=meal.user_id,
            name=meal.name,
            consumed_at=meal.consumed_at,
            macros=macros,
        )

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete one of the user's meals."""
        if self.get_meal(user_id, meal_id) is None:
            return False
        self.repository.delete_meal(meal_id)
        return True

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealRecord | None:
        """Return a meal if it belongs to the user."""
        meal = self.repository.get_meal(meal_id)
        if meal is None or meal.user_id != user_id:
            return None
        return meal

    def list_for_day(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> list[MealRecord]:
        """Return the user's meals for a local calendar day."""
        start, end = local_day_bounds(day, ZoneInfo(timezone_name))
        meals = self.repository.list_meals(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return sorted(meals, key=lambda meal: meal.consumed_at)


def macros_from_payload(
    payload: dict[str, object], base: MacroProfile | None = None
) -> MacroProfile:
    """Build a macro profile; absent fields fall back to base or zero."""
    return MacroProfile(
        calories=_field(payload, "calories", base.calories if base else 0.0),
        protein_g=_field(payload, "protein_g", base.protein_g if base else 0.0),
        fat_g=_field(payload, "fat_g", base.fat_g if base else 0.0),
        carbs_g=_field(payload, "carbs_g", base.carbs_g if base else 0.0),
    )


def _field(payload: dict[str, object], key: str, default: float) -> float:
    value = payload.get(key)
    if value is None:
        return default
    return _to_float(value)


def _to_float(value: object) -> float:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _validate(macros: MacroProfile) -> None:
    values = (macros.calories, macros.protein_g, macros.fat_g, macros.carbs_g)
    if not all(math.isfinite(value) for value in values):
        raise InvalidMealError("Nutrient values must be finite numbers")
    if min(values) < 0:
        raise InvalidMealError("Nutrient values must be non-negative")
    if macros.is_empty():
        raise InvalidMealError(
            "At least one nutrition detail (calories, protein, carbs, or fat) "
            "must be provided"
        )
