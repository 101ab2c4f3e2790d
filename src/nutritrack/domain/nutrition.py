"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MacroProfile:
    """Calories and macronutrients, used for meal snapshots, totals and goals."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float

    def is_empty(self) -> bool:
        """Return True when every nutrient is zero."""
        return not any((self.calories, self.protein_g, self.fat_g, self.carbs_g))


ZERO_MACROS = MacroProfile(0.0, 0.0, 0.0, 0.0)
