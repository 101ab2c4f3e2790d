"""Domain models for goal tracking."""

from dataclasses import dataclass

from nutritrack.domain.nutrition import MacroProfile

NO_GOALS_REACHED = "NO_GOALS_REACHED"


@dataclass(frozen=True)
class GoalEvaluation:
    """Outcome of comparing consumed totals against daily goals."""

    totals: MacroProfile
    goals: MacroProfile
    remaining: MacroProfile
    reached: list[str]
    message: str

    @property
    def all_reached(self) -> bool:
        """Return True when all four nutrient goals were reached."""
        return len(self.reached) == 4  # noqa: PLR2004

    @property
    def has_message(self) -> bool:
        """Return True when there is something to tell the user."""
        return self.message != NO_GOALS_REACHED
