"""Goal evaluation and goal suggestions."""

import math
from dataclasses import dataclass, replace

from nutritrack.domain.goals import NO_GOALS_REACHED, GoalEvaluation
from nutritrack.domain.nutrition import MacroProfile
from nutritrack.domain.stats import DailyTotals, PeriodSummary

ALL_GOALS_REACHED_MESSAGE = "All nutrition goals reached! Great job!"

# Display name and MacroProfile field, in message order.
_NUTRIENTS = (
    ("Calories", "calories"),
    ("Protein", "protein_g"),
    ("Carbs", "carbs_g"),
    ("Fat", "fat_g"),
)

_CALORIE_ADJUSTMENT = 300
_KCAL_PER_GRAM_PROTEIN = 4
_KCAL_PER_GRAM_CARBS = 4
_KCAL_PER_GRAM_FAT = 9


@dataclass
class GoalEvaluator:
    """Compares consumed totals against a user's daily targets."""

    def evaluate(self, totals: MacroProfile, goals: MacroProfile) -> GoalEvaluation:
        """Return remaining amounts, reached nutrients and the goal message."""
        remaining = MacroProfile(
            calories=max(goals.calories - totals.calories, 0.0),
            protein_g=max(goals.protein_g - totals.protein_g, 0.0),
            fat_g=max(goals.fat_g - totals.fat_g, 0.0),
            carbs_g=max(goals.carbs_g - totals.carbs_g, 0.0),
        )
        reached = [
            label
            for label, field_name in _NUTRIENTS
            if _is_reached(getattr(totals, field_name), getattr(goals, field_name))
        ]
        return GoalEvaluation(
            totals=totals,
            goals=goals,
            remaining=remaining,
            reached=reached,
            message=goal_message(reached),
        )

    def evaluate_day(self, daily: DailyTotals, goals: MacroProfile) -> DailyTotals:
        """Attach the reached nutrients of one day to its totals."""
        evaluation = self.evaluate(daily.totals, goals)
        return replace(
            daily,
            reached=tuple(evaluation.reached),
            all_reached=evaluation.all_reached,
        )

    def evaluate_period(
        self, summary: PeriodSummary, goals: MacroProfile
    ) -> PeriodSummary:
        """Evaluate every day of a report against the same goals."""
        return replace(
            summary,
            daily=[self.evaluate_day(entry, goals) for entry in summary.daily],
        )


def goal_message(reached: list[str]) -> str:
    """Select the user-facing message for the reached nutrients."""
    if not reached:
        return NO_GOALS_REACHED
    if len(reached) == len(_NUTRIENTS):
        return ALL_GOALS_REACHED_MESSAGE
    return f"You've reached your {', '.join(reached)} goal(s)! Keep going!"


def _is_reached(total: float, goal: float) -> bool:
    # A zero or unset goal is not applicable.
    return goal > 0 and total >= goal


def suggest_goals(  # noqa: PLR0913
    *,
    age: int,
    gender: str,
    height_cm: float,
    weight_kg: float,
    goal_weight_kg: float,
    activity_level: float,
) -> MacroProfile:
    """Suggest daily goals from the Mifflin-St Jeor estimate and a weight goal."""
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    bmr += 5 if gender == "male" else -161

    calories = bmr * activity_level
    if goal_weight_kg < weight_kg:
        calories -= _CALORIE_ADJUSTMENT
        protein_ratio, carbs_ratio, fat_ratio = 0.4, 0.3, 0.3
    elif goal_weight_kg > weight_kg:
        calories += _CALORIE_ADJUSTMENT
        protein_ratio, carbs_ratio, fat_ratio = 0.35, 0.45, 0.2
    else:
        protein_ratio, carbs_ratio, fat_ratio = 0.3, 0.4, 0.3
    calories = _round_half_up(calories)

    return MacroProfile(
        calories=calories,
        protein_g=_round_half_up(calories * protein_ratio / _KCAL_PER_GRAM_PROTEIN),
        fat_g=_round_half_up(calories * fat_ratio / _KCAL_PER_GRAM_FAT),
        carbs_g=_round_half_up(calories * carbs_ratio / _KCAL_PER_GRAM_CARBS),
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
