"""JSON serialization of domain objects."""

from dataclasses import asdict

from nutritrack.domain.goals import GoalEvaluation
from nutritrack.domain.meals import MealRecord
from nutritrack.domain.models import UserRecord
from nutritrack.domain.nutrition import MacroProfile
from nutritrack.domain.reminders import ReminderNotification
from nutritrack.domain.stats import DailyTotals, PeriodSummary


def serialize_macros(macros: MacroProfile) -> dict[str, float]:
    """Flatten a nutrient profile into its four named fields."""
    return asdict(macros)


def serialize_user(user: UserRecord) -> dict[str, object]:
    """Public view of a user; the push token itself is never exposed."""
    return {
        "id": str(user.id),
        "goals": serialize_macros(user.goals),
        "push_enabled": bool(user.push_token),
        "timezone": user.timezone,
    }


def serialize_meal(meal: MealRecord) -> dict[str, object]:
    """Meal with its nutrients inlined next to name and time."""
    return {
        "id": str(meal.id),
        "name": meal.name,
        "consumed_at": meal.consumed_at.isoformat(),
        **serialize_macros(meal.macros),
    }


def serialize_reminder(reminder: ReminderNotification) -> dict[str, object]:
    """Reminder row as listed to its owner."""
    return {
        "id": str(reminder.id),
        "category": reminder.category.value,
        "scheduled_at": reminder.scheduled_at.isoformat(),
        "message": reminder.message,
        "sent": reminder.sent,
    }


def serialize_evaluation(evaluation: GoalEvaluation) -> dict[str, object]:
    """Goal check result.

    ``has_message`` is false when nothing was reached, so clients can skip
    showing the placeholder message.
    """
    return {
        "totals": serialize_macros(evaluation.totals),
        "goals": serialize_macros(evaluation.goals),
        "remaining": serialize_macros(evaluation.remaining),
        "reached": evaluation.reached,
        "message": evaluation.message,
        "has_message": evaluation.has_message,
    }


def serialize_daily(daily: DailyTotals) -> dict[str, object]:
    """One day's totals with the goals reached that day."""
    return {
        "day": daily.day.isoformat(),
        **serialize_macros(daily.totals),
        "reached": list(daily.reached),
        "all_reached": daily.all_reached,
    }


def serialize_period(summary: PeriodSummary) -> dict[str, object]:
    """Per-day rows, the daily average and the count of fully reached days."""
    return {
        "daily": [serialize_daily(entry) for entry in summary.daily],
        "average": serialize_macros(summary.average),
        "days_all_reached": summary.days_all_reached,
    }
