"""Domain models for reminder notifications."""

from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from enum import Enum
from uuid import UUID

LUNCH_START_HOUR = 12
DINNER_START_HOUR = 17


class ReminderCategory(str, Enum):
    """Category of a reminder notification."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    DAILY_GOAL = "daily-goal"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ReminderNotification:
    """A scheduled or already delivered push notification."""

    id: UUID
    user_id: UUID
    category: ReminderCategory
    scheduled_at: datetime
    message: str
    sent: bool
    window_key: str | None = None


@dataclass(frozen=True)
class MealWindow:
    """Local-time range used to gate meal recommendation pushes."""

    category: ReminderCategory
    start_hour: int
    end_hour: int

    def bounds(self, day: date, tz: tzinfo) -> tuple[datetime, datetime]:
        """Return the half-open [start, end) range of the window on a local day."""
        start = datetime.combine(day, time(hour=self.start_hour), tzinfo=tz)
        end = datetime.combine(day, time(hour=self.end_hour), tzinfo=tz)
        return start, end

    def closes_at(self, local_now: datetime) -> bool:
        """Return True while the local hour equals the window's closing hour."""
        return local_now.hour == self.end_hour


MEAL_WINDOWS: tuple[MealWindow, ...] = (
    MealWindow(ReminderCategory.BREAKFAST, 5, LUNCH_START_HOUR),
    MealWindow(ReminderCategory.LUNCH, LUNCH_START_HOUR, DINNER_START_HOUR),
    MealWindow(ReminderCategory.DINNER, DINNER_START_HOUR, 21),
)

DAILY_GOAL_HOUR = 23


def meal_label_for_hour(hour: int) -> str:
    """Map a local hour to the breakfast/lunch/dinner label."""
    if hour < LUNCH_START_HOUR:
        return ReminderCategory.BREAKFAST.value
    if hour < DINNER_START_HOUR:
        return ReminderCategory.LUNCH.value
    return ReminderCategory.DINNER.value
