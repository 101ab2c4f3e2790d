"""Nutrient aggregation over meal logs."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from nutritrack.domain.meals import MealRecord
from nutritrack.domain.nutrition import ZERO_MACROS, MacroProfile
from nutritrack.domain.stats import DailyTotals, PeriodSummary

DECEMBER = 12


class StatsRepository(Protocol):
    """Read interface for meal logs."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return a user's meals with start <= consumed_at < end."""


@dataclass
class NutrientAggregator:
    """Sums logged meal nutrients over time windows."""

    repository: StatsRepository

    def list_meals_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return the user's meals inside the half-open [start, end) range."""
        meals = self.repository.list_meals(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return [meal for meal in meals if start <= meal.consumed_at < end]

    def has_meals_between(self, user_id: UUID, start: datetime, end: datetime) -> bool:
        """Return True when at least one meal was logged in [start, end)."""
        return bool(self.list_meals_between(user_id, start, end))

    def totals_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> MacroProfile:
        """Return the summed nutrients of meals inside [start, end)."""
        return sum_macros(
            meal.macros for meal in self.list_meals_between(user_id, start, end)
        )

    def totals_for_day(self, user_id: UUID, day: date, tz: ZoneInfo) -> MacroProfile:
        """Return totals for one local calendar day."""
        start, end = local_day_bounds(day, tz)
        return self.totals_between(user_id, start, end)

    def get_today(self, user_id: UUID, timezone_name: str) -> DailyTotals:
        """Return today's totals in the user's timezone."""
        tz = ZoneInfo(timezone_name)
        today = datetime.now(tz=tz).date()
        totals = self.totals_for_day(user_id, today, tz)
        return DailyTotals(day=today, totals=totals)

    def get_week(self, user_id: UUID, timezone_name: str) -> PeriodSummary:
        """Return week-to-date totals and averages."""
        tz = ZoneInfo(timezone_name)
        today = datetime.now(tz=tz).date()
        start = today - timedelta(days=today.weekday())
        return self._period(user_id, start, 7, tz)

    def get_month(self, user_id: UUID, timezone_name: str) -> PeriodSummary:
        """Return month-to-date totals and averages."""
        tz = ZoneInfo(timezone_name)
        start = datetime.now(tz=tz).date().replace(day=1)
        if start.month == DECEMBER:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        return self._period(user_id, start, (end - start).days, tz)

    def _period(
        self, user_id: UUID, start: date, days: int, tz: ZoneInfo
    ) -> PeriodSummary:
        range_start, _ = local_day_bounds(start, tz)
        _, range_end = local_day_bounds(start + timedelta(days=days - 1), tz)
        meals = self.list_meals_between(user_id, range_start, range_end)
        daily = []
        for offset in range(days):
            day = start + timedelta(days=offset)
            totals = sum_macros(
                meal.macros
                for meal in meals
                if meal.consumed_at.astimezone(tz).date() == day
            )
            daily.append(DailyTotals(day=day, totals=totals))

        total_days = max(len(daily), 1)
        summed = sum_macros(entry.totals for entry in daily)
        return PeriodSummary(
            daily=daily,
            average=MacroProfile(
                calories=summed.calories / total_days,
                protein_g=summed.protein_g / total_days,
                fat_g=summed.fat_g / total_days,
                carbs_g=summed.carbs_g / total_days,
            ),
        )


def local_day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return local midnight of the day and of the following day."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def sum_macros(profiles: Iterable[MacroProfile]) -> MacroProfile:
    """Elementwise sum of macro profiles."""
    total = ZERO_MACROS
    for profile in profiles:
        total = MacroProfile(
            calories=total.calories + profile.calories,
            protein_g=total.protein_g + profile.protein_g,
            fat_g=total.fat_g + profile.fat_g,
            carbs_g=total.carbs_g + profile.carbs_g,
        )
    return total

