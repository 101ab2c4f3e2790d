"""Domain models for nutrition reporting."""

from dataclasses import dataclass
from datetime import date

from nutritrack.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class DailyTotals:
    """Summed nutrients of one local calendar day.

    ``reached`` and ``all_reached`` stay empty until the day is evaluated
    against the user's goals.
    """

    day: date
    totals: MacroProfile
    reached: tuple[str, ...] = ()
    all_reached: bool = False


@dataclass(frozen=True)
class PeriodSummary:
    """Per-day totals of a reporting period and their daily average."""

    daily: list[DailyTotals]
    average: MacroProfile

    @property
    def days_all_reached(self) -> int:
        """Number of days on which all four goals were reached."""
        return sum(1 for entry in self.daily if entry.all_reached)
