"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from nutritrack.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class MealRecord:
    """A logged meal with its nutrient snapshot."""

    id: UUID
    user_id: UUID
    name: str
    consumed_at: datetime
    macros: MacroProfile
