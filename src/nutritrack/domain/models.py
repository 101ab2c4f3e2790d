"""Domain models for NutriTrack users."""

from dataclasses import dataclass
from uuid import UUID

from nutritrack.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    goals: MacroProfile
    push_token: str | None = None
    timezone: str | None = None
