"""Request models for the HTTP API."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

NutrientValue = Annotated[float, Field(ge=0, allow_inf_nan=False)] | None


class GoalsUpdate(BaseModel):
    """Partial update of daily goals."""

    calories: NutrientValue = None
    protein_g: NutrientValue = None
    fat_g: NutrientValue = None
    carbs_g: NutrientValue = None


class GoalSuggestionRequest(BaseModel):
    """Body data used to estimate daily goals."""

    age: int = Field(gt=0, lt=130)
    gender: Literal["male", "female"]
    height_cm: float = Field(gt=0)
    weight_kg: float = Field(gt=0)
    goal_weight_kg: float = Field(gt=0)
    activity_level: float = Field(ge=1.0, le=2.5)
    apply: bool = False


class PushTokenRequest(BaseModel):
    """Expo push token registration."""

    push_token: str = Field(min_length=1)


class TimezoneRequest(BaseModel):
    """IANA timezone for evaluating the user's day."""

    timezone: str = Field(min_length=1)


class MealCreate(BaseModel):
    """A meal logged by scan, barcode, search or manual entry."""

    name: str = "meal"
    consumed_at: datetime | None = None
    calories: NutrientValue = None
    protein_g: NutrientValue = None
    fat_g: NutrientValue = None
    carbs_g: NutrientValue = None


class MealCorrection(BaseModel):
    """Nutrient fields to overwrite on a logged meal."""

    calories: NutrientValue = None
    protein_g: NutrientValue = None
    fat_g: NutrientValue = None
    carbs_g: NutrientValue = None


class ReminderCreate(BaseModel):
    """A custom reminder scheduled by the user."""

    scheduled_at: datetime
    message: str = Field(min_length=1)
