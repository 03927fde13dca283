"""Domain models for user logs."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class MealType(str, Enum):
    """Meal slots a log can be filed under."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class WeightEntry:
    """A body weight measurement, unique per user and day."""

    id: int
    user_id: str
    recorded_at: date
    weight_kg: float


@dataclass(frozen=True)
class MealLog:
    """A logged meal."""

    id: int
    user_id: str
    recorded_at: date
    meal_type: str
    name: str | None
    calories: float | None
    template_id: int | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class MealTemplate:
    """Reusable meal preset."""

    id: int
    user_id: str
    name: str
    calories: float
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None


@dataclass(frozen=True)
class ActivityLog:
    """A logged activity with its energy burn."""

    id: int
    user_id: str
    recorded_at: date
    activity_type: str
    duration_min: float | None
    calories_burned: float | None
    created_at: datetime | None = None
