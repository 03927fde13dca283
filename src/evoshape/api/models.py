"""Pydantic request models for the JSON API."""

from datetime import date

from pydantic import BaseModel, Field

from evoshape.domain.logs import MealType

MIN_WEIGHT_KG = 30
MAX_WEIGHT_KG = 300
MIN_MEAL_KCAL = 50
MAX_MEAL_KCAL = 5000


class WeightIn(BaseModel):
    """Weigh-in for a day; replaces any existing value for that day."""

    recorded_at: date
    weight_kg: float = Field(ge=MIN_WEIGHT_KG, le=MAX_WEIGHT_KG)


class MealIn(BaseModel):
    """New meal log."""

    recorded_at: date
    meal_type: MealType
    calories: float = Field(ge=MIN_MEAL_KCAL, le=MAX_MEAL_KCAL)
    name: str | None = Field(default=None, max_length=200)
    template_id: int | None = None


class MealUpdate(BaseModel):
    """Partial meal update."""

    recorded_at: date | None = None
    meal_type: MealType | None = None
    calories: float | None = Field(default=None, ge=MIN_MEAL_KCAL, le=MAX_MEAL_KCAL)
    name: str | None = Field(default=None, max_length=200)


class MealTemplateIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    calories: float = Field(ge=MIN_MEAL_KCAL, le=MAX_MEAL_KCAL)
    protein_g: float | None = Field(default=None, ge=0)
    carbs_g: float | None = Field(default=None, ge=0)
    fat_g: float | None = Field(default=None, ge=0)


class MealTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    calories: float | None = Field(default=None, ge=MIN_MEAL_KCAL, le=MAX_MEAL_KCAL)
    protein_g: float | None = Field(default=None, ge=0)
    carbs_g: float | None = Field(default=None, ge=0)
    fat_g: float | None = Field(default=None, ge=0)


class TemplateLogIn(BaseModel):
    """Logs a meal copied from a template."""

    recorded_at: date
    meal_type: MealType


class ActivityIn(BaseModel):
    """New activity; the burn is estimated when ``calories_burned`` is absent."""

    recorded_at: date
    activity_type: str = Field(min_length=1, max_length=200)
    duration_min: float = Field(ge=0, le=24 * 60)
    calories_burned: float | None = Field(default=None, ge=0)
    met: float | None = Field(default=None, gt=0)


class ProfileIn(BaseModel):
    display_name: str | None = Field(default=None, max_length=120)
    sex: str | None = None
    birth_year: int | None = Field(default=None, ge=1900, le=2100)
    height_cm: float | None = Field(default=None, gt=0, le=300)
    target_calories: float | None = Field(default=None, ge=0, le=10000)
