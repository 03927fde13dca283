"""Domain models for food and exercise catalog lookups."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FoodSummary:
    """Search hit from USDA FoodData Central."""

    fdc_id: int
    description: str
    brand_owner: str | None
    data_type: str | None


@dataclass(frozen=True)
class FoodDetails:
    """Calorie details for a food, from FDC or Open Food Facts."""

    source: str
    description: str
    brand_owner: str | None
    calories_per_serving: float | None
    calories_per_100g: float | None
    serving_size: float | None
    serving_size_unit: str | None
    fdc_id: int | None = None
    data_type: str | None = None


@dataclass(frozen=True)
class ExerciseSummary:
    """Exercise match from the wger catalog."""

    id: int
    name: str
    category: str | None
    equipment: list[str] = field(default_factory=list)
