"""Domain models for derived calorie and weight figures."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class CalorieSummary:
    """Derived calorie budget for a set of logs.

    ``delta``, ``remaining`` and ``weight_change_kg`` are None when no target
    is defined.
    """

    consumed: float
    burned: float
    net: float
    target: float | None
    delta: float | None
    remaining: float | None
    weight_change_kg: float | None
    progress_ratio: float
    over_budget: bool

    @property
    def has_target(self) -> bool:
        return self.target is not None


@dataclass(frozen=True)
class DailyTarget:
    """Calorie objective for the gauge."""

    base_target: int
    adjusted_target: int
    has_core: bool


@dataclass(frozen=True)
class WeekSummary:
    """Seven-day rollup shown on the dashboard."""

    net_series: list[float]
    weekly_net: float
    average_net: float
    average_weight_kg: float | None
    latest_weight_kg: float | None
    meal_type_totals: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class DashboardView:
    """Everything the daily dashboard shows."""

    day: date
    calories: CalorieSummary
    week: WeekSummary
    delta_7_days: float | None


@dataclass(frozen=True)
class GaugeView:
    """Calorie gauge against the computed daily target."""

    day: date
    calories: CalorieSummary
    target: DailyTarget
    net_series_7: list[float]
    net_series_30: list[float]
