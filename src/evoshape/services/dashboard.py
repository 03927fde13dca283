"""Dashboard and gauge figures for a user's day."""

from dataclasses import dataclass
from datetime import date, timedelta

from evoshape.domain.logs import WeightEntry
from evoshape.domain.stats import DashboardView, GaugeView
from evoshape.services.activities import ActivityLogService
from evoshape.services.meals import MealLogService
from evoshape.services.metrics import (
    aggregate_calories,
    calculate_delta_7_days,
    compute_daily_target,
    filter_day,
    net_series,
    summarize_week,
)
from evoshape.services.profiles import ProfileService
from evoshape.services.weights import WeightService

WEIGHT_HISTORY = 60
REPORT_DAYS = 30


@dataclass
class DashboardService:
    """Reads the user's logs and derives the figures shown on screen.

    Nothing computed here is stored; every call starts from the current logs.
    """

    meal_log_service: MealLogService
    activity_log_service: ActivityLogService
    weight_service: WeightService
    profile_service: ProfileService

    def get_dashboard(self, user_id: str, today: date) -> DashboardView:
        """Return today's budget against the profile target plus the week."""
        start = today - timedelta(days=6)
        meals = self.meal_log_service.list_range(user_id, start, today)
        activities = self.activity_log_service.list_range(user_id, start, today)
        weights = self._weights_until(user_id, today)
        profile = self.profile_service.get(user_id)

        return DashboardView(
            day=today,
            calories=aggregate_calories(
                filter_day(meals, today),
                filter_day(activities, today),
                profile.target_calories,
            ),
            week=summarize_week(meals, activities, weights, today),
            delta_7_days=calculate_delta_7_days(weights),
        )

    def get_gauge(self, user_id: str, today: date) -> GaugeView:
        """Return today's budget against the computed daily target."""
        start = today - timedelta(days=REPORT_DAYS - 1)
        meals = self.meal_log_service.list_range(user_id, start, today)
        activities = self.activity_log_service.list_range(user_id, start, today)
        profile = self.profile_service.get(user_id)
        latest = max(
            self._weights_until(user_id, today),
            key=lambda entry: entry.recorded_at,
            default=None,
        )

        today_meals = filter_day(meals, today)
        today_activities = filter_day(activities, today)
        burned = aggregate_calories([], today_activities, None).burned
        target = compute_daily_target(
            profile, latest.weight_kg if latest else None, burned, today
        )
        return GaugeView(
            day=today,
            calories=aggregate_calories(
                today_meals, today_activities, target.adjusted_target
            ),
            target=target,
            net_series_7=net_series(meals, activities, today, 7),
            net_series_30=net_series(meals, activities, today, REPORT_DAYS),
        )

    def _weights_until(self, user_id: str, today: date) -> list[WeightEntry]:
        """Return recent weigh-ins, ignoring any recorded after ``today``."""
        return [
            entry
            for entry in self.weight_service.list_recent(user_id, WEIGHT_HISTORY)
            if entry.recorded_at <= today
        ]
