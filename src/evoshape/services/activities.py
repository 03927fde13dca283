"""Activity logging."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from evoshape.domain.logs import ActivityLog
from evoshape.services.activity import estimate_activity_calories, estimate_met_from_name
from evoshape.services.weights import WeightService


class ActivityLogRepository(Protocol):
    """Persistence interface for activity logs."""

    def list_activities(self, user_id: str, start: date, end: date) -> list[ActivityLog]:
        """Return activities recorded between two dates, inclusive."""

    def create_activity(self, user_id: str, payload: dict[str, object]) -> ActivityLog:
        """Insert an activity and return it."""

    def delete_activity(self, user_id: str, activity_id: int) -> None:
        """Delete an activity."""


@dataclass
class ActivityLogService:
    """Service for logging activities."""

    repository: ActivityLogRepository
    weight_service: WeightService

    def list_day(self, user_id: str, day: date) -> list[ActivityLog]:
        return self.repository.list_activities(user_id, day, day)

    def list_range(self, user_id: str, start: date, end: date) -> list[ActivityLog]:
        return self.repository.list_activities(user_id, start, end)

    def log_activity(  # noqa: PLR0913
        self,
        user_id: str,
        recorded_at: date,
        activity_type: str,
        duration_min: float,
        calories_burned: float | None = None,
        met: float | None = None,
    ) -> ActivityLog:
        """Log an activity, estimating the burn when it is not given.

        The estimate uses the given MET, or one guessed from the activity
        name, with the user's latest weight.
        """
        activity_type = activity_type.strip()
        if not activity_type:
            raise ValueError("activity_type is required")
        if calories_burned is None:
            calories_burned = self.estimate(user_id, activity_type, duration_min, met)
            if calories_burned <= 0:
                raise ValueError("Unable to estimate calories_burned")
        return self.repository.create_activity(
            user_id,
            {
                "recorded_at": recorded_at.isoformat(),
                "activity_type": activity_type,
                "duration_min": duration_min,
                "calories_burned": round(calories_burned),
            },
        )

    def estimate(
        self,
        user_id: str,
        activity_type: str,
        duration_min: float,
        met: float | None = None,
    ) -> float:
        """Estimate the burn for an activity; 0 when it cannot be estimated."""
        resolved_met = met if met is not None else estimate_met_from_name(activity_type)
        latest = self.weight_service.latest(user_id)
        if resolved_met is None or latest is None:
            return 0.0
        return estimate_activity_calories(resolved_met, latest.weight_kg, duration_min)

    def delete(self, user_id: str, activity_id: int) -> None:
        self.repository.delete_activity(user_id, activity_id)
