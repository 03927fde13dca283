"""Supabase repository for activity logs."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from evoshape.adapters.supabase_errors import (
    optional_float,
    parse_date,
    parse_datetime,
    storage_errors,
)
from evoshape.domain.errors import StorageError
from evoshape.domain.logs import ActivityLog
from evoshape.services.activities import ActivityLogRepository

_COLUMNS = "id, user_id, recorded_at, activity_type, duration_min, calories_burned, created_at"


@dataclass
class SupabaseActivityRepository(ActivityLogRepository):
    """Supabase implementation for the activity_logs table."""

    client: Client

    def list_activities(self, user_id: str, start: date, end: date) -> list[ActivityLog]:
        with storage_errors():
            response = (
                self.client.table("activity_logs")
                .select(_COLUMNS)
                .eq("user_id", user_id)
                .gte("recorded_at", start.isoformat())
                .lte("recorded_at", end.isoformat())
                .order("recorded_at", desc=True)
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_activity(row) for row in response.data or []]

    def create_activity(self, user_id: str, payload: dict[str, object]) -> ActivityLog:
        with storage_errors():
            response = (
                self.client.table("activity_logs")
                .insert({"user_id": user_id, **payload})
                .execute()
            )
        if not response.data:
            raise StorageError("Failed to create activity log")
        return _parse_activity(response.data[0])

    def delete_activity(self, user_id: str, activity_id: int) -> None:
        with storage_errors():
            self.client.table("activity_logs").delete().eq("id", activity_id).eq(
                "user_id", user_id
            ).execute()


def _parse_activity(row: dict[str, object]) -> ActivityLog:
    return ActivityLog(
        id=int(row["id"]),
        user_id=str(row["user_id"]),
        recorded_at=parse_date(row["recorded_at"]),
        activity_type=str(row.get("activity_type") or ""),
        duration_min=optional_float(row.get("duration_min")),
        calories_burned=optional_float(row.get("calories_burned")),
        created_at=parse_datetime(row.get("created_at")),
    )
