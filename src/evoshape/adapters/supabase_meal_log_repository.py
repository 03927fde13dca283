"""Supabase repositories for meal logs and meal templates."""

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
from evoshape.domain.logs import MealLog, MealTemplate
from evoshape.services.meals import MealLogRepository, MealTemplateRepository

_MEAL_COLUMNS = "id, user_id, recorded_at, meal_type, name, calories, template_id, created_at"
_TEMPLATE_COLUMNS = "id, user_id, name, calories, protein_g, carbs_g, fat_g"


@dataclass
class SupabaseMealLogRepository(MealLogRepository):
    """Supabase implementation for meal logs."""

    client: Client

    def list_meals(self, user_id: str, start: date, end: date) -> list[MealLog]:
        """Return meals between two dates, newest first."""
        with storage_errors():
            response = (
                self.client.table("meal_logs")
                .select(_MEAL_COLUMNS)
                .eq("user_id", user_id)
                .gte("recorded_at", start.isoformat())
                .lte("recorded_at", end.isoformat())
                .order("recorded_at", desc=True)
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_meal(row) for row in response.data or []]

    def get_meal(self, user_id: str, meal_id: int) -> MealLog | None:
        with storage_errors():
            response = (
                self.client.table("meal_logs")
                .select(_MEAL_COLUMNS)
                .eq("id", meal_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def create_meal(self, user_id: str, payload: dict[str, object]) -> MealLog:
        """Create a meal row and return it."""
        with storage_errors():
            response = (
                self.client.table("meal_logs")
                .insert({"user_id": user_id, **payload})
                .execute()
            )
        if not response.data:
            raise StorageError("Failed to create meal log")
        return _parse_meal(response.data[0])

    def update_meal(
        self, user_id: str, meal_id: int, payload: dict[str, object]
    ) -> MealLog | None:
        with storage_errors():
            response = (
                self.client.table("meal_logs")
                .update(payload)
                .eq("id", meal_id)
                .eq("user_id", user_id)
                .execute()
            )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def delete_meal(self, user_id: str, meal_id: int) -> None:
        with storage_errors():
            self.client.table("meal_logs").delete().eq("id", meal_id).eq(
                "user_id", user_id
            ).execute()


@dataclass
class SupabaseMealTemplateRepository(MealTemplateRepository):
    """Supabase implementation for meal templates."""

    client: Client

    def list_templates(self, user_id: str) -> list[MealTemplate]:
        with storage_errors():
            response = (
                self.client.table("meal_templates")
                .select(_TEMPLATE_COLUMNS)
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_template(row) for row in response.data or []]

    def get_template(self, user_id: str, template_id: int) -> MealTemplate | None:
        with storage_errors():
            response = (
                self.client.table("meal_templates")
                .select(_TEMPLATE_COLUMNS)
                .eq("id", template_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_template(response.data[0])

    def create_template(self, user_id: str, payload: dict[str, object]) -> MealTemplate:
        with storage_errors():
            response = (
                self.client.table("meal_templates")
                .insert({"user_id": user_id, **payload})
                .execute()
            )
        if not response.data:
            raise StorageError("Failed to create meal template")
        return _parse_template(response.data[0])

    def update_template(
        self, user_id: str, template_id: int, payload: dict[str, object]
    ) -> MealTemplate | None:
        with storage_errors():
            response = (
                self.client.table("meal_templates")
                .update(payload)
                .eq("id", template_id)
                .eq("user_id", user_id)
                .execute()
            )
        if not response.data:
            return None
        return _parse_template(response.data[0])

    def delete_template(self, user_id: str, template_id: int) -> None:
        with storage_errors():
            self.client.table("meal_templates").delete().eq("id", template_id).eq(
                "user_id", user_id
            ).execute()


def _parse_meal(row: dict[str, object]) -> MealLog:
    template_id = row.get("template_id")
    return MealLog(
        id=int(row["id"]),
        user_id=str(row["user_id"]),
        recorded_at=parse_date(row["recorded_at"]),
        meal_type=str(row.get("meal_type") or ""),
        name=row.get("name"),
        calories=optional_float(row.get("calories")),
        template_id=int(template_id) if template_id is not None else None,
        created_at=parse_datetime(row.get("created_at")),
    )


def _parse_template(row: dict[str, object]) -> MealTemplate:
    return MealTemplate(
        id=int(row["id"]),
        user_id=str(row["user_id"]),
        name=str(row.get("name") or ""),
        calories=float(row.get("calories") or 0.0),
        protein_g=optional_float(row.get("protein_g")),
        carbs_g=optional_float(row.get("carbs_g")),
        fat_g=optional_float(row.get("fat_g")),
    )
