"""Meal logging and meal templates."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from evoshape.domain.logs import MealLog, MealTemplate, MealType
from evoshape.services.undo import DeferredDeletions


class MealLogRepository(Protocol):
    """Persistence interface for meal logs."""

    def list_meals(self, user_id: str, start: date, end: date) -> list[MealLog]:
        """Return meals recorded between two dates, inclusive, newest first."""

    def get_meal(self, user_id: str, meal_id: int) -> MealLog | None:
        """Return a meal by id."""

    def create_meal(self, user_id: str, payload: dict[str, object]) -> MealLog:
        """Insert a meal and return it."""

    def update_meal(
        self, user_id: str, meal_id: int, payload: dict[str, object]
    ) -> MealLog | None:
        """Update a meal and return it, or None when it does not exist."""

    def delete_meal(self, user_id: str, meal_id: int) -> None:
        """Delete a meal."""


class MealTemplateRepository(Protocol):
    """Persistence interface for meal templates."""

    def list_templates(self, user_id: str) -> list[MealTemplate]:
        """Return templates, newest first."""

    def get_template(self, user_id: str, template_id: int) -> MealTemplate | None:
        """Return a template by id."""

    def create_template(self, user_id: str, payload: dict[str, object]) -> MealTemplate:
        """Insert a template and return it."""

    def update_template(
        self, user_id: str, template_id: int, payload: dict[str, object]
    ) -> MealTemplate | None:
        """Update a template and return it."""

    def delete_template(self, user_id: str, template_id: int) -> None:
        """Delete a template."""


@dataclass
class MealLogService:
    """Service for meals, templates and undoable meal deletion."""

    repository: MealLogRepository
    templates: MealTemplateRepository
    deletions: DeferredDeletions

    def list_range(self, user_id: str, start: date, end: date) -> list[MealLog]:
        """Return meals in a date range, hiding those pending deletion."""
        return [
            meal
            for meal in self.repository.list_meals(user_id, start, end)
            if not self.deletions.is_pending(_deletion_key(user_id, meal.id))
        ]

    def list_day(self, user_id: str, day: date) -> list[MealLog]:
        return self.list_range(user_id, day, day)

    def log_meal(  # noqa: PLR0913
        self,
        user_id: str,
        recorded_at: date,
        meal_type: MealType,
        calories: float,
        name: str | None = None,
        template_id: int | None = None,
    ) -> MealLog:
        """Log a meal."""
        return self.repository.create_meal(
            user_id,
            {
                "recorded_at": recorded_at.isoformat(),
                "meal_type": MealType(meal_type).value,
                "name": (name or "").strip() or None,
                "calories": calories,
                "template_id": template_id,
            },
        )

    def update_meal(
        self, user_id: str, meal_id: int, changes: dict[str, object]
    ) -> MealLog | None:
        """Apply partial changes to a meal."""
        payload = dict(changes)
        if "meal_type" in payload:
            payload["meal_type"] = MealType(payload["meal_type"]).value
        if "name" in payload:
            payload["name"] = str(payload["name"] or "").strip() or None
        if "recorded_at" in payload and isinstance(payload["recorded_at"], date):
            payload["recorded_at"] = payload["recorded_at"].isoformat()
        if not payload:
            return self.repository.get_meal(user_id, meal_id)
        return self.repository.update_meal(user_id, meal_id, payload)

    def request_delete(self, user_id: str, meal_id: int) -> bool:
        """Stage a meal for deletion; it is removed once the grace period ends."""
        if self.repository.get_meal(user_id, meal_id) is None:
            return False
        self.deletions.schedule(
            _deletion_key(user_id, meal_id),
            lambda: self.repository.delete_meal(user_id, meal_id),
        )
        return True

    def undo_delete(self, user_id: str, meal_id: int) -> bool:
        """Cancel a staged deletion."""
        return self.deletions.undo(_deletion_key(user_id, meal_id))

    def list_templates(self, user_id: str) -> list[MealTemplate]:
        return self.templates.list_templates(user_id)

    def create_template(self, user_id: str, payload: dict[str, object]) -> MealTemplate:
        return self.templates.create_template(user_id, _clean_template(payload))

    def update_template(
        self, user_id: str, template_id: int, payload: dict[str, object]
    ) -> MealTemplate | None:
        return self.templates.update_template(
            user_id, template_id, _clean_template(payload)
        )

    def delete_template(self, user_id: str, template_id: int) -> None:
        self.templates.delete_template(user_id, template_id)

    def log_from_template(
        self,
        user_id: str,
        template_id: int,
        recorded_at: date,
        meal_type: MealType,
    ) -> MealLog | None:
        """Log a meal copied from a template."""
        template = self.templates.get_template(user_id, template_id)
        if template is None:
            return None
        return self.log_meal(
            user_id,
            recorded_at=recorded_at,
            meal_type=meal_type,
            calories=template.calories,
            name=template.name,
            template_id=template.id,
        )


def _deletion_key(user_id: str, meal_id: int) -> str:
    return f"meal:{user_id}:{meal_id}"


def _clean_template(payload: dict[str, object]) -> dict[str, object]:
    cleaned = dict(payload)
    if "name" in cleaned:
        cleaned["name"] = str(cleaned["name"] or "").strip()
    return cleaned
