"""Body weight logging."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from evoshape.domain.logs import WeightEntry
from evoshape.services.metrics import calculate_delta_7_days


class WeightRepository(Protocol):
    """Persistence interface for weight entries."""

    def list_weights(self, user_id: str, limit: int) -> list[WeightEntry]:
        """Return the most recent entries, newest first."""

    def upsert_weight(
        self, user_id: str, recorded_at: date, weight_kg: float
    ) -> WeightEntry:
        """Insert or replace the entry for the user and date."""

    def delete_weight(self, user_id: str, entry_id: int) -> None:
        """Delete an entry."""


@dataclass
class WeightService:
    """Service for recording and reading body weight."""

    repository: WeightRepository

    def list_recent(self, user_id: str, limit: int = 30) -> list[WeightEntry]:
        return self.repository.list_weights(user_id, limit)

    def record(self, user_id: str, recorded_at: date, weight_kg: float) -> WeightEntry:
        """Store the weight for a day, replacing any existing value."""
        return self.repository.upsert_weight(user_id, recorded_at, weight_kg)

    def delete(self, user_id: str, entry_id: int) -> None:
        self.repository.delete_weight(user_id, entry_id)

    def latest(self, user_id: str) -> WeightEntry | None:
        """Return the newest entry, if any."""
        entries = self.repository.list_weights(user_id, 1)
        return entries[0] if entries else None

    def delta_7_days(self, user_id: str, history: int = 60) -> float | None:
        """Return the 7-day weight change from the stored history."""
        return calculate_delta_7_days(self.repository.list_weights(user_id, history))
