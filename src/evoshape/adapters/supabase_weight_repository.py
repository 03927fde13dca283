"""Supabase repository for body weight entries."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from evoshape.adapters.supabase_errors import parse_date, storage_errors
from evoshape.domain.errors import StorageError
from evoshape.domain.logs import WeightEntry
from evoshape.services.weights import WeightRepository


@dataclass
class SupabaseWeightRepository(WeightRepository):
    """Supabase implementation for the weights table."""

    client: Client

    def list_weights(self, user_id: str, limit: int) -> list[WeightEntry]:
        """Return the most recent entries, newest first."""
        with storage_errors():
            response = (
                self.client.table("weights")
                .select("id, user_id, recorded_at, weight_kg")
                .eq("user_id", user_id)
                .order("recorded_at", desc=True)
                .limit(limit)
                .execute()
            )
        return [_parse_weight(row) for row in response.data or []]

    def upsert_weight(
        self, user_id: str, recorded_at: date, weight_kg: float
    ) -> WeightEntry:
        """Insert or replace the entry for the user and date."""
        with storage_errors():
            response = (
                self.client.table("weights")
                .upsert(
                    {
                        "user_id": user_id,
                        "recorded_at": recorded_at.isoformat(),
                        "weight_kg": weight_kg,
                    },
                    on_conflict="user_id,recorded_at",
                )
                .execute()
            )
        if not response.data:
            raise StorageError("Failed to save weight")
        return _parse_weight(response.data[0])

    def delete_weight(self, user_id: str, entry_id: int) -> None:
        with storage_errors():
            self.client.table("weights").delete().eq("id", entry_id).eq(
                "user_id", user_id
            ).execute()


def _parse_weight(row: dict[str, object]) -> WeightEntry:
    return WeightEntry(
        id=int(row["id"]),
        user_id=str(row["user_id"]),
        recorded_at=parse_date(row["recorded_at"]),
        weight_kg=float(row["weight_kg"]),
    )
