"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from evoshape.adapters.supabase_errors import optional_float, storage_errors
from evoshape.domain.profiles import Profile
from evoshape.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the profiles table."""

    client: Client

    def get_profile(self, user_id: str) -> Profile | None:
        with storage_errors():
            response = (
                self.client.table("profiles")
                .select("id, display_name, sex, birth_year, height_cm, target_calories")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        row = response.data[0]
        birth_year = row.get("birth_year")
        return Profile(
            id=str(row["id"]),
            display_name=row.get("display_name"),
            sex=row.get("sex"),
            birth_year=int(birth_year) if birth_year is not None else None,
            height_cm=optional_float(row.get("height_cm")),
            target_calories=optional_float(row.get("target_calories")),
        )

    def upsert_profile(self, profile: Profile, updated_at: datetime) -> None:
        """Insert or update the profile keyed on its id."""
        with storage_errors():
            self.client.table("profiles").upsert(
                {
                    "id": profile.id,
                    "display_name": profile.display_name,
                    "sex": profile.sex,
                    "birth_year": profile.birth_year,
                    "height_cm": profile.height_cm,
                    "target_calories": profile.target_calories,
                    "updated_at": updated_at.isoformat(),
                },
                on_conflict="id",
            ).execute()
