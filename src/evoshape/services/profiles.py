"""Profile service."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from evoshape.domain.profiles import Profile


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_profile(self, user_id: str) -> Profile | None:
        """Return the profile row, if present."""

    def upsert_profile(self, profile: Profile, updated_at: datetime) -> None:
        """Insert or update the profile keyed on its id."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ProfileService:
    """Service for reading and saving the user's profile."""

    repository: ProfileRepository
    clock: Callable[[], datetime] = field(default=_utc_now)

    def get(self, user_id: str) -> Profile:
        """Return the stored profile, or an empty one."""
        return self.repository.get_profile(user_id) or Profile(id=user_id)

    def save(self, profile: Profile) -> Profile:
        """Persist the profile, blank text fields stored as None."""
        cleaned = Profile(
            id=profile.id,
            display_name=(profile.display_name or "").strip() or None,
            sex=(profile.sex or "").strip() or None,
            birth_year=profile.birth_year or None,
            height_cm=profile.height_cm or None,
            target_calories=profile.target_calories or None,
        )
        self.repository.upsert_profile(cleaned, self.clock())
        return cleaned
