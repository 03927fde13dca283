"""Profile domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Profile:
    """Per-user profile; ``id`` is the user id."""

    id: str
    display_name: str | None = None
    sex: str | None = None
    birth_year: int | None = None
    height_cm: float | None = None
    target_calories: float | None = None
