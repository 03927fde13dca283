"""Activity energy estimation."""

import math
import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ActivityPreset:
    """A common activity with its MET value."""

    id: str
    label: str
    met: float


ACTIVITY_LIBRARY: list[ActivityPreset] = [
    ActivityPreset("walk", "Marche moderee", 3.5),
    ActivityPreset("run", "Course", 9.8),
    ActivityPreset("cycle", "Velo", 7.5),
    ActivityPreset("strength", "Musculation", 6),
    ActivityPreset("yoga", "Yoga", 2.5),
    ActivityPreset("swim", "Natation", 8),
]

_MET_KEYWORDS: list[tuple[re.Pattern[str], float]] = [
    (re.compile(r"(run|course|jog|sprint)", re.IGNORECASE), 9.8),
    (re.compile(r"(walk|marche|rando|hike)", re.IGNORECASE), 6),
    (re.compile(r"(cycle|velo|bike|spin)", re.IGNORECASE), 7.5),
    (re.compile(r"(swim|natation)", re.IGNORECASE), 8),
    (re.compile(r"(row|rameur)", re.IGNORECASE), 7),
    (re.compile(r"(hiit|crossfit|burpee)", re.IGNORECASE), 8.5),
    (
        re.compile(
            r"(strength|muscu|weight|halt(e|é)re|barbell|dumbbell)", re.IGNORECASE
        ),
        6,
    ),
    (re.compile(r"(yoga|pilates|stretch)", re.IGNORECASE), 2.5),
    (re.compile(r"(elliptical|elliptique)", re.IGNORECASE), 5),
    (re.compile(r"(stair|step|mont(é|e)e)", re.IGNORECASE), 8.8),
    (re.compile(r"(dance|zumba)", re.IGNORECASE), 6),
]


def estimate_activity_calories(met: object, weight_kg: object, minutes: object) -> float:
    """Estimate kcal burned: ``met * 3.5 * weight_kg / 200`` per minute.

    Returns 0 when any input is non-numeric, non-finite or not positive.
    """
    values = []
    for raw in (met, weight_kg, minutes):
        if isinstance(raw, bool):
            return 0.0
        try:
            value = float(raw)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(value) or value <= 0:
            return 0.0
        values.append(value)
    met_value, weight_value, minutes_value = values
    return met_value * 3.5 * weight_value / 200 * minutes_value


def estimate_met_from_name(name: str) -> float | None:
    """Guess a MET value from an activity name."""
    value = name.strip()
    if not value:
        return None
    for pattern, met in _MET_KEYWORDS:
        if pattern.search(value):
            return met
    return None


def find_preset(preset_id: str) -> ActivityPreset | None:
    """Return the preset with the given id."""
    return next((preset for preset in ACTIVITY_LIBRARY if preset.id == preset_id), None)
