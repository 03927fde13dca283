"""Calorie and weight metrics derived from log collections.

Everything here is a pure function of its inputs. Log items may be domain
dataclasses or plain mappings with the same field names, so rows fetched
straight from storage can be passed in without conversion.
"""

import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta

from evoshape.domain.profiles import Profile
from evoshape.domain.stats import CalorieSummary, DailyTarget, WeekSummary

KCAL_PER_KG = 7700
DEFAULT_TARGET = 2000
ACTIVITY_FACTOR = 1.2
WEEK_DAYS = 7


def calculate_delta_7_days(entries: Iterable[object]) -> float | None:
    """Return the weight change over the week leading up to the latest entry.

    The comparison point is the newest entry dated at least seven days before
    the latest one, or the oldest entry when none is that old. Entries sharing
    a date keep their incoming order (the sort is stable), so the first one
    wins.
    """
    ordered = sorted(entries, key=_entry_date, reverse=True)
    if not ordered:
        return None

    latest = _to_number(_field(ordered[0], "weight_kg"))
    if latest is None:
        return None

    target = _entry_date(ordered[0]) - timedelta(days=WEEK_DAYS)
    compare = next(
        (entry for entry in ordered if _entry_date(entry) <= target), ordered[-1]
    )
    compare_value = _to_number(_field(compare, "weight_kg"))
    if compare_value is None:
        return None
    return latest - compare_value


def aggregate_calories(
    meals: Iterable[object],
    activities: Iterable[object],
    target: float | int | None,
) -> CalorieSummary:
    """Compute consumed, burned and net calories against a daily target."""
    consumed = math.fsum(_calories(_field(meal, "calories")) for meal in meals)
    burned = math.fsum(
        _calories(_field(activity, "calories_burned")) for activity in activities
    )
    net = consumed - burned

    objective = _to_number(target)
    if objective is None or not math.isfinite(objective) or objective <= 0:
        return CalorieSummary(
            consumed=consumed,
            burned=burned,
            net=net,
            target=None,
            delta=None,
            remaining=None,
            weight_change_kg=None,
            progress_ratio=0.0,
            over_budget=False,
        )

    delta = net - objective
    remaining = objective - net
    return CalorieSummary(
        consumed=consumed,
        burned=burned,
        net=net,
        target=objective,
        delta=delta,
        remaining=remaining,
        weight_change_kg=delta / KCAL_PER_KG,
        progress_ratio=min(max(net / objective, 0.0), 1.0),
        over_budget=remaining < 0,
    )


def compute_daily_target(
    profile: Profile | None,
    latest_weight_kg: float | None,
    burned: float,
    today: date,
) -> DailyTarget:
    """Return the gauge objective, preferring a Mifflin-St Jeor estimate."""
    base_target = DEFAULT_TARGET
    if profile is not None and profile.target_calories is not None:
        base_target = _round_half_up(profile.target_calories)

    sex = profile.sex if profile else None
    height_cm = _to_number(profile.height_cm) if profile else None
    birth_year = profile.birth_year if profile else None
    weight_kg = _to_number(latest_weight_kg)
    age = today.year - birth_year if birth_year else None

    has_core = bool(
        sex
        and height_cm
        and birth_year
        and weight_kg is not None
        and math.isfinite(weight_kg)
        and age is not None
    )
    if has_core:
        bmr_base = 10 * weight_kg + 6.25 * height_cm - 5 * age
        bmr = None
        if sex == "male":
            bmr = bmr_base + 5
        elif sex == "female":
            bmr = bmr_base - 161
        if bmr and math.isfinite(bmr):
            base_target = _round_half_up(bmr * ACTIVITY_FACTOR)

    adjusted = max(0, _round_half_up(base_target + burned))
    return DailyTarget(
        base_target=base_target, adjusted_target=adjusted, has_core=has_core
    )


def net_series(
    meals: Iterable[object],
    activities: Iterable[object],
    end: date,
    days: int,
) -> list[float]:
    """Return daily net calories for ``days`` dates ending on ``end``."""
    consumed = _totals_by_date(meals, "calories")
    burned = _totals_by_date(activities, "calories_burned")
    dates = [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    return [consumed.get(day, 0.0) - burned.get(day, 0.0) for day in dates]


def summarize_week(
    meals: Iterable[object],
    activities: Iterable[object],
    weights: Iterable[object],
    today: date,
) -> WeekSummary:
    """Roll up the last seven days for the dashboard."""
    meal_list = list(meals)
    series = net_series(meal_list, activities, today, WEEK_DAYS)
    weekly_net = math.fsum(series)

    normalized = []
    for entry in weights:
        value = _to_number(_field(entry, "weight_kg"))
        if value is None or not math.isfinite(value):
            continue
        normalized.append((_entry_date(entry), value))
    normalized.sort(key=lambda item: item[0])
    recent = [value for _, value in normalized[-WEEK_DAYS:]]

    meal_type_totals: dict[str, float] = {}
    for meal in meal_list:
        if _entry_date(meal) != today:
            continue
        meal_type = str(_field(meal, "meal_type") or "snack")
        meal_type_totals[meal_type] = meal_type_totals.get(meal_type, 0.0) + _calories(
            _field(meal, "calories")
        )

    return WeekSummary(
        net_series=series,
        weekly_net=weekly_net,
        average_net=weekly_net / WEEK_DAYS,
        average_weight_kg=math.fsum(recent) / len(recent) if recent else None,
        latest_weight_kg=recent[-1] if recent else None,
        meal_type_totals=meal_type_totals,
    )


def filter_day(items: Iterable[object], day: date) -> list[object]:
    """Return the items recorded on ``day``."""
    return [item for item in items if _entry_date(item) == day]


def _totals_by_date(items: Iterable[object], column: str) -> dict[date, float]:
    totals: dict[date, float] = {}
    for item in items:
        day = _entry_date(item)
        totals[day] = totals.get(day, 0.0) + _calories(_field(item, column))
    return totals


def _field(item: object, name: str) -> object:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _entry_date(item: object) -> date:
    return to_date(_field(item, "recorded_at"))


def to_date(value: object) -> date:
    """Coerce a date, datetime or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _to_number(value: object) -> float | None:
    """Return ``value`` as a float, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _calories(value: object) -> float:
    number = _to_number(value)
    if number is None or not math.isfinite(number):
        return 0.0
    return number


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
