"""Weight, meal, template and activity log endpoints."""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response, status

from evoshape.api.dependencies import get_container, require_user
from evoshape.api.models import (
    ActivityIn,
    MealIn,
    MealTemplateIn,
    MealTemplateUpdate,
    MealUpdate,
    TemplateLogIn,
    WeightIn,
)
from evoshape.config import parse_limit
from evoshape.containers import AppContainer
from evoshape.domain.logs import ActivityLog, MealLog, MealTemplate, WeightEntry
from evoshape.services.activity import ACTIVITY_LIBRARY

MAX_WEIGHT_HISTORY = 365

router = APIRouter(tags=["logs"])


@router.get("/weights")
async def list_weights(
    limit: str | None = None,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return recent weigh-ins with the 7-day change."""
    entries = container.weight_service.list_recent(
        user_id, parse_limit(limit, 30, MAX_WEIGHT_HISTORY)
    )
    return {
        "items": entries,
        "delta_7_days": container.weight_service.delta_7_days(user_id),
    }


@router.put("/weights")
async def record_weight(
    body: WeightIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> WeightEntry:
    return container.weight_service.record(user_id, body.recorded_at, body.weight_kg)


@router.delete("/weights/{entry_id}")
async def delete_weight(
    entry_id: int,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    container.weight_service.delete(user_id, entry_id)
    return {"ok": True}


@router.get("/meals")
async def list_meals(
    day: date | None = None,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, list[MealLog]]:
    """Return the day's meals, hiding those pending deletion."""
    return {
        "items": container.meal_log_service.list_day(user_id, day or date.today())
    }


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def create_meal(
    body: MealIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> MealLog:
    return container.meal_log_service.log_meal(
        user_id,
        recorded_at=body.recorded_at,
        meal_type=body.meal_type,
        calories=body.calories,
        name=body.name,
        template_id=body.template_id,
    )


@router.patch("/meals/{meal_id}")
async def update_meal(
    meal_id: int,
    body: MealUpdate,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> MealLog:
    changes = {
        key: value
        for key, value in body.model_dump(exclude_unset=True).items()
        if value is not None or key == "name"
    }
    meal = container.meal_log_service.update_meal(user_id, meal_id, changes)
    if meal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found")
    return meal


@router.delete("/meals/{meal_id}", status_code=status.HTTP_202_ACCEPTED)
async def delete_meal(
    meal_id: int,
    response: Response,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Stage a meal deletion that can be undone during the grace period."""
    if not container.meal_log_service.request_delete(user_id, meal_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found")
    if container.deletions.immediate:
        response.status_code = status.HTTP_200_OK
        return {"status": "deleted", "undo_seconds": 0}
    return {"status": "pending", "undo_seconds": container.deletions.delay_seconds}


@router.post("/meals/{meal_id}/undo")
async def undo_delete_meal(
    meal_id: int,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    if not container.meal_log_service.undo_delete(user_id, meal_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No pending deletion"
        )
    return {"ok": True}


@router.get("/meal-templates")
async def list_templates(
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, list[MealTemplate]]:
    return {"items": container.meal_log_service.list_templates(user_id)}


@router.post("/meal-templates", status_code=status.HTTP_201_CREATED)
async def create_template(
    body: MealTemplateIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> MealTemplate:
    return container.meal_log_service.create_template(user_id, body.model_dump())


@router.patch("/meal-templates/{template_id}")
async def update_template(
    template_id: int,
    body: MealTemplateUpdate,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> MealTemplate:
    template = container.meal_log_service.update_template(
        user_id, template_id, body.model_dump(exclude_none=True)
    )
    if template is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Template not found"
        )
    return template


@router.delete("/meal-templates/{template_id}")
async def delete_template(
    template_id: int,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    container.meal_log_service.delete_template(user_id, template_id)
    return {"ok": True}


@router.post("/meal-templates/{template_id}/log", status_code=status.HTTP_201_CREATED)
async def log_from_template(
    template_id: int,
    body: TemplateLogIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> MealLog:
    """Log a meal with the template's name and calories."""
    meal = container.meal_log_service.log_from_template(
        user_id, template_id, body.recorded_at, body.meal_type
    )
    if meal is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Template not found"
        )
    return meal


@router.get("/activities/presets")
async def activity_presets() -> dict[str, list[dict[str, object]]]:
    return {"items": [asdict(preset) for preset in ACTIVITY_LIBRARY]}


@router.get("/activities")
async def list_activities(
    day: date | None = None,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, list[ActivityLog]]:
    return {
        "items": container.activity_log_service.list_day(
            user_id, day or date.today()
        )
    }


@router.post("/activities", status_code=status.HTTP_201_CREATED)
async def create_activity(
    body: ActivityIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> ActivityLog:
    """Log an activity, estimating the burn from MET and latest weight if needed."""
    try:
        return container.activity_log_service.log_activity(
            user_id,
            recorded_at=body.recorded_at,
            activity_type=body.activity_type,
            duration_min=body.duration_min,
            calories_burned=body.calories_burned,
            met=body.met,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc


@router.delete("/activities/{activity_id}")
async def delete_activity(
    activity_id: int,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    container.activity_log_service.delete(user_id, activity_id)
    return {"ok": True}
