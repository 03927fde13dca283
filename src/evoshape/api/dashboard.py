"""Profile, dashboard and gauge endpoints."""

from datetime import date

from fastapi import APIRouter, Depends

from evoshape.api.dependencies import get_container, require_user
from evoshape.api.models import ProfileIn
from evoshape.containers import AppContainer
from evoshape.domain.profiles import Profile
from evoshape.domain.stats import DashboardView, GaugeView

router = APIRouter(tags=["dashboard"])


@router.get("/profile")
async def get_profile(
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> Profile:
    return container.profile_service.get(user_id)


@router.put("/profile")
async def save_profile(
    body: ProfileIn,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> Profile:
    return container.profile_service.save(Profile(id=user_id, **body.model_dump()))


@router.get("/dashboard")
async def dashboard(
    day: date | None = None,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> DashboardView:
    """Return the day's calorie budget, weekly rollup and weight change."""
    return container.dashboard_service.get_dashboard(user_id, day or date.today())


@router.get("/gauge")
async def gauge(
    day: date | None = None,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> GaugeView:
    return container.dashboard_service.get_gauge(user_id, day or date.today())
