"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from evoshape.adapters.fdc_client import HttpxFdcClient
from evoshape.adapters.onesignal_client import HttpxOneSignalClient
from evoshape.adapters.open_food_facts_client import HttpxOpenFoodFactsClient
from evoshape.adapters.supabase_activity_repository import SupabaseActivityRepository
from evoshape.adapters.supabase_auth_provider import SupabaseAuthProvider
from evoshape.adapters.supabase_meal_log_repository import (
    SupabaseMealLogRepository,
    SupabaseMealTemplateRepository,
)
from evoshape.adapters.supabase_notification_repository import (
    SupabaseNotificationRepository,
)
from evoshape.adapters.supabase_profile_repository import SupabaseProfileRepository
from evoshape.adapters.supabase_push_subscription_repository import (
    SupabasePushSubscriptionRepository,
)
from evoshape.adapters.supabase_weight_repository import SupabaseWeightRepository
from evoshape.adapters.wger_client import HttpxWgerClient
from evoshape.config import Settings
from evoshape.services.activities import ActivityLogService
from evoshape.services.auth import AuthService
from evoshape.services.cache import TtlCache
from evoshape.services.catalog import ExerciseCatalogService, FoodCatalogService
from evoshape.services.dashboard import DashboardService
from evoshape.services.meals import MealLogService
from evoshape.services.notifications import NotificationService
from evoshape.services.profiles import ProfileService
from evoshape.services.subscriptions import PushSubscriptionService
from evoshape.services.undo import DeferredDeletions
from evoshape.services.weights import WeightService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    weight_service: WeightService
    meal_log_service: MealLogService
    activity_log_service: ActivityLogService
    profile_service: ProfileService
    dashboard_service: DashboardService
    subscription_service: PushSubscriptionService
    notification_service: NotificationService
    food_catalog_service: FoodCatalogService
    exercise_catalog_service: ExerciseCatalogService
    deletions: DeferredDeletions
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    deletions = DeferredDeletions(delay_seconds=resolved_settings.undo_delay_seconds)

    weight_service = WeightService(SupabaseWeightRepository(supabase_client))
    meal_log_service = MealLogService(
        repository=SupabaseMealLogRepository(supabase_client),
        templates=SupabaseMealTemplateRepository(supabase_client),
        deletions=deletions,
    )
    activity_log_service = ActivityLogService(
        repository=SupabaseActivityRepository(supabase_client),
        weight_service=weight_service,
    )
    profile_service = ProfileService(SupabaseProfileRepository(supabase_client))
    dashboard_service = DashboardService(
        meal_log_service=meal_log_service,
        activity_log_service=activity_log_service,
        weight_service=weight_service,
        profile_service=profile_service,
    )

    push_client = None
    if resolved_settings.push_configured:
        push_client = HttpxOneSignalClient.create(
            app_id=resolved_settings.onesignal_app_id.strip(),
            api_key=resolved_settings.onesignal_rest_api_key.strip(),
            api_url=resolved_settings.onesignal_api_url,
        )
    notification_service = NotificationService(
        repository=SupabaseNotificationRepository(supabase_client),
        push_client=push_client,
        app_name=resolved_settings.app_name,
    )
    subscription_service = PushSubscriptionService(
        SupabasePushSubscriptionRepository(supabase_client)
    )

    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    off_client = HttpxOpenFoodFactsClient.create(resolved_settings.off_base_url)
    wger_client = HttpxWgerClient.create(resolved_settings.wger_base_url)
    food_catalog_service = FoodCatalogService(
        fdc_client=fdc_client, off_client=off_client, cache=TtlCache()
    )
    exercise_catalog_service = ExerciseCatalogService(
        client=wger_client, cache=TtlCache()
    )

    async def close_resources() -> None:
        deletions.flush()
        await fdc_client.close()
        await off_client.close()
        await wger_client.close()
        if push_client is not None:
            await push_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(SupabaseAuthProvider(supabase_client)),
        weight_service=weight_service,
        meal_log_service=meal_log_service,
        activity_log_service=activity_log_service,
        profile_service=profile_service,
        dashboard_service=dashboard_service,
        subscription_service=subscription_service,
        notification_service=notification_service,
        food_catalog_service=food_catalog_service,
        exercise_catalog_service=exercise_catalog_service,
        deletions=deletions,
        close_resources=close_resources,
    )
