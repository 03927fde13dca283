"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta

import pytest

from evoshape.config import Settings
from evoshape.containers import AppContainer
from evoshape.domain.errors import PushProviderError, StorageError, UpstreamError
from evoshape.domain.logs import ActivityLog, MealLog, MealTemplate, WeightEntry
from evoshape.domain.profiles import Profile
from evoshape.domain.push import (
    Notification,
    OutgoingNotification,
    PushSubscriptionRecord,
)
from evoshape.services.activities import ActivityLogRepository, ActivityLogService
from evoshape.services.auth import AuthProvider, AuthService
from evoshape.services.cache import TtlCache
from evoshape.services.catalog import ExerciseCatalogService, FoodCatalogService
from evoshape.services.dashboard import DashboardService
from evoshape.services.meals import (
    MealLogRepository,
    MealLogService,
    MealTemplateRepository,
)
from evoshape.services.notifications import NotificationRepository, NotificationService
from evoshape.services.profiles import ProfileRepository, ProfileService
from evoshape.services.subscriptions import (
    PushSubscriptionRepository,
    PushSubscriptionService,
)
from evoshape.services.undo import DeferredDeletions
from evoshape.services.weights import WeightRepository, WeightService

USER_ID = "user-1"
TOKEN = "token-user-1"
FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


@dataclass
class InMemoryWeightRepository(WeightRepository):
    """In-memory weight repository for tests."""

    entries: list[WeightEntry] = field(default_factory=list)
    next_id: int = 1

    def list_weights(self, user_id: str, limit: int) -> list[WeightEntry]:
        owned = [entry for entry in self.entries if entry.user_id == user_id]
        owned.sort(key=lambda entry: entry.recorded_at, reverse=True)
        return owned[:limit]

    def upsert_weight(
        self, user_id: str, recorded_at: date, weight_kg: float
    ) -> WeightEntry:
        for index, entry in enumerate(self.entries):
            if entry.user_id == user_id and entry.recorded_at == recorded_at:
                updated = replace(entry, weight_kg=weight_kg)
                self.entries[index] = updated
                return updated
        entry = WeightEntry(
            id=self.next_id, user_id=user_id, recorded_at=recorded_at, weight_kg=weight_kg
        )
        self.next_id += 1
        self.entries.append(entry)
        return entry

    def delete_weight(self, user_id: str, entry_id: int) -> None:
        self.entries = [
            entry
            for entry in self.entries
            if not (entry.user_id == user_id and entry.id == entry_id)
        ]


@dataclass
class InMemoryMealLogRepository(MealLogRepository):
    """In-memory meal log repository for tests."""

    meals: dict[int, MealLog] = field(default_factory=dict)
    next_id: int = 1
    fail_delete: bool = False

    def list_meals(self, user_id: str, start: date, end: date) -> list[MealLog]:
        owned = [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and start <= meal.recorded_at <= end
        ]
        return sorted(owned, key=lambda meal: (meal.recorded_at, meal.id), reverse=True)

    def get_meal(self, user_id: str, meal_id: int) -> MealLog | None:
        meal = self.meals.get(meal_id)
        return meal if meal and meal.user_id == user_id else None

    def create_meal(self, user_id: str, payload: dict[str, object]) -> MealLog:
        meal = MealLog(
            id=self.next_id,
            user_id=user_id,
            recorded_at=date.fromisoformat(str(payload["recorded_at"])),
            meal_type=str(payload["meal_type"]),
            name=payload.get("name"),
            calories=payload.get("calories"),
            template_id=payload.get("template_id"),
        )
        self.meals[meal.id] = meal
        self.next_id += 1
        return meal

    def update_meal(
        self, user_id: str, meal_id: int, payload: dict[str, object]
    ) -> MealLog | None:
        meal = self.get_meal(user_id, meal_id)
        if meal is None:
            return None
        changes = dict(payload)
        if "recorded_at" in changes:
            changes["recorded_at"] = date.fromisoformat(str(changes["recorded_at"]))
        updated = replace(meal, **changes)
        self.meals[meal_id] = updated
        return updated

    def delete_meal(self, user_id: str, meal_id: int) -> None:
        if self.fail_delete:
            raise StorageError("delete failed")
        if self.get_meal(user_id, meal_id):
            del self.meals[meal_id]


@dataclass
class InMemoryMealTemplateRepository(MealTemplateRepository):
    """In-memory meal template repository for tests."""

    templates: dict[int, MealTemplate] = field(default_factory=dict)
    next_id: int = 1

    def list_templates(self, user_id: str) -> list[MealTemplate]:
        owned = [item for item in self.templates.values() if item.user_id == user_id]
        return sorted(owned, key=lambda item: item.id, reverse=True)

    def get_template(self, user_id: str, template_id: int) -> MealTemplate | None:
        template = self.templates.get(template_id)
        return template if template and template.user_id == user_id else None

    def create_template(self, user_id: str, payload: dict[str, object]) -> MealTemplate:
        template = MealTemplate(id=self.next_id, user_id=user_id, **payload)
        self.templates[template.id] = template
        self.next_id += 1
        return template

    def update_template(
        self, user_id: str, template_id: int, payload: dict[str, object]
    ) -> MealTemplate | None:
        template = self.get_template(user_id, template_id)
        if template is None:
            return None
        updated = replace(template, **payload)
        self.templates[template_id] = updated
        return updated

    def delete_template(self, user_id: str, template_id: int) -> None:
        if self.get_template(user_id, template_id):
            del self.templates[template_id]


@dataclass
class InMemoryActivityRepository(ActivityLogRepository):
    """In-memory activity repository for tests."""

    activities: dict[int, ActivityLog] = field(default_factory=dict)
    next_id: int = 1

    def list_activities(self, user_id: str, start: date, end: date) -> list[ActivityLog]:
        return [
            activity
            for activity in self.activities.values()
            if activity.user_id == user_id and start <= activity.recorded_at <= end
        ]

    def create_activity(self, user_id: str, payload: dict[str, object]) -> ActivityLog:
        activity = ActivityLog(
            id=self.next_id,
            user_id=user_id,
            recorded_at=date.fromisoformat(str(payload["recorded_at"])),
            activity_type=str(payload["activity_type"]),
            duration_min=payload.get("duration_min"),
            calories_burned=payload.get("calories_burned"),
        )
        self.activities[activity.id] = activity
        self.next_id += 1
        return activity

    def delete_activity(self, user_id: str, activity_id: int) -> None:
        activity = self.activities.get(activity_id)
        if activity and activity.user_id == user_id:
            del self.activities[activity_id]


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[str, Profile] = field(default_factory=dict)
    updated_at: dict[str, datetime] = field(default_factory=dict)

    def get_profile(self, user_id: str) -> Profile | None:
        return self.profiles.get(user_id)

    def upsert_profile(self, profile: Profile, updated_at: datetime) -> None:
        self.profiles[profile.id] = profile
        self.updated_at[profile.id] = updated_at


@dataclass
class InMemoryPushSubscriptionRepository(PushSubscriptionRepository):
    """In-memory push subscription repository keyed like the real table."""

    rows: dict[tuple[str, str], PushSubscriptionRecord] = field(default_factory=dict)
    error: str | None = None

    def upsert_subscription(self, record: PushSubscriptionRecord) -> None:
        if self.error:
            raise StorageError(self.error)
        self.rows[(record.user_id, record.onesignal_subscription_id)] = record


@dataclass
class InMemoryNotificationRepository(NotificationRepository):
    """In-memory notification repository with soft deletion."""

    rows: list[Notification] = field(default_factory=list)
    insert_error: str | None = None

    def insert_notification(self, notification: OutgoingNotification) -> None:
        if self.insert_error:
            raise StorageError(self.insert_error)
        self.rows.append(
            Notification(
                id=str(len(self.rows) + 1),
                user_id=notification.user_id,
                title=notification.title,
                body=notification.body,
                url=notification.url,
                sent_at=FIXED_NOW + timedelta(minutes=len(self.rows)),
                source=notification.source,
            )
        )

    def list_notifications(
        self, user_id: str, limit: int, offset: int
    ) -> list[Notification]:
        visible = self._visible(user_id)
        visible.sort(key=lambda row: row.sent_at, reverse=True)
        return visible[offset : offset + limit]

    def count_unread(self, user_id: str) -> int:
        return sum(1 for row in self._visible(user_id) if row.read_at is None)

    def mark_read(self, user_id: str, notification_id: str, read_at: datetime) -> None:
        self._update(
            lambda row: row.id == notification_id and row.user_id == user_id,
            read_at=read_at,
        )

    def mark_all_read(self, user_id: str, read_at: datetime) -> None:
        self._update(
            lambda row: row.user_id == user_id
            and row.read_at is None
            and row.deleted_at is None,
            read_at=read_at,
        )

    def soft_delete(
        self, user_id: str, notification_id: str, deleted_at: datetime
    ) -> None:
        self._update(
            lambda row: row.id == notification_id and row.user_id == user_id,
            deleted_at=deleted_at,
        )

    def soft_delete_all(self, user_id: str, deleted_at: datetime) -> None:
        self._update(
            lambda row: row.user_id == user_id and row.deleted_at is None,
            deleted_at=deleted_at,
        )

    def _visible(self, user_id: str) -> list[Notification]:
        return [
            row for row in self.rows if row.user_id == user_id and row.deleted_at is None
        ]

    def _update(self, predicate, **changes) -> None:  # type: ignore[no-untyped-def]
        self.rows = [
            replace(row, **changes) if predicate(row) else row for row in self.rows
        ]


@dataclass
class FakeAuthProvider(AuthProvider):
    """Accepts a fixed set of tokens."""

    tokens: dict[str, str] = field(default_factory=lambda: {TOKEN: USER_ID})

    def get_user_id(self, access_token: str) -> str | None:
        return self.tokens.get(access_token)


@dataclass
class FakePushClient:
    """Fake push provider that records sends."""

    sent: list[dict[str, str]] = field(default_factory=list)
    error: PushProviderError | None = None

    async def send_to_external_user(
        self, external_user_id: str, title: str, body: str, url: str
    ) -> dict[str, object]:
        if self.error:
            raise self.error
        self.sent.append(
            {"external_user_id": external_user_id, "title": title, "body": body, "url": url}
        )
        return {"id": "notif-1", "recipients": 1}


@dataclass
class FakeFdcClient:
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 123456,
                    "description": "Greek yogurt",
                    "brandOwner": "Fage",
                    "dataType": "Branded",
                }
            ]
        }
    )
    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 123456,
            "description": "Greek yogurt",
            "brandOwner": "Fage",
            "dataType": "Branded",
            "servingSize": 170,
            "servingSizeUnit": "g",
            "labelNutrients": {"calories": {"value": 170}},
            "foodNutrients": [
                {"nutrient": {"number": "208", "unitName": "kcal"}, "amount": 100}
            ],
        }
    )
    food_calls: int = 0
    search_calls: list[tuple[str, int]] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 8) -> dict[str, object]:
        self.search_calls.append((query, page_size))
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        return self.food_payload


@dataclass
class FakeOpenFoodFactsClient:
    """Fake Open Food Facts client keyed by barcode."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "3017620422003": {
                "status": 1,
                "product": {
                    "product_name": "Nutella",
                    "brands": "Ferrero",
                    "serving_size": "15 g",
                    "nutriments": {
                        "energy-kcal_100g": 539,
                        "energy-kcal_serving": 80.9,
                    },
                },
            }
        }
    )

    async def get_product(self, code: str) -> dict[str, object]:
        return self.products.get(code, {"status": 0})


@dataclass
class FakeWgerClient:
    """Fake wger client serving pre-built pages."""

    pages: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "page-1": {
                "results": [
                    {
                        "id": 1,
                        "translations": [{"name": "Squat"}, {"name": "Squat barre"}],
                        "category": {"name": "Legs"},
                        "equipment": [{"name": "Barbell"}],
                    },
                    {
                        "id": 2,
                        "translations": [{"name": "Bench press"}],
                        "category": {"name": "Chest"},
                        "equipment": [],
                    },
                ],
                "next": "page-2",
            },
            "page-2": {
                "results": [
                    {
                        "id": 3,
                        "translations": [{"name": "Goblet squat"}],
                        "category": None,
                        "equipment": [{"name": "Kettlebell"}, {"name": None}],
                    }
                ],
                "next": None,
            },
        }
    )
    fetched: list[str] = field(default_factory=list)
    failing_url: str | None = None

    def first_page_url(self, page_size: int) -> str:
        return "page-1"

    async def fetch_page(self, url: str) -> dict[str, object]:
        self.fetched.append(url)
        if url == self.failing_url:
            raise UpstreamError("wger request failed", 503)
        return self.pages[url]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        onesignal_app_id="app-id",
        onesignal_rest_api_key="rest-key",
        fdc_api_key="fdc-key",
        undo_delay_seconds=5.0,
    )


@pytest.fixture
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def container(settings: Settings, push_client: FakePushClient) -> AppContainer:
    deletions = DeferredDeletions(delay_seconds=settings.undo_delay_seconds)
    weight_service = WeightService(InMemoryWeightRepository())
    meal_log_service = MealLogService(
        repository=InMemoryMealLogRepository(),
        templates=InMemoryMealTemplateRepository(),
        deletions=deletions,
    )
    activity_log_service = ActivityLogService(
        repository=InMemoryActivityRepository(), weight_service=weight_service
    )
    profile_service = ProfileService(InMemoryProfileRepository(), clock=fixed_clock)

    async def close_resources() -> None:
        deletions.flush()

    return AppContainer(
        settings=settings,
        auth_service=AuthService(FakeAuthProvider()),
        weight_service=weight_service,
        meal_log_service=meal_log_service,
        activity_log_service=activity_log_service,
        profile_service=profile_service,
        dashboard_service=DashboardService(
            meal_log_service=meal_log_service,
            activity_log_service=activity_log_service,
            weight_service=weight_service,
            profile_service=profile_service,
        ),
        subscription_service=PushSubscriptionService(
            InMemoryPushSubscriptionRepository(), clock=fixed_clock
        ),
        notification_service=NotificationService(
            repository=InMemoryNotificationRepository(),
            push_client=push_client,
            app_name=settings.app_name,
            clock=fixed_clock,
        ),
        food_catalog_service=FoodCatalogService(
            fdc_client=FakeFdcClient(),
            off_client=FakeOpenFoodFactsClient(),
            cache=TtlCache(),
        ),
        exercise_catalog_service=ExerciseCatalogService(
            client=FakeWgerClient(), cache=TtlCache()
        ),
        deletions=deletions,
        close_resources=close_resources,
    )


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TOKEN}"}
