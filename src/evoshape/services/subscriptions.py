"""Push subscription validation and persistence."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from evoshape.domain.errors import StorageError
from evoshape.domain.push import (
    PushResult,
    PushSubscriptionRecord,
    SubscriptionPayload,
    ValidationResult,
)

REQUIRED_FIELDS_ERROR = "subscriptionId and platform are required"
DEFAULT_DEVICE_TYPE = "web"

_logger = logging.getLogger(__name__)


class PushSubscriptionRepository(Protocol):
    """Persistence interface for push subscriptions."""

    def upsert_subscription(self, record: PushSubscriptionRecord) -> None:
        """Insert or update the row keyed on user and subscription id."""


def validate_subscription_input(payload: Mapping[str, object]) -> ValidationResult:
    """Normalize a registration payload sent by a browser."""
    subscription_id = _clean(payload.get("subscriptionId"))
    platform = _clean(payload.get("platform"))
    device_type = _clean(payload.get("deviceType")) or DEFAULT_DEVICE_TYPE
    user_agent = _clean(payload.get("userAgent"))
    is_enabled = payload.get("isEnabled")
    if not isinstance(is_enabled, bool):
        is_enabled = True

    if not subscription_id or not platform:
        return ValidationResult(ok=False, error=REQUIRED_FIELDS_ERROR)

    return ValidationResult(
        ok=True,
        payload=SubscriptionPayload(
            subscription_id=subscription_id,
            platform=platform,
            device_type=device_type,
            user_agent=user_agent,
            is_enabled=is_enabled,
        ),
    )


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class PushSubscriptionService:
    """Registers browser push subscriptions for a user."""

    repository: PushSubscriptionRepository
    clock: Callable[[], datetime] = field(default=_utc_now)

    def upsert_subscription(
        self, user_id: str, payload: Mapping[str, object]
    ) -> PushResult:
        """Validate and persist a subscription; never raises."""
        validation = validate_subscription_input(payload)
        if not validation.ok or validation.payload is None:
            return PushResult(ok=False, status=400, error=validation.error)

        subscription = validation.payload
        record = PushSubscriptionRecord(
            user_id=user_id,
            onesignal_subscription_id=subscription.subscription_id,
            platform=subscription.platform,
            device_type=subscription.device_type,
            user_agent=subscription.user_agent or None,
            is_enabled=subscription.is_enabled,
            external_user_id=user_id,
            updated_at=self.clock(),
        )
        try:
            self.repository.upsert_subscription(record)
        except StorageError as exc:
            _logger.error(
                "Push subscription upsert failed: user_id=%s error=%s",
                user_id,
                exc.message,
            )
            return PushResult(ok=False, status=500, error=exc.message)
        return PushResult(ok=True, status=200)


def _clean(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()
