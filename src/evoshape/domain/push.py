"""Domain models for push subscriptions and notifications."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class SubscriptionPayload:
    """Canonical push registration after validation."""

    subscription_id: str
    platform: str
    device_type: str
    user_agent: str
    is_enabled: bool


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a subscription registration."""

    ok: bool
    payload: SubscriptionPayload | None = None
    error: str | None = None


@dataclass(frozen=True)
class PushResult:
    """Outcome of a push handler, with an HTTP-like status."""

    ok: bool
    status: int
    error: str | None = None


@dataclass(frozen=True)
class PushSubscriptionRecord:
    """Row written to push_subscriptions."""

    user_id: str
    onesignal_subscription_id: str
    platform: str
    device_type: str
    user_agent: str | None
    is_enabled: bool
    external_user_id: str
    updated_at: datetime


@dataclass(frozen=True)
class OutgoingNotification:
    """A notification about to be sent and logged."""

    user_id: str
    title: str
    body: str
    url: str
    source: str = "onesignal"


@dataclass(frozen=True)
class Notification:
    """Notification center entry."""

    id: str
    user_id: str
    title: str
    body: str
    url: str | None
    sent_at: datetime | None
    read_at: datetime | None = None
    deleted_at: datetime | None = None
    source: str = "onesignal"
    data: dict[str, object] = field(default_factory=dict)
