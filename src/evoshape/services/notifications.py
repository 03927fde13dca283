"""Test push delivery and the in-app notification center."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from evoshape.domain.errors import PushProviderError, StorageError
from evoshape.domain.push import Notification, OutgoingNotification, PushResult

PUSH_ENV_MISSING_ERROR = "OneSignal server env missing"
DEFAULT_BODY = "Notification de test"
DEFAULT_URL = "/app/notifications"
PAGE_SIZE = 20

_logger = logging.getLogger(__name__)


class PushClient(Protocol):
    """Interface for the push provider."""

    async def send_to_external_user(
        self, external_user_id: str, title: str, body: str, url: str
    ) -> dict[str, object]:
        """Deliver a notification; raise PushProviderError on failure."""


class NotificationRepository(Protocol):
    """Persistence interface for the notification log."""

    def insert_notification(self, notification: OutgoingNotification) -> None:
        """Insert a sent notification."""

    def list_notifications(
        self, user_id: str, limit: int, offset: int
    ) -> list[Notification]:
        """Return non-deleted notifications, newest first."""

    def count_unread(self, user_id: str) -> int:
        """Return the number of unread, non-deleted notifications."""

    def mark_read(self, user_id: str, notification_id: str, read_at: datetime) -> None:
        """Set read_at on one notification."""

    def mark_all_read(self, user_id: str, read_at: datetime) -> None:
        """Set read_at on every unread, non-deleted notification."""

    def soft_delete(
        self, user_id: str, notification_id: str, deleted_at: datetime
    ) -> None:
        """Set deleted_at on one notification."""

    def soft_delete_all(self, user_id: str, deleted_at: datetime) -> None:
        """Set deleted_at on every non-deleted notification."""


@dataclass(frozen=True)
class NotificationPage:
    """A page of the notification center."""

    items: list[Notification]
    unread_count: int
    has_more: bool


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class NotificationService:
    """Sends test pushes and manages the notification center."""

    repository: NotificationRepository
    push_client: PushClient | None
    app_name: str = "EvoShape"
    clock: Callable[[], datetime] = field(default=_utc_now)

    async def send_test_notification(
        self, user_id: str, payload: Mapping[str, object]
    ) -> PushResult:
        """Send a push to the user's devices, then record it.

        The provider call comes first. A failed log insert after a successful
        send is logged and not reported, so delivery is at-most-once and the
        notification center is best effort.
        """
        if self.push_client is None:
            return PushResult(ok=False, status=500, error=PUSH_ENV_MISSING_ERROR)

        notification = OutgoingNotification(
            user_id=user_id,
            title=_clean(payload.get("title")) or self.app_name,
            body=_clean(payload.get("body")) or DEFAULT_BODY,
            url=_clean(payload.get("url")) or DEFAULT_URL,
        )
        try:
            await self.push_client.send_to_external_user(
                user_id, notification.title, notification.body, notification.url
            )
        except PushProviderError as exc:
            _logger.warning(
                "Push send failed: user_id=%s status=%s error=%s",
                user_id,
                exc.status_code,
                exc.message,
            )
            return PushResult(ok=False, status=500, error=exc.message)

        try:
            self.repository.insert_notification(notification)
        except StorageError as exc:
            _logger.warning(
                "Notification log insert failed after send: user_id=%s error=%s",
                user_id,
                exc.message,
            )
        return PushResult(ok=True, status=200)

    def list_page(
        self, user_id: str, limit: int = PAGE_SIZE, offset: int = 0
    ) -> NotificationPage:
        """Return a page of notifications with the unread count."""
        items = self.repository.list_notifications(user_id, limit, offset)
        return NotificationPage(
            items=items,
            unread_count=self.repository.count_unread(user_id),
            has_more=len(items) == limit and limit > 0,
        )

    def mark_read(self, user_id: str, notification_id: str) -> None:
        self.repository.mark_read(user_id, notification_id, self.clock())

    def mark_all_read(self, user_id: str) -> None:
        self.repository.mark_all_read(user_id, self.clock())

    def delete(self, user_id: str, notification_id: str) -> None:
        self.repository.soft_delete(user_id, notification_id, self.clock())

    def delete_all(self, user_id: str) -> None:
        self.repository.soft_delete_all(user_id, self.clock())


def _clean(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()
