"""Supabase repository for the notification center."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from evoshape.adapters.supabase_errors import parse_datetime, storage_errors
from evoshape.domain.push import Notification, OutgoingNotification
from evoshape.services.notifications import NotificationRepository

_COLUMNS = "id, user_id, title, body, url, sent_at, read_at, deleted_at, source, data"


@dataclass
class SupabaseNotificationRepository(NotificationRepository):
    """Supabase implementation for the notifications table.

    Deletion is soft: rows keep their data and get ``deleted_at`` set, and
    every read filters those rows out.
    """

    client: Client

    def insert_notification(self, notification: OutgoingNotification) -> None:
        with storage_errors():
            self.client.table("notifications").insert(
                {
                    "user_id": notification.user_id,
                    "title": notification.title,
                    "body": notification.body,
                    "url": notification.url,
                    "source": notification.source,
                }
            ).execute()

    def list_notifications(
        self, user_id: str, limit: int, offset: int
    ) -> list[Notification]:
        with storage_errors():
            response = (
                self.client.table("notifications")
                .select(_COLUMNS)
                .eq("user_id", user_id)
                .is_("deleted_at", "null")
                .order("sent_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        return [_parse_notification(row) for row in response.data or []]

    def count_unread(self, user_id: str) -> int:
        with storage_errors():
            response = (
                self.client.table("notifications")
                .select("id", count="exact")
                .eq("user_id", user_id)
                .is_("read_at", "null")
                .is_("deleted_at", "null")
                .execute()
            )
        return response.count or 0

    def mark_read(self, user_id: str, notification_id: str, read_at: datetime) -> None:
        with storage_errors():
            self.client.table("notifications").update(
                {"read_at": read_at.isoformat()}
            ).eq("id", notification_id).eq("user_id", user_id).execute()

    def mark_all_read(self, user_id: str, read_at: datetime) -> None:
        with storage_errors():
            self.client.table("notifications").update(
                {"read_at": read_at.isoformat()}
            ).eq("user_id", user_id).is_("read_at", "null").is_(
                "deleted_at", "null"
            ).execute()

    def soft_delete(
        self, user_id: str, notification_id: str, deleted_at: datetime
    ) -> None:
        with storage_errors():
            self.client.table("notifications").update(
                {"deleted_at": deleted_at.isoformat()}
            ).eq("id", notification_id).eq("user_id", user_id).execute()

    def soft_delete_all(self, user_id: str, deleted_at: datetime) -> None:
        with storage_errors():
            self.client.table("notifications").update(
                {"deleted_at": deleted_at.isoformat()}
            ).eq("user_id", user_id).is_("deleted_at", "null").execute()


def _parse_notification(row: dict[str, object]) -> Notification:
    return Notification(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        title=str(row.get("title") or ""),
        body=str(row.get("body") or ""),
        url=row.get("url"),
        sent_at=parse_datetime(row.get("sent_at")),
        read_at=parse_datetime(row.get("read_at")),
        deleted_at=parse_datetime(row.get("deleted_at")),
        source=str(row.get("source") or "onesignal"),
        data=row.get("data") or {},
    )
