"""Supabase repository for push subscriptions."""

from dataclasses import dataclass

from supabase import Client

from evoshape.adapters.supabase_errors import storage_errors
from evoshape.domain.push import PushSubscriptionRecord
from evoshape.services.subscriptions import PushSubscriptionRepository


@dataclass
class SupabasePushSubscriptionRepository(PushSubscriptionRepository):
    """Supabase implementation for the push_subscriptions table."""

    client: Client

    def upsert_subscription(self, record: PushSubscriptionRecord) -> None:
        """Insert or update the row keyed on user and subscription id."""
        with storage_errors():
            self.client.table("push_subscriptions").upsert(
                {
                    "user_id": record.user_id,
                    "onesignal_subscription_id": record.onesignal_subscription_id,
                    "platform": record.platform,
                    "device_type": record.device_type,
                    "user_agent": record.user_agent,
                    "is_enabled": record.is_enabled,
                    "external_user_id": record.external_user_id,
                    "updated_at": record.updated_at.isoformat(),
                },
                on_conflict="user_id,onesignal_subscription_id",
            ).execute()
