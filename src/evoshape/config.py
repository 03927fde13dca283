"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    app_name: str = "EvoShape"
    onesignal_app_id: str = ""
    onesignal_rest_api_key: str = ""
    onesignal_api_url: str = "https://onesignal.com/api/v1/notifications"
    fdc_api_key: str = ""
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    off_base_url: str = "https://world.openfoodfacts.org/api/v2"
    wger_base_url: str = "https://wger.de/api/v2"
    undo_delay_seconds: float = 5.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def push_configured(self) -> bool:
        """Return True when both OneSignal server credentials are set."""
        return bool(
            self.onesignal_app_id.strip() and self.onesignal_rest_api_key.strip()
        )


def parse_limit(raw: str | int | None, default: int, maximum: int) -> int:
    """Parse a limit query value and clamp it to ``1..maximum``."""
    try:
        value = int(raw) if raw is not None else default
    except (TypeError, ValueError):
        value = default
    return min(max(value, 1), maximum)
