"""Drives a push SDK through enable, disable and session sync."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

SUBSCRIBE_PATH = "/push/subscribe"
REQUEST_FAILED_ERROR = "Subscription request failed"

_logger = logging.getLogger(__name__)


class PushSdk(Protocol):
    """Capabilities of the provider's device SDK."""

    async def init(self) -> str | None:
        """Initialise the SDK; return a failure reason, or None when ready."""

    async def request_permission(self) -> bool:
        """Ask the user for notification permission."""

    async def get_subscription_id(self) -> str | None:
        """Return the provider subscription id for this device."""

    async def is_enabled(self) -> bool:
        """Return True when the device is opted in."""

    async def opt_in(self) -> None:
        """Opt the device in to push."""

    async def opt_out(self) -> None:
        """Opt the device out of push."""


@dataclass(frozen=True)
class DeviceInfo:
    """Describes the registering device."""

    platform: str = "unknown"
    user_agent: str = "unknown"
    device_type: str = "web"


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of a registration flow step."""

    ok: bool
    reason: str | None = None
    subscription_id: str | None = None


@dataclass
class PushRegistrar:
    """Registers a signed-in device with the EvoShape subscribe endpoint."""

    sdk: PushSdk
    http_client: httpx.AsyncClient
    api_base_url: str
    access_token: str
    device: DeviceInfo

    @classmethod
    def create(
        cls,
        sdk: PushSdk,
        api_base_url: str,
        access_token: str,
        device: DeviceInfo,
    ) -> "PushRegistrar":
        """Create a registrar with a managed httpx session."""
        return cls(
            sdk=sdk,
            http_client=httpx.AsyncClient(),
            api_base_url=api_base_url,
            access_token=access_token,
            device=device,
        )

    async def enable(self) -> RegistrationResult:
        """Request permission, opt in and store the subscription."""
        reason = await self.sdk.init()
        if reason:
            return RegistrationResult(ok=False, reason=reason)
        if not await self.sdk.request_permission():
            return RegistrationResult(ok=False, reason="permission-denied")
        await self.sdk.opt_in()
        subscription_id = await self.sdk.get_subscription_id()
        if not subscription_id:
            return RegistrationResult(ok=False, reason="missing-subscription")
        return await self._register(subscription_id, is_enabled=True)

    async def disable(self) -> RegistrationResult:
        """Opt out and mark the stored subscription as disabled."""
        reason = await self.sdk.init()
        if reason:
            return RegistrationResult(ok=False, reason=reason)
        subscription_id = await self.sdk.get_subscription_id()
        await self.sdk.opt_out()
        if not subscription_id:
            return RegistrationResult(ok=True)
        return await self._register(subscription_id, is_enabled=False)

    async def sync(self) -> RegistrationResult:
        """Refresh the stored subscription when the device is opted in."""
        reason = await self.sdk.init()
        if reason:
            return RegistrationResult(ok=False, reason=reason)
        if not await self.sdk.is_enabled():
            return RegistrationResult(ok=False, reason="push-disabled")
        subscription_id = await self.sdk.get_subscription_id()
        if not subscription_id:
            return RegistrationResult(ok=False, reason="missing-subscription")
        return await self._register(subscription_id, is_enabled=True)

    async def close(self) -> None:
        await self.http_client.aclose()

    async def _register(
        self, subscription_id: str, is_enabled: bool
    ) -> RegistrationResult:
        url = f"{self.api_base_url.rstrip('/')}{SUBSCRIBE_PATH}"
        try:
            response = await self.http_client.post(
                url,
                headers={"Authorization": f"Bearer {self.access_token}"},
                json={
                    "subscriptionId": subscription_id,
                    "platform": self.device.platform,
                    "deviceType": self.device.device_type,
                    "userAgent": self.device.user_agent,
                    "isEnabled": is_enabled,
                },
                timeout=10,
            )
        except httpx.HTTPError as exc:
            _logger.warning("Push registration request failed: %s", exc)
            return RegistrationResult(
                ok=False, reason=REQUEST_FAILED_ERROR, subscription_id=subscription_id
            )
        if response.is_error:
            _logger.warning(
                "Push registration rejected: status=%s", response.status_code
            )
            return RegistrationResult(
                ok=False,
                reason=_error_message(response),
                subscription_id=subscription_id,
            )
        return RegistrationResult(ok=True, subscription_id=subscription_id)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return REQUEST_FAILED_ERROR
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return REQUEST_FAILED_ERROR
