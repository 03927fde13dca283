"""OneSignal REST API client."""

from dataclasses import dataclass

import httpx

from evoshape.domain.errors import PushProviderError

FALLBACK_ERROR = "OneSignal request failed"
LOCALES = ("en", "fr")


@dataclass
class HttpxOneSignalClient:
    """Sends notifications addressed by external user id."""

    app_id: str
    api_key: str
    api_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, app_id: str, api_key: str, api_url: str) -> "HttpxOneSignalClient":
        """Create a OneSignal client with a managed httpx session."""
        return cls(
            app_id=app_id,
            api_key=api_key,
            api_url=api_url,
            http_client=httpx.AsyncClient(),
        )

    async def send_to_external_user(
        self, external_user_id: str, title: str, body: str, url: str
    ) -> dict[str, object]:
        """Send one notification to every device of an external user."""
        payload = {
            "app_id": self.app_id,
            "include_external_user_ids": [external_user_id],
            "headings": {locale: title for locale in LOCALES},
            "contents": {locale: body for locale in LOCALES},
            "url": url,
        }
        try:
            response = await self.http_client.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Basic {self.api_key}"},
                timeout=10,
            )
        except httpx.HTTPError as exc:
            raise PushProviderError(str(exc) or FALLBACK_ERROR) from exc

        if response.is_error:
            raise PushProviderError(
                extract_provider_error(_json_or_none(response)),
                status_code=response.status_code,
            )
        return _json_or_none(response) or {}

    async def close(self) -> None:
        await self.http_client.aclose()


def extract_provider_error(payload: object) -> str:
    """Return a readable message from a OneSignal error body."""
    if not isinstance(payload, dict):
        return FALLBACK_ERROR
    error = payload.get("error")
    if error is not None:
        return str(error)
    errors = payload.get("errors")
    if isinstance(errors, list):
        return ", ".join(str(item) for item in errors)
    if isinstance(errors, dict):
        return ", ".join(f"{key}: {value}" for key, value in errors.items())
    return FALLBACK_ERROR


def _json_or_none(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return None
