"""Push subscription and test-send endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from evoshape.api.dependencies import get_container, require_user
from evoshape.containers import AppContainer
from evoshape.domain.push import PushResult
from evoshape.services.notifications import PUSH_ENV_MISSING_ERROR

INVALID_JSON_ERROR = "Invalid JSON payload"

router = APIRouter(prefix="/push", tags=["push"])


@router.post("/subscribe")
async def subscribe(
    request: Request,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    """Register or update the caller's browser subscription."""
    payload = await _read_json(request)
    result = container.subscription_service.upsert_subscription(user_id, payload)
    return _ok_or_raise(result)


@router.post("/send-test")
async def send_test(
    request: Request,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    """Send a test notification to every device of the caller."""
    if not container.settings.push_configured:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PUSH_ENV_MISSING_ERROR,
        )
    payload = await _read_json(request)
    result = await container.notification_service.send_test_notification(
        user_id, payload
    )
    return _ok_or_raise(result)


async def _read_json(request: Request) -> dict[str, object]:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_JSON_ERROR
        ) from exc
    return payload if isinstance(payload, dict) else {}


def _ok_or_raise(result: PushResult) -> dict[str, bool]:
    if not result.ok:
        raise HTTPException(status_code=result.status, detail=result.error)
    return {"ok": True}
