"""Notification center endpoints."""

from fastapi import APIRouter, Depends

from evoshape.api.dependencies import get_container, require_user
from evoshape.config import parse_limit
from evoshape.containers import AppContainer
from evoshape.services.notifications import PAGE_SIZE

MAX_PAGE_SIZE = 100

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(
    limit: str | None = None,
    offset: int = 0,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return a page of notifications, newest first, with the unread count."""
    page = container.notification_service.list_page(
        user_id,
        limit=parse_limit(limit, PAGE_SIZE, MAX_PAGE_SIZE),
        offset=max(offset, 0),
    )
    return {
        "items": page.items,
        "unread_count": page.unread_count,
        "has_more": page.has_more,
    }


@router.post("/read-all")
async def mark_all_read(
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    container.notification_service.mark_all_read(user_id)
    return {"ok": True}


@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    container.notification_service.mark_read(user_id, notification_id)
    return {"ok": True}


@router.delete("")
async def delete_all(
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    """Soft-delete every notification of the caller."""
    container.notification_service.delete_all(user_id)
    return {"ok": True}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    user_id: str = Depends(require_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, bool]:
    container.notification_service.delete(user_id, notification_id)
    return {"ok": True}
