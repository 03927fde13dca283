"""Shared FastAPI dependencies."""

from fastapi import Depends, Header, HTTPException, Request, status

from evoshape.containers import AppContainer

UNAUTHORIZED_ERROR = "Unauthorized"


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> str:
    """Return the caller's user id from a Supabase access token."""
    user_id = container.auth_service.authenticate(authorization)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_ERROR
        )
    return user_id
