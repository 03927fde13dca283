"""Session authentication."""

from dataclasses import dataclass
from typing import Protocol


class AuthProvider(Protocol):
    """Resolves an access token to a user id."""

    def get_user_id(self, access_token: str) -> str | None:
        """Return the user id for a valid token, or None."""


@dataclass
class AuthService:
    """Authenticates requests from their bearer token."""

    provider: AuthProvider

    def authenticate(self, authorization: str | None) -> str | None:
        """Return the user id for an ``Authorization: Bearer`` header value."""
        token = _bearer_token(authorization)
        if token is None:
            return None
        return self.provider.get_user_id(token)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
