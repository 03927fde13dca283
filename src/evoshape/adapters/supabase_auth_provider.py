"""Resolve Supabase access tokens to user ids."""

import logging
from dataclasses import dataclass

from supabase import Client
from supabase_auth.errors import AuthError

from evoshape.services.auth import AuthProvider

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthProvider(AuthProvider):
    """Validates tokens against Supabase Auth."""

    client: Client

    def get_user_id(self, access_token: str) -> str | None:
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            _logger.info("Rejected access token: %s", exc.message)
            return None
        if response is None or response.user is None:
            return None
        return str(response.user.id)
